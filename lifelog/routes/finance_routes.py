from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import Literal, Optional

from lifelog.auth import get_current_user
from lifelog.clock import Clock, get_clock, parse_query_date, to_storage_datetime
from lifelog.database import get_db
from lifelog.services.finance_service import FinanceService

router = APIRouter(prefix="/api/v1/transactions", tags=["Finance"])


class TransactionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["income", "expense"]
    amount: float = Field(gt=0)
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[str] = None
    entry_id: Optional[int] = Field(None, alias="entryId")


class TransactionUpdate(BaseModel):
    type: Optional[Literal["income", "expense"]] = None
    amount: Optional[float] = Field(None, gt=0)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[str] = None


@router.get("")
async def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: str = "",
    category: str = "",
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    q: str = "",
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return FinanceService.get_page(
        db, user_id, clock,
        page=page, limit=limit, type=type, category=category,
        date_from=parse_query_date(date_from, "dateFrom", clock),
        date_to=parse_query_date(date_to, "dateTo", clock),
        q=q,
    )


@router.post("", status_code=201)
async def create_transaction(
    transaction_data: TransactionCreate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    data = transaction_data.model_dump()
    t = FinanceService.create(db, user_id, data, to_storage_datetime(transaction_data.date, clock))
    return t.to_dict()


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    data = transaction_data.model_dump(exclude_unset=True)
    when = to_storage_datetime(data.pop("date"), clock) if data.get("date") else None
    return FinanceService.update(db, user_id, transaction_id, data, when).to_dict()


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    FinanceService.delete(db, user_id, transaction_id)
    return {"message": "Transaction deleted"}

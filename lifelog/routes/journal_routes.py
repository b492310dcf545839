from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import Literal, Optional, List

from lifelog.auth import get_current_user
from lifelog.clock import Clock, get_clock, to_storage_datetime
from lifelog.database import get_db
from lifelog.services.journal_service import JournalService, TagService, serialize_entry, serialize_tag

router = APIRouter(prefix="/api/v1", tags=["Journal"])


# ── Pydantic schemas ──────────────────────────────────────────────
class InlineTransaction(BaseModel):
    type: Literal["income", "expense"]
    amount: float = Field(gt=0)
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)


class EntryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: str = Field(min_length=1)
    mood: str = Field(min_length=1, max_length=50)
    highlight: Optional[str] = None
    gratitude: Optional[str] = None
    expense: Optional[float] = Field(None, ge=0)
    expense_title: Optional[str] = Field(None, alias="expenseTitle")
    expense_type: Optional[str] = Field(None, alias="expenseType")
    entry_date: Optional[str] = Field(None, alias="entryDate")
    tag_ids: Optional[List[int]] = Field(None, alias="tagIds")
    transactions: Optional[List[InlineTransaction]] = None


class EntryUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    mood: Optional[str] = Field(None, min_length=1, max_length=50)
    highlight: Optional[str] = None
    gratitude: Optional[str] = None
    expense: Optional[float] = Field(None, ge=0)
    expense_title: Optional[str] = Field(None, alias="expenseTitle")
    expense_type: Optional[str] = Field(None, alias="expenseType")
    entry_date: Optional[str] = Field(None, alias="entryDate")
    tag_ids: Optional[List[int]] = Field(None, alias="tagIds")
    transactions: Optional[List[InlineTransaction]] = None


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


# ── Memories ──────────────────────────────────────────────────────
@router.get("/memories")
async def list_memories(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    q: str = "",
    mood: str = "",
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return JournalService.get_page(db, user_id, page=page, limit=limit, q=q, mood=mood)


@router.post("/memories", status_code=201)
async def create_memory(
    entry_data: EntryCreate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    data = entry_data.model_dump()
    entry = JournalService.create(db, user_id, data, to_storage_datetime(entry_data.entry_date, clock))
    return serialize_entry(entry)


@router.get("/memories/{entry_id}")
async def get_memory(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return serialize_entry(JournalService.get(db, user_id, entry_id))


@router.put("/memories/{entry_id}")
async def update_memory(
    entry_id: int,
    entry_data: EntryUpdate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    data = entry_data.model_dump(exclude_unset=True)
    entry_date = to_storage_datetime(data.pop("entry_date"), clock) if data.get("entry_date") else None
    return serialize_entry(JournalService.update(db, user_id, entry_id, data, entry_date))


@router.delete("/memories/{entry_id}")
async def delete_memory(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    JournalService.delete(db, user_id, entry_id)
    return {"message": "Memory deleted"}


@router.post("/memories/{entry_id}/favorite")
async def toggle_favorite(entry_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"favorited": JournalService.toggle_favorite(db, user_id, entry_id)}


# ── Tags ──────────────────────────────────────────────────────────
@router.get("/tags")
async def list_tags(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return [serialize_tag(t) for t in TagService.get_all(db, user_id)]


@router.post("/tags", status_code=201)
async def create_tag(tag_data: TagCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return serialize_tag(TagService.create(db, user_id, tag_data.name, tag_data.color))

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import Optional

from lifelog.auth import get_current_user
from lifelog.clock import Clock, get_clock
from lifelog.database import get_db
from lifelog.services.analytics_service import AnalyticsService
from lifelog.services.habit_service import HabitService

router = APIRouter(prefix="/api/v1/habits", tags=["Habits"])


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class HabitUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = Field(None, alias="isActive")


@router.get("")
async def list_habits(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Active habits with today's completion flag."""
    return AnalyticsService.get_habit_list(db, user_id, clock)


@router.post("", status_code=201)
async def create_habit(habit_data: HabitCreate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return HabitService.create(db, user_id, habit_data.name).to_dict()


@router.get("/streaks")
async def habit_streaks(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return HabitService.get_streaks(db, user_id, clock.today())


@router.put("/{habit_id}")
async def update_habit(habit_id: int, habit_data: HabitUpdate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    data = habit_data.model_dump(exclude_unset=True)
    return HabitService.update(db, user_id, habit_id, data).to_dict()


@router.delete("/{habit_id}")
async def delete_habit(habit_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    HabitService.delete(db, user_id, habit_id)
    return {"message": "Habit deleted"}


@router.post("/{habit_id}/log")
async def toggle_habit_log(
    habit_id: int,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Toggle today's log: first call marks it done (201), later calls flip it."""
    log, created = HabitService.toggle_log(db, user_id, habit_id, clock.today())
    return JSONResponse(status_code=201 if created else 200, content=log.to_dict())

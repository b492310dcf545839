from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from lifelog.auth import get_current_user
from lifelog.clock import Clock, get_clock, parse_query_date
from lifelog.database import get_db
from lifelog.services.analytics_service import AnalyticsService
from lifelog.services.entry_repository import EntryFilter

router = APIRouter(prefix="/api/v1", tags=["Analytics"])


@router.get("/dashboard/stats")
async def dashboard_stats(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return AnalyticsService.get_dashboard(db, user_id, clock)


@router.get("/analytics/highlight")
async def highlight(
    mood: Optional[str] = None,
    favorite: bool = False,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    entry_filter = EntryFilter(
        mood=mood or None,
        favorite=favorite,
        start_date=parse_query_date(start_date, "startDate", clock),
        end_date=parse_query_date(end_date, "endDate", clock),
    )
    return AnalyticsService.get_highlight(db, user_id, clock, entry_filter)

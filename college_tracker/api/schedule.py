"""
Schedule API - smart schedule sync and the merged calendar
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from datetime import date

from college_tracker.config import get_settings
from college_tracker.api.auth import get_current_user_id
from college_tracker.services.calendar import CalendarEvent, build_calendar
from college_tracker.services.portfolio import load_portfolio
from college_tracker.services.schedule_sync import synchronize_schedule
from college_tracker.services.task_store import TaskStore, get_task_store
from college_tracker.utils.helpers import today_in

router = APIRouter()
settings = get_settings()


@router.post("/sync")
async def sync_schedule(
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Create or reschedule the planning tasks derived from college deadlines.
    Completed tasks are left alone; repeated calls with unchanged data return count 0.
    """
    result = await synchronize_schedule(user_id, store, today=today_in(settings.TIMEZONE))
    if not result.success:
        raise HTTPException(status_code=502, detail=f"Schedule sync failed: {result.error}")
    return result.to_dict()


@router.get("/calendar", response_model=List[CalendarEvent])
async def get_calendar(
    start: Optional[date] = None,
    end: Optional[date] = None,
    college_id: Optional[int] = None,
    include_completed: bool = True,
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """College deadlines, essays and tasks as one date-ordered list"""
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")

    portfolio = await load_portfolio(store, user_id)
    return build_calendar(
        portfolio,
        start=start,
        end=end,
        college_id=college_id,
        include_completed=include_completed,
    )

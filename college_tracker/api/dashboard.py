"""
Dashboard API - aggregated progress, counts and the AI action plan
"""
from fastapi import APIRouter, Depends, HTTPException
from datetime import date
from typing import Any, Dict, Optional

from college_tracker.config import get_settings
from college_tracker.api.auth import get_current_user_id
from college_tracker.agents.action_plan.agent import ActionPlanAgent
from college_tracker.services.portfolio import Portfolio, load_portfolio
from college_tracker.services.progress import progress_status
from college_tracker.services.task_store import TaskStore, get_task_store
from college_tracker.utils.helpers import today_in
from college_tracker.utils.logger import get_logger

router = APIRouter()
settings = get_settings()
logger = get_logger(__name__)

UPCOMING_TASKS_LIMIT = 5


def build_summary(portfolio: Portfolio, today: date) -> Dict[str, Any]:
    """Counts and progress figures shown on the dashboard"""
    pending = [t for t in portfolio.tasks if not t.completed]
    overdue = [t for t in pending if t.due_date is not None and t.due_date < today]
    upcoming = sorted(
        (t for t in pending if t.due_date is not None and t.due_date >= today),
        key=lambda t: (t.due_date, t.id),
    )

    future_deadlines = [c.deadline for c in portfolio.colleges if c.deadline and c.deadline >= today]
    days_to_next_deadline: Optional[int] = None
    if future_deadlines:
        days_to_next_deadline = (min(future_deadlines) - today).days

    names = portfolio.college_names()

    return {
        "colleges": len(portfolio.colleges),
        "essays_total": len(portfolio.essays),
        "essays_completed": sum(1 for e in portfolio.essays if e.is_completed),
        "tasks_total": len(portfolio.tasks),
        "tasks_completed": len(portfolio.tasks) - len(pending),
        "tasks_pending": len(pending),
        "tasks_overdue": len(overdue),
        "overall_progress": portfolio.overall_progress(),
        "status_breakdown": portfolio.status_breakdown(),
        "days_to_next_deadline": days_to_next_deadline,
        "college_progress": [
            {
                "college_id": c.id,
                "name": c.name,
                "deadline": c.deadline,
                "progress": portfolio.progress_of(c),
                "status": progress_status(portfolio.progress_of(c)),
            }
            for c in portfolio.colleges
        ],
        "upcoming_tasks": [
            {
                "id": t.id,
                "title": t.title,
                "due_date": t.due_date,
                "category": t.category,
                "priority": t.priority,
                "college": names.get(t.college_id, "General"),
            }
            for t in upcoming[:UPCOMING_TASKS_LIMIT]
        ],
    }


@router.get("/")
async def get_dashboard(
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """Application overview for the dashboard"""
    portfolio = await load_portfolio(store, user_id)
    return build_summary(portfolio, today_in(settings.TIMEZONE))


@router.get("/action-plan")
async def get_action_plan(
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """AI-generated priority of the day"""
    agent = ActionPlanAgent()
    if not agent.is_available:
        raise HTTPException(status_code=503, detail="AI service not configured")

    portfolio = await load_portfolio(store, user_id)
    summary = build_summary(portfolio, today_in(settings.TIMEZONE))

    try:
        plan = await agent.generate_action_plan(summary)
    except Exception as e:
        logger.error(f"Action plan generation failed for user {user_id}: {e}")
        raise HTTPException(status_code=502, detail="AI service error")

    return {"plan": plan, "overall_progress": summary["overall_progress"]}

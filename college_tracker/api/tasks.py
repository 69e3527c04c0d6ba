"""
Task API endpoints - to-dos, deadlines and completion tracking
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel

from college_tracker.config import get_settings
from college_tracker.database import get_db
from college_tracker.models.task import Task, TaskCategory, TaskPriority
from college_tracker.api.auth import get_current_user_id
from college_tracker.api.colleges import get_owned_college
from college_tracker.utils.helpers import today_in
from college_tracker.utils.validators import validate_category, validate_priority

router = APIRouter()
settings = get_settings()

NULLABLE_FIELDS = {"college_id", "description", "due_date"}


# --- Pydantic Schemas ---

class TaskResponse(BaseModel):
    id: int
    college_id: Optional[int]
    title: str
    description: Optional[str]
    due_date: Optional[date]
    category: str
    priority: str
    completed: bool
    completed_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    is_overdue: bool = False


class TaskCreate(BaseModel):
    title: str
    college_id: Optional[int] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    category: str = TaskCategory.GENERAL.value
    priority: str = TaskPriority.MEDIUM.value


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    college_id: Optional[int] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    category: Optional[str] = None
    priority: Optional[str] = None


# --- Helpers ---

def _build_task_response(t: Task) -> TaskResponse:
    is_overdue = (
        t.due_date is not None
        and not t.completed
        and t.due_date < today_in(settings.TIMEZONE)
    )
    return TaskResponse(
        id=t.id,
        college_id=t.college_id,
        title=t.title,
        description=t.description,
        due_date=t.due_date,
        category=t.category,
        priority=t.priority,
        completed=bool(t.completed),
        completed_at=t.completed_at,
        created_at=t.created_at,
        updated_at=t.updated_at,
        is_overdue=is_overdue,
    )


def _validate_labels(category: Optional[str], priority: Optional[str]) -> None:
    try:
        validate_category(category)
        validate_priority(priority)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


async def _get_owned_task(db: AsyncSession, task_id: int, user_id: str) -> Task:
    result = await db.execute(
        select(Task).where(Task.id == task_id, Task.user_id == user_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


# --- Endpoints ---

@router.get("/", response_model=List[TaskResponse])
async def list_tasks(
    completed: Optional[bool] = None,
    college_id: Optional[int] = None,
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """List tasks ordered by due date (undated last)"""
    query = (
        select(Task)
        .where(Task.user_id == user_id)
        .order_by(Task.due_date.asc().nullslast(), Task.id)
    )

    if completed is not None:
        query = query.where(Task.completed == completed)
    if college_id is not None:
        query = query.where(Task.college_id == college_id)
    if category:
        query = query.where(Task.category == category)

    result = await db.execute(query)
    return [_build_task_response(t) for t in result.scalars().all()]


@router.post("/", response_model=TaskResponse)
async def create_task(
    data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Create a task"""
    _validate_labels(data.category, data.priority)
    if data.college_id is not None:
        await get_owned_college(db, data.college_id, user_id)

    task = Task(user_id=user_id, **data.model_dump(), completed=False)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return _build_task_response(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Update a task's details"""
    task = await _get_owned_task(db, task_id, user_id)

    # null clears only the nullable columns
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    _validate_labels(updates.get("category"), updates.get("priority"))
    if updates.get("college_id") is not None:
        await get_owned_college(db, updates["college_id"], user_id)

    for key, value in updates.items():
        setattr(task, key, value)

    task.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(task)
    return _build_task_response(task)


@router.put("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Mark a task as done"""
    task = await _get_owned_task(db, task_id, user_id)

    if not task.completed:
        task.completed = True
        task.completed_at = datetime.utcnow()
    task.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(task)
    return _build_task_response(task)


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a task"""
    task = await _get_owned_task(db, task_id, user_id)
    await db.delete(task)
    await db.commit()
    return {"message": "Task deleted"}

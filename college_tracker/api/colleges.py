"""
College list API endpoints - the user's target colleges with progress
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel

from college_tracker.database import get_db
from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.models.task import Task
from college_tracker.api.auth import get_current_user_id
from college_tracker.services.catalog import find_college, catalog_names, ensure_catalog_essays
from college_tracker.services.portfolio import Portfolio, load_portfolio
from college_tracker.services.progress import progress_status
from college_tracker.services.records import CollegeRecord
from college_tracker.services.task_store import TaskStore, get_task_store
from college_tracker.utils.validators import validate_lors_required
from college_tracker.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

NULLABLE_FIELDS = {"application_platform", "deadline", "deadline_type", "test_policy", "type"}


# --- Pydantic Schemas ---

class CollegeResponse(BaseModel):
    id: int
    name: str
    application_platform: Optional[str]
    deadline: Optional[date]
    deadline_type: Optional[str]
    test_policy: Optional[str]
    lors_required: int
    portfolio_required: bool
    status: Optional[str]
    progress: int = 0
    progress_status: str = "Not Started"


class CollegeCreate(BaseModel):
    name: str
    from_catalog: bool = False
    application_platform: Optional[str] = None
    deadline: Optional[date] = None
    deadline_type: Optional[str] = None
    test_policy: Optional[str] = None
    lors_required: int = 0
    portfolio_required: bool = False
    type: Optional[str] = None


class CollegeUpdate(BaseModel):
    name: Optional[str] = None
    application_platform: Optional[str] = None
    deadline: Optional[date] = None
    deadline_type: Optional[str] = None
    test_policy: Optional[str] = None
    lors_required: Optional[int] = None
    portfolio_required: Optional[bool] = None
    type: Optional[str] = None
    status: Optional[str] = None


class CollegeCreated(BaseModel):
    college: CollegeResponse
    essays_created: int = 0
    already_listed: bool = False


# --- Helpers ---

def _build_college_response(c: CollegeRecord, portfolio: Portfolio) -> CollegeResponse:
    progress = portfolio.progress_of(c)
    return CollegeResponse(
        id=c.id,
        name=c.name,
        application_platform=c.application_platform,
        deadline=c.deadline,
        deadline_type=c.deadline_type,
        test_policy=c.test_policy,
        lors_required=c.lors_required,
        portfolio_required=c.portfolio_required,
        status=c.status,
        progress=progress,
        progress_status=progress_status(progress),
    )


async def get_owned_college(db: AsyncSession, college_id: int, user_id: str) -> College:
    result = await db.execute(
        select(College).where(College.id == college_id, College.user_id == user_id)
    )
    college = result.scalar_one_or_none()
    if not college:
        raise HTTPException(status_code=404, detail="College not found")
    return college


async def _college_response(store: TaskStore, user_id: str, college_id: int) -> CollegeResponse:
    portfolio = await load_portfolio(store, user_id)
    record = portfolio.college(college_id)
    if record is None:
        raise HTTPException(status_code=404, detail="College not found")
    return _build_college_response(record, portfolio)


# --- Endpoints ---

@router.get("/catalog", response_model=List[str])
async def list_catalog():
    """Colleges whose requirements are known to the catalog"""
    return catalog_names()


@router.get("/", response_model=List[CollegeResponse])
async def list_colleges(
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """List colleges by deadline, each with its application progress"""
    portfolio = await load_portfolio(store, user_id)
    return [_build_college_response(c, portfolio) for c in portfolio.colleges]


@router.post("/", response_model=CollegeCreated)
async def add_college(
    data: CollegeCreate,
    db: AsyncSession = Depends(get_db),
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """Add a college, free-form or from the catalog (with its required essays)"""
    try:
        validate_lors_required(data.lors_required)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    fields = data.model_dump(exclude={"from_catalog"})
    entry = None
    if data.from_catalog:
        entry = find_college(data.name)
        if not entry:
            raise HTTPException(status_code=400, detail=f"'{data.name}' is not in the college catalog")
        fields.update({k: entry[k] for k in (
            "name", "application_platform", "deadline", "deadline_type",
            "test_policy", "lors_required", "portfolio_required",
        )})

    result = await db.execute(
        select(College).where(College.user_id == user_id, College.name == fields["name"])
    )
    college = result.scalar_one_or_none()
    already_listed = college is not None

    if not college:
        college = College(user_id=user_id, status="Not Started", **fields)
        db.add(college)
        await db.flush()
        logger.info(f"User {user_id} added college {college.name} (id={college.id})")

    essays_created = await ensure_catalog_essays(db, college)
    await db.commit()

    return CollegeCreated(
        college=await _college_response(store, user_id, college.id),
        essays_created=essays_created,
        already_listed=already_listed,
    )


@router.get("/{college_id}", response_model=CollegeResponse)
async def get_college(
    college_id: int,
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    return await _college_response(store, user_id, college_id)


@router.put("/{college_id}", response_model=CollegeResponse)
async def update_college(
    college_id: int,
    data: CollegeUpdate,
    db: AsyncSession = Depends(get_db),
    store: TaskStore = Depends(get_task_store),
    user_id: str = Depends(get_current_user_id)
):
    """Update a college (status, deadline, requirements)"""
    college = await get_owned_college(db, college_id, user_id)

    # null clears only the nullable columns
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    try:
        validate_lors_required(updates.get("lors_required"))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    for key, value in updates.items():
        setattr(college, key, value)

    college.updated_at = datetime.utcnow()
    await db.commit()
    return await _college_response(store, user_id, college_id)


@router.delete("/{college_id}")
async def delete_college(
    college_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Delete a college together with its essays and tasks"""
    college = await get_owned_college(db, college_id, user_id)

    await db.execute(delete(Task).where(Task.college_id == college.id))
    await db.execute(delete(Essay).where(Essay.college_id == college.id))
    await db.delete(college)
    await db.commit()
    return {"message": "College deleted"}

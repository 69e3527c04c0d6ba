"""
Essay API endpoints - drafting, autosave and finalization
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from college_tracker.database import get_db
from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.api.auth import get_current_user_id
from college_tracker.api.colleges import get_owned_college
from college_tracker.services.catalog import ensure_catalog_essays
from college_tracker.services.progress import essay_word_progress
from college_tracker.services.records import EssayRecord
from college_tracker.utils.helpers import count_words

router = APIRouter()


# --- Pydantic Schemas ---

class EssayResponse(BaseModel):
    id: int
    college_id: Optional[int]
    title: str
    essay_type: Optional[str]
    prompt: Optional[str]
    word_limit: Optional[int]
    content: str
    word_count: int
    is_completed: bool
    version: int
    word_progress: int = 0
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class EssayCreate(BaseModel):
    title: str
    college_id: Optional[int] = None
    essay_type: Optional[str] = None
    prompt: Optional[str] = None
    word_limit: Optional[int] = None
    content: str = ""


class EssayUpdate(BaseModel):
    title: Optional[str] = None
    essay_type: Optional[str] = None
    prompt: Optional[str] = None
    word_limit: Optional[int] = None
    content: Optional[str] = None
    is_completed: Optional[bool] = None


# --- Helper ---

def _build_essay_response(e: Essay) -> EssayResponse:
    return EssayResponse(
        id=e.id,
        college_id=e.college_id,
        title=e.title,
        essay_type=e.essay_type,
        prompt=e.prompt,
        word_limit=e.word_limit,
        content=e.content or "",
        word_count=e.word_count or 0,
        is_completed=bool(e.is_completed),
        version=e.version or 1,
        word_progress=essay_word_progress(EssayRecord.model_validate(e)),
        created_at=e.created_at,
        updated_at=e.updated_at,
    )


async def _get_owned_essay(db: AsyncSession, essay_id: int, user_id: str) -> Essay:
    result = await db.execute(
        select(Essay).where(Essay.id == essay_id, Essay.user_id == user_id)
    )
    essay = result.scalar_one_or_none()
    if not essay:
        raise HTTPException(status_code=404, detail="Essay not found")
    return essay


# --- Endpoints ---

@router.get("/", response_model=List[EssayResponse])
async def list_essays(
    college_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """List essays, newest first"""
    query = (
        select(Essay)
        .where(Essay.user_id == user_id)
        .order_by(Essay.created_at.desc(), Essay.id.desc())
    )
    if college_id is not None:
        query = query.where(Essay.college_id == college_id)

    result = await db.execute(query)
    return [_build_essay_response(e) for e in result.scalars().all()]


@router.post("/sync")
async def sync_catalog_essays(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Create any catalog-required essays missing for the user's colleges"""
    result = await db.execute(select(College).where(College.user_id == user_id))
    total = 0
    for college in result.scalars().all():
        total += await ensure_catalog_essays(db, college)
    await db.commit()
    return {"success": True, "count": total}


@router.post("/", response_model=EssayResponse)
async def create_essay(
    data: EssayCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Create an essay (college_id omitted for global essays)"""
    if data.college_id is not None:
        await get_owned_college(db, data.college_id, user_id)

    essay = Essay(
        user_id=user_id,
        **data.model_dump(),
        word_count=count_words(data.content),
        is_completed=False,
        version=1,
    )
    db.add(essay)
    await db.commit()
    await db.refresh(essay)
    return _build_essay_response(essay)


@router.get("/{essay_id}", response_model=EssayResponse)
async def get_essay(
    essay_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return _build_essay_response(await _get_owned_essay(db, essay_id, user_id))


@router.put("/{essay_id}", response_model=EssayResponse)
async def update_essay(
    essay_id: int,
    data: EssayUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Save an essay; word count is recomputed from the content"""
    essay = await _get_owned_essay(db, essay_id, user_id)

    updates = data.model_dump(exclude_none=True)

    # Completion is one-way: a save can finalize an essay but never reopen it
    if updates.pop("is_completed", False):
        essay.is_completed = True

    content = updates.pop("content", None)
    if content is not None and content != essay.content:
        essay.content = content
        essay.word_count = count_words(content)
        essay.version = (essay.version or 1) + 1

    for key, value in updates.items():
        setattr(essay, key, value)

    essay.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(essay)
    return _build_essay_response(essay)


@router.put("/{essay_id}/complete", response_model=EssayResponse)
async def complete_essay(
    essay_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Mark an essay as finalized"""
    essay = await _get_owned_essay(db, essay_id, user_id)

    essay.is_completed = True
    essay.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(essay)
    return _build_essay_response(essay)


@router.delete("/{essay_id}")
async def delete_essay(
    essay_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    essay = await _get_owned_essay(db, essay_id, user_id)
    await db.delete(essay)
    await db.commit()
    return {"message": "Essay deleted"}

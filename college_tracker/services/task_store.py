"""
Data store used by the schedule synchronizer.

`TaskStore` is the contract; `SqlTaskStore` implements it on the
SQLAlchemy async engine. Each call opens its own session so callers can
issue reads (and per-row updates) concurrently with asyncio.gather -
a single AsyncSession does not allow overlapping statements.
"""
from datetime import date, datetime
from typing import List, Protocol, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.models.task import Task
from college_tracker.services.records import CollegeRecord, EssayRecord, NewTask, TaskRecord
from college_tracker.utils.logger import get_logger

logger = get_logger(__name__)


class DataStoreError(Exception):
    """A read or write against the task store failed"""


class TaskStore(Protocol):
    async def list_colleges(self, user_id: str) -> List[CollegeRecord]: ...

    async def list_essays(self, user_id: str) -> List[EssayRecord]: ...

    async def list_tasks(self, user_id: str) -> List[TaskRecord]: ...

    async def insert_tasks(self, tasks: Sequence[NewTask]) -> int: ...

    async def update_task_due_date(self, task_id: int, due_date: date) -> None: ...


class SqlTaskStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_colleges(self, user_id: str) -> List[CollegeRecord]:
        query = (
            select(College)
            .where(College.user_id == user_id)
            .order_by(College.deadline.asc().nullslast(), College.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [CollegeRecord.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to list colleges for user {user_id}: {e}") from e

    async def list_essays(self, user_id: str) -> List[EssayRecord]:
        """Essays with their college's deadline joined in"""
        query = (
            select(Essay, College.deadline)
            .outerjoin(College, Essay.college_id == College.id)
            .where(Essay.user_id == user_id)
            .order_by(Essay.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                records = []
                for essay, deadline in result.all():
                    record = EssayRecord.model_validate(essay)
                    record.college_deadline = deadline
                    records.append(record)
                return records
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to list essays for user {user_id}: {e}") from e

    async def list_tasks(self, user_id: str) -> List[TaskRecord]:
        query = (
            select(Task)
            .where(Task.user_id == user_id)
            .order_by(Task.due_date.asc().nullslast(), Task.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [TaskRecord.model_validate(t) for t in result.scalars().all()]
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to list tasks for user {user_id}: {e}") from e

    async def insert_tasks(self, tasks: Sequence[NewTask]) -> int:
        """Insert all tasks in one transaction; returns the number inserted"""
        if not tasks:
            return 0
        try:
            async with self._session_factory() as session:
                session.add_all([Task(**t.model_dump(), completed=False) for t in tasks])
                await session.commit()
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to insert {len(tasks)} tasks: {e}") from e
        logger.debug(f"Inserted {len(tasks)} tasks")
        return len(tasks)

    async def update_task_due_date(self, task_id: int, due_date: date) -> None:
        query = (
            update(Task)
            .where(Task.id == task_id)
            .values(due_date=due_date, updated_at=datetime.utcnow())
        )
        try:
            async with self._session_factory() as session:
                await session.execute(query)
                await session.commit()
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to update due date of task {task_id}: {e}") from e


def get_task_store() -> TaskStore:
    """Dependency for the store bound to the application's engine"""
    from college_tracker.database import AsyncSessionLocal

    return SqlTaskStore(AsyncSessionLocal)

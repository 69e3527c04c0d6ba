"""
Test fixtures - per-test SQLite database, in-memory task store + HTTP client
"""
from datetime import date
from typing import List, Optional, Sequence

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

import college_tracker.models  # noqa: F401
from college_tracker.database import Base, get_db
from college_tracker.main import app
from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.services.records import CollegeRecord, EssayRecord, NewTask, TaskRecord
from college_tracker.services.task_store import DataStoreError, SqlTaskStore, get_task_store

USER_ID = "user-123"
OTHER_USER_ID = "user-456"


class InMemoryTaskStore:
    """TaskStore backed by lists; `fail_on` names the operation that raises"""

    def __init__(
        self,
        colleges: Sequence[CollegeRecord] = (),
        essays: Sequence[EssayRecord] = (),
        tasks: Sequence[TaskRecord] = (),
        fail_on: Optional[str] = None,
    ):
        self.colleges = list(colleges)
        self.essays = list(essays)
        self.tasks = list(tasks)
        self.fail_on = fail_on
        self.insert_calls = 0
        self.update_calls = 0
        self._next_id = max([t.id for t in self.tasks], default=0) + 1

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise DataStoreError(f"{operation} failed")

    async def list_colleges(self, user_id: str) -> List[CollegeRecord]:
        self._maybe_fail("list_colleges")
        return [c for c in self.colleges if c.user_id == user_id]

    async def list_essays(self, user_id: str) -> List[EssayRecord]:
        self._maybe_fail("list_essays")
        return [e for e in self.essays if e.user_id == user_id]

    async def list_tasks(self, user_id: str) -> List[TaskRecord]:
        self._maybe_fail("list_tasks")
        return [t.model_copy() for t in self.tasks if t.user_id == user_id]

    async def insert_tasks(self, tasks: Sequence[NewTask]) -> int:
        self._maybe_fail("insert_tasks")
        self.insert_calls += 1
        for t in tasks:
            self.tasks.append(TaskRecord(id=self._next_id, completed=False, **t.model_dump()))
            self._next_id += 1
        return len(tasks)

    async def update_task_due_date(self, task_id: int, due_date: date) -> None:
        self._maybe_fail("update_task_due_date")
        self.update_calls += 1
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                self.tasks[i] = t.model_copy(update={"due_date": due_date})

    def task(self, title: str, college_id: Optional[int] = None) -> Optional[TaskRecord]:
        return next((t for t in self.tasks if t.title == title and t.college_id == college_id), None)


@pytest.fixture()
def memory_store_factory():
    return InMemoryTaskStore


@pytest_asyncio.fixture()
async def session_factory(tmp_path):
    """A fresh SQLite database file for each test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def sql_store(session_factory):
    return SqlTaskStore(session_factory)


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Two colleges with an essay each for USER_ID, one college for OTHER_USER_ID"""
    stanford = College(
        user_id=USER_ID,
        name="Stanford University",
        application_platform="Common App",
        deadline=date(2026, 1, 5),
        deadline_type="RD",
        test_policy="Test Optional",
        lors_required=2,
    )
    state_u = College(
        user_id=USER_ID,
        name="State University",
        deadline=None,
        lors_required=0,
    )
    foreign = College(user_id=OTHER_USER_ID, name="Other College", deadline=date(2026, 2, 1))
    db_session.add_all([stanford, state_u, foreign])
    await db_session.flush()

    essay = Essay(
        user_id=USER_ID,
        college_id=stanford.id,
        title="Why Stanford",
        word_limit=250,
        content="",
        word_count=0,
    )
    personal = Essay(
        user_id=USER_ID,
        college_id=None,
        title="Personal Statement",
        word_limit=650,
        content="",
        word_count=0,
    )
    db_session.add_all([essay, personal])
    await db_session.commit()

    return {"stanford": stanford, "state_u": state_u, "foreign": foreign, "essay": essay, "personal": personal}


@pytest_asyncio.fixture()
async def client(db_session, sql_store):
    """httpx AsyncClient bound to the FastAPI app, acting as USER_ID"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_task_store] = lambda: sql_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["X-User-Id"] = USER_ID
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def anon_client(db_session, sql_store):
    """Client without a user identity header"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_task_store] = lambda: sql_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()

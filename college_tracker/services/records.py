"""
Typed records exchanged between the data store and the planning core.

The ORM rows never reach the progress estimator or the schedule
synchronizer directly; the store converts them into these records, so the
core does not depend on how a query produced them (for example the essay's
college deadline, which comes from a join).
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

# College.test_policy value that makes the "send test scores" task required
TEST_POLICY_REQUIRED = "Required"


class CollegeRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: str
    application_platform: Optional[str] = None
    deadline: Optional[date] = None
    deadline_type: Optional[str] = None
    test_policy: Optional[str] = None
    lors_required: int = 0
    portfolio_required: bool = False
    status: Optional[str] = None


class EssayRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    college_id: Optional[int] = None
    title: str
    essay_type: Optional[str] = None
    word_limit: Optional[int] = None
    word_count: int = 0
    is_completed: bool = False
    version: int = 1
    # Deadline of the parent college, filled in by the data store
    college_deadline: Optional[date] = None


class TaskRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    college_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    category: str = "General"
    priority: str = "Medium"
    completed: bool = False


class NewTask(BaseModel):
    """A task staged for insertion by the schedule synchronizer"""
    user_id: str
    college_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    due_date: date
    category: str
    priority: str

"""
Portfolio snapshot - a user's colleges, essays and tasks read together
"""
import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from college_tracker.services.progress import estimate_progress, portfolio_progress, progress_status
from college_tracker.services.records import CollegeRecord, EssayRecord, TaskRecord
from college_tracker.services.task_store import TaskStore


@dataclass
class Portfolio:
    colleges: List[CollegeRecord] = field(default_factory=list)
    essays: List[EssayRecord] = field(default_factory=list)
    tasks: List[TaskRecord] = field(default_factory=list)

    def college(self, college_id: int) -> Optional[CollegeRecord]:
        return next((c for c in self.colleges if c.id == college_id), None)

    def college_names(self) -> Dict[int, str]:
        return {c.id: c.name for c in self.colleges}

    def progress_of(self, college: CollegeRecord) -> int:
        return estimate_progress(college, self.essays, self.tasks)

    def overall_progress(self) -> int:
        return portfolio_progress(self.colleges, self.essays, self.tasks)

    def status_breakdown(self) -> Dict[str, int]:
        counts = {"Not Started": 0, "In Progress": 0, "Completed": 0}
        for c in self.colleges:
            counts[progress_status(self.progress_of(c))] += 1
        return counts


async def load_portfolio(store: TaskStore, user_id: str) -> Portfolio:
    colleges, essays, tasks = await asyncio.gather(
        store.list_colleges(user_id),
        store.list_essays(user_id),
        store.list_tasks(user_id),
    )
    return Portfolio(colleges=list(colleges), essays=list(essays), tasks=list(tasks))

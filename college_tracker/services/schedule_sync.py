"""
Smart schedule synchronization.

Derives the planning tasks an application portfolio needs (transcripts,
test scores, financial aid, recommenders, essay drafts and polish passes)
from the colleges' deadlines and reconciles them with the task store:
missing tasks are created, incomplete ones are rescheduled, completed
ones are never touched. Running it again without data changes is a no-op.

Generated tasks are recognised only by their exact (title, college_id)
pair, so renaming a generated task detaches it from the schedule.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from college_tracker.models.task import TaskCategory, TaskPriority
from college_tracker.services.records import (
    TEST_POLICY_REQUIRED,
    CollegeRecord,
    EssayRecord,
    NewTask,
    TaskRecord,
)
from college_tracker.services.task_store import DataStoreError, TaskStore
from college_tracker.utils.helpers import truncate_title
from college_tracker.utils.logger import get_logger

logger = get_logger(__name__)

TaskKey = Tuple[str, Optional[int]]


@dataclass(frozen=True)
class GlobalTaskTemplate:
    """A portfolio-wide task anchored to the earliest college deadline"""
    title: str
    description: str
    category: TaskCategory
    priority: TaskPriority
    offset_days: int  # days before the anchor date
    fallback_days: int  # days after today when the ideal date has passed


TRANSCRIPTS = GlobalTaskTemplate(
    title="Request High School Transcripts",
    description="Contact your school counselor to send official transcripts to all your colleges.",
    category=TaskCategory.DOCUMENT,
    priority=TaskPriority.HIGH,
    offset_days=45,
    fallback_days=7,
)

TEST_SCORES = GlobalTaskTemplate(
    title="Send Official Test Scores",
    description="Login to CollegeBoard/ACT.org and send score reports to colleges that require them.",
    category=TaskCategory.DOCUMENT,
    priority=TaskPriority.HIGH,
    offset_days=30,
    fallback_days=7,
)

FINANCIAL_AID = GlobalTaskTemplate(
    title="Submit FAFSA & CSS Profile",
    description="Complete federal and private financial aid applications.",
    category=TaskCategory.GENERAL,
    priority=TaskPriority.HIGH,
    offset_days=45,
    fallback_days=3,
)

RECOMMENDERS = GlobalTaskTemplate(
    title="Confirm Recommenders (Teachers & Counselor)",
    description="Ask 2 core subject teachers and your counselor if they can write strong letters for you.",
    category=TaskCategory.LOR,
    priority=TaskPriority.HIGH,
    offset_days=60,
    fallback_days=3,
)

ASSIGN_RECOMMENDERS_DAYS_BEFORE = 30
ESSAY_DRAFT_DAYS_BEFORE = 21
ESSAY_POLISH_DAYS_BEFORE = 5


@dataclass(frozen=True)
class PlannedTask:
    """A task the schedule calls for, with its ideal due date"""
    title: str
    college_id: Optional[int]
    due_date: date
    description: str
    category: TaskCategory
    priority: TaskPriority

    @property
    def key(self) -> TaskKey:
        return (self.title, self.college_id)


@dataclass
class SyncPlan:
    inserts: List[NewTask] = field(default_factory=list)
    updates: Dict[int, date] = field(default_factory=dict)  # task id -> new due date


@dataclass
class SyncResult:
    success: bool
    count: int = 0
    created: int = 0
    updated: int = 0
    error: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": str(self.error)}
        return {
            "success": True,
            "count": self.count,
            "created": self.created,
            "updated": self.updated,
        }


# --- Planning (pure) ---

def anchor_date(colleges: Iterable[CollegeRecord], today: date) -> date:
    """Earliest college deadline, or today when no college has one"""
    deadlines = [c.deadline for c in colleges if c.deadline is not None]
    return min(deadlines) if deadlines else today


def global_due_date(template: GlobalTaskTemplate, base_date: date, today: date) -> date:
    """`offset_days` before the anchor, pushed to today + fallback if already past"""
    due = base_date - timedelta(days=template.offset_days)
    if due < today:
        due = today + timedelta(days=template.fallback_days)
    return due


def _from_template(template: GlobalTaskTemplate, due: date) -> PlannedTask:
    return PlannedTask(
        title=template.title,
        college_id=None,
        due_date=due,
        description=template.description,
        category=template.category,
        priority=template.priority,
    )


def build_planned_tasks(
    colleges: Sequence[CollegeRecord],
    essays: Sequence[EssayRecord],
    today: date,
) -> List[PlannedTask]:
    """Every task the schedule calls for, in generation order"""
    base_date = anchor_date(colleges, today)

    templates = [TRANSCRIPTS]
    if any(c.test_policy == TEST_POLICY_REQUIRED for c in colleges):
        templates.append(TEST_SCORES)
    templates.extend([FINANCIAL_AID, RECOMMENDERS])

    planned = [_from_template(t, global_due_date(t, base_date, today)) for t in templates]

    # Per-college tasks follow the college's own deadline and are not
    # clamped to today: a near deadline can yield a past due date.
    for college in colleges:
        if (college.lors_required or 0) > 0 and college.deadline is not None:
            planned.append(PlannedTask(
                title=f"Assign Recommenders for {college.name}",
                college_id=college.id,
                due_date=college.deadline - timedelta(days=ASSIGN_RECOMMENDERS_DAYS_BEFORE),
                description=f"Ensure your letters of recommendation are assigned to {college.name} in the portal.",
                category=TaskCategory.LOR,
                priority=TaskPriority.MEDIUM,
            ))

    for essay in essays:
        if essay.college_deadline is None:
            continue
        short_title = truncate_title(essay.title)
        planned.append(PlannedTask(
            title=f"Draft: {short_title}",
            college_id=essay.college_id,
            due_date=essay.college_deadline - timedelta(days=ESSAY_DRAFT_DAYS_BEFORE),
            description=f"Complete a rough draft for {essay.title} ({essay.word_limit or '?'} words).",
            category=TaskCategory.ESSAY,
            priority=TaskPriority.MEDIUM,
        ))
        planned.append(PlannedTask(
            title=f"Polish & Finalize: {short_title}",
            college_id=essay.college_id,
            due_date=essay.college_deadline - timedelta(days=ESSAY_POLISH_DAYS_BEFORE),
            description=f"Final review for grammar, tone, and clarity for {essay.title}.",
            category=TaskCategory.ESSAY,
            priority=TaskPriority.HIGH,
        ))

    return planned


def reconcile(
    user_id: str,
    planned: Sequence[PlannedTask],
    existing_tasks: Sequence[TaskRecord],
) -> SyncPlan:
    """
    Stage inserts for planned tasks with no (title, college_id) match and
    due-date updates for matched tasks that are still open and out of date.
    """
    existing: Dict[TaskKey, TaskRecord] = {}
    for task in existing_tasks:
        existing.setdefault((task.title, task.college_id), task)

    plan = SyncPlan()
    staged: Set[TaskKey] = set()

    for item in planned:
        match = existing.get(item.key)
        if match is not None:
            if not match.completed and match.due_date != item.due_date:
                plan.updates[match.id] = item.due_date
            continue

        if item.key in staged:
            continue
        staged.add(item.key)
        plan.inserts.append(NewTask(
            user_id=user_id,
            college_id=item.college_id,
            title=item.title,
            description=item.description,
            due_date=item.due_date,
            category=item.category.value,
            priority=item.priority.value,
        ))

    return plan


# --- Execution ---

class ScheduleSynchronizer:
    """
    Runs a plan-and-apply pass for one user against a task store.

    Writes are best effort: a failing write aborts the run but whatever
    already succeeded stays in place. Rerunning converges.
    """

    def __init__(self, store: TaskStore, clock: Callable[[], date] = date.today):
        self.store = store
        self.clock = clock

    async def sync(self, user_id: str) -> SyncResult:
        today = self.clock()
        logger.info(f"Syncing smart schedule for user {user_id} (today={today.isoformat()})")

        try:
            colleges, essays, existing_tasks = await asyncio.gather(
                self.store.list_colleges(user_id),
                self.store.list_essays(user_id),
                self.store.list_tasks(user_id),
            )

            planned = build_planned_tasks(colleges, essays, today)
            plan = reconcile(user_id, planned, existing_tasks)

            created = 0
            if plan.inserts:
                logger.info(f"Creating {len(plan.inserts)} smart tasks")
                created = await self.store.insert_tasks(plan.inserts)

            if plan.updates:
                logger.info(f"Updating {len(plan.updates)} tasks with new deadlines")
                await asyncio.gather(*(
                    self.store.update_task_due_date(task_id, due)
                    for task_id, due in plan.updates.items()
                ))
        except DataStoreError as e:
            logger.error(f"Smart schedule sync failed for user {user_id}: {e}")
            return SyncResult(success=False, error=e)

        updated = len(plan.updates)
        return SyncResult(success=True, count=created + updated, created=created, updated=updated)


async def synchronize_schedule(
    user_id: str,
    store: TaskStore,
    today: Optional[date] = None,
) -> SyncResult:
    """Synchronize one user's planning tasks; `today` defaults to the system date"""
    if today is None:
        return await ScheduleSynchronizer(store).sync(user_id)
    return await ScheduleSynchronizer(store, clock=lambda: today).sync(user_id)

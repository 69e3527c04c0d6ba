"""
Application progress estimation.

One scoring rule for every surface that shows a completion percentage
(dashboard, college list, analytics summary).
"""
from typing import Iterable, Sequence

from college_tracker.services.records import CollegeRecord, EssayRecord, TaskRecord
from college_tracker.utils.helpers import round_half_up

ESSAY_WEIGHT = 0.4
TASK_WEIGHT = 0.6
# An unfinished essay earns at most this share through word count alone
DRAFT_CREDIT_CAP = 0.8

STATUS_NOT_STARTED = "Not Started"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"


def _essay_credit(essay: EssayRecord) -> float:
    if essay.is_completed:
        return 1.0
    word_limit = essay.word_limit or 0
    if word_limit <= 0:
        return 0.0
    word_count = max(essay.word_count or 0, 0)
    return min(word_count / word_limit, 1.0) * DRAFT_CREDIT_CAP


def estimate_progress(
    college: CollegeRecord,
    essays: Iterable[EssayRecord],
    tasks: Iterable[TaskRecord],
) -> int:
    """
    Completion percentage (0-100) of one college's application.

    Only essays and tasks whose college_id matches the college count.
    Essays weigh 0.4 and tasks 0.6; when one kind is absent the other
    carries the full weight. No essays and no tasks means 0.
    """
    college_essays = [e for e in essays or [] if e.college_id == college.id]
    college_tasks = [t for t in tasks or [] if t.college_id == college.id]

    if not college_essays and not college_tasks:
        return 0

    essay_score = 0.0
    if college_essays:
        essay_score = sum(_essay_credit(e) for e in college_essays) / len(college_essays)

    task_score = 0.0
    if college_tasks:
        task_score = sum(1 for t in college_tasks if t.completed) / len(college_tasks)

    essay_weight, task_weight = ESSAY_WEIGHT, TASK_WEIGHT
    if not college_essays:
        essay_weight, task_weight = 0.0, 1.0
    if not college_tasks:
        essay_weight, task_weight = 1.0, 0.0

    score = round_half_up((essay_score * essay_weight + task_score * task_weight) * 100)
    return max(0, min(score, 100))


def portfolio_progress(
    colleges: Sequence[CollegeRecord],
    essays: Sequence[EssayRecord],
    tasks: Sequence[TaskRecord],
) -> int:
    """Mean of the per-college progress, 0 without colleges"""
    if not colleges:
        return 0
    total = sum(estimate_progress(c, essays, tasks) for c in colleges)
    return round_half_up(total / len(colleges))


def progress_status(progress: int) -> str:
    if progress >= 100:
        return STATUS_COMPLETED
    if progress > 0:
        return STATUS_IN_PROGRESS
    return STATUS_NOT_STARTED


def essay_word_progress(essay: EssayRecord) -> int:
    """Share of the word limit written so far, as a 0-100 percentage"""
    word_limit = essay.word_limit or 0
    if word_limit <= 0:
        return 0
    return round_half_up(min((essay.word_count or 0) / word_limit, 1.0) * 100)

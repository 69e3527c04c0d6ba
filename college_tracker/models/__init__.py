from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.models.task import Task, TaskCategory, TaskPriority

__all__ = [
    "College",
    "Essay",
    "Task",
    "TaskCategory",
    "TaskPriority",
]

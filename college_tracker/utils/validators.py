"""
Input validation utilities
"""
from typing import Optional

from college_tracker.models.task import TaskCategory, TaskPriority


def validate_category(category: Optional[str]) -> Optional[str]:
    """Validate a task category (Essay, Document, LOR, General)"""
    if category is None:
        return None
    valid = {c.value for c in TaskCategory}
    if category not in valid:
        raise ValueError(f"Invalid category. Must be one of: {sorted(valid)}")
    return category


def validate_priority(priority: Optional[str]) -> Optional[str]:
    """Validate a task priority (High, Medium, Low)"""
    if priority is None:
        return None
    valid = {p.value for p in TaskPriority}
    if priority not in valid:
        raise ValueError(f"Invalid priority. Must be one of: {sorted(valid)}")
    return priority


def validate_lors_required(value: Optional[int]) -> Optional[int]:
    """Letters of recommendation count can't be negative"""
    if value is not None and value < 0:
        raise ValueError("lors_required must be zero or positive")
    return value

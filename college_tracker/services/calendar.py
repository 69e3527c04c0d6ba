"""
Calendar view: college deadlines, unfinished essays (on their college's deadline)
and dated tasks merged into one date-ordered list of events.
"""
import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from college_tracker.services.portfolio import Portfolio


class CalendarEvent(BaseModel):
    id: str
    type: str  # "deadline" | "essay" | "task"
    title: str
    date: datetime.date
    college: str
    college_id: Optional[int] = None
    completed: bool = False
    details: Dict[str, Any] = {}


_TYPE_ORDER = {"deadline": 0, "essay": 1, "task": 2}


def _record_id(event: CalendarEvent) -> int:
    # ids are "<type>-<record id>"
    return int(event.id.rsplit("-", 1)[1])


def build_calendar(
    portfolio: Portfolio,
    start: Optional[datetime.date] = None,
    end: Optional[datetime.date] = None,
    college_id: Optional[int] = None,
    include_completed: bool = True,
) -> List[CalendarEvent]:
    names = portfolio.college_names()
    events: List[CalendarEvent] = []

    for c in portfolio.colleges:
        if c.deadline is None:
            continue
        events.append(CalendarEvent(
            id=f"deadline-{c.id}",
            type="deadline",
            title=f"{c.name} - {c.deadline_type or 'Application'}",
            date=c.deadline,
            college=c.name,
            college_id=c.id,
            details={
                "platform": c.application_platform,
                "deadline_type": c.deadline_type,
                "status": c.status,
            },
        ))

    for t in portfolio.tasks:
        if t.due_date is None:
            continue
        events.append(CalendarEvent(
            id=f"task-{t.id}",
            type="task",
            title=t.title,
            date=t.due_date,
            college=names.get(t.college_id, "General"),
            college_id=t.college_id,
            completed=t.completed,
            details={
                "description": t.description,
                "category": t.category,
                "priority": t.priority,
            },
        ))

    for e in portfolio.essays:
        if e.college_deadline is None or e.is_completed:
            continue
        events.append(CalendarEvent(
            id=f"essay-{e.id}",
            type="essay",
            title=e.title,
            date=e.college_deadline,
            college=names.get(e.college_id, "General"),
            college_id=e.college_id,
            details={
                "essay_type": e.essay_type,
                "word_limit": e.word_limit,
                "word_count": e.word_count,
            },
        ))

    if start is not None:
        events = [ev for ev in events if ev.date >= start]
    if end is not None:
        events = [ev for ev in events if ev.date <= end]
    if college_id is not None:
        events = [ev for ev in events if ev.college_id == college_id]
    if not include_completed:
        events = [ev for ev in events if not ev.completed]

    events.sort(key=lambda ev: (ev.date, _TYPE_ORDER[ev.type], _record_id(ev)))
    return events

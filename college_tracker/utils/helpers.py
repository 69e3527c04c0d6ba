"""
General helper utilities
"""
import math
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo


def count_words(text: Optional[str]) -> int:
    """Count whitespace-separated words"""
    if not text:
        return 0
    return len(text.split())


def truncate_title(title: str, limit: int = 30) -> str:
    """Shorten a title to `limit` characters plus an ellipsis"""
    if len(title) > limit:
        return title[:limit] + "..."
    return title


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always rounding up"""
    return int(math.floor(value + 0.5))


def today_in(tz_name: str) -> date:
    """Current calendar date in the given IANA time zone"""
    return datetime.now(ZoneInfo(tz_name)).date()

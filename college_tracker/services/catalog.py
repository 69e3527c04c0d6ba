"""
Built-in college catalog: application requirements used when a college is
added by name, plus the essay batch-creation that goes with it.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from college_tracker.models.college import College
from college_tracker.models.essay import Essay
from college_tracker.utils.logger import get_logger

logger = get_logger(__name__)

COMMON_APP_PERSONAL_STATEMENT = {
    "title": "Common App Personal Statement",
    "essay_type": "Common App",
    "prompt": "Choose one of the 7 Common App prompts",
    "word_limit": 650,
}

UC_PIQ_PROMPT = "Choose 4 of 8 Personal Insight Questions to answer."


def _uc_piqs() -> List[Dict[str, Any]]:
    return [
        {"title": f"PIQ #{n}", "essay_type": "UC PIQ", "prompt": UC_PIQ_PROMPT, "word_limit": 350}
        for n in range(1, 5)
    ]


COLLEGE_CATALOG: Dict[str, Dict[str, Any]] = {
    "Stanford University": {
        "name": "Stanford University",
        "application_platform": "Common App",
        "deadline": date(2025, 1, 5),
        "deadline_type": "RD",
        "test_policy": "Test Optional",
        "lors_required": 2,
        "portfolio_required": False,
        "essays": [
            COMMON_APP_PERSONAL_STATEMENT,
            {"title": "Short Answer 1", "essay_type": "Supplement",
             "prompt": "What is the most significant challenge that society faces today?", "word_limit": 50},
            {"title": "Short Answer 2", "essay_type": "Supplement",
             "prompt": "How did you spend your last two summers?", "word_limit": 50},
            {"title": "Short Answer 3", "essay_type": "Supplement",
             "prompt": "What historical moment or event do you wish you could have witnessed?", "word_limit": 50},
            {"title": "What Matters to You", "essay_type": "Supplement",
             "prompt": "Reflect on an idea or experience that makes you genuinely excited about learning.",
             "word_limit": 250},
            {"title": "Roommate Letter", "essay_type": "Supplement",
             "prompt": "Write a note to your future roommate that reveals something about you.",
             "word_limit": 250},
        ],
    },
    "MIT": {
        "name": "Massachusetts Institute of Technology",
        "application_platform": "Common App",
        "deadline": date(2025, 1, 1),
        "deadline_type": "RD",
        "test_policy": "Required",
        "lors_required": 2,
        "portfolio_required": False,
        "essays": [
            {"title": "Alignment with MIT", "essay_type": "Supplement",
             "prompt": "What field of study appeals to you the most right now, and why?", "word_limit": 200},
            {"title": "Community Essay", "essay_type": "Supplement",
             "prompt": "How have you contributed to your community?", "word_limit": 100},
            {"title": "Challenge/Setback", "essay_type": "Supplement",
             "prompt": "Tell us about a challenge you faced and how you managed it.", "word_limit": 225},
            {"title": "Curiosity Essay", "essay_type": "Supplement",
             "prompt": "Describe something you do simply for the pleasure of it.", "word_limit": 225},
        ],
    },
    "University of Southern California": {
        "name": "University of Southern California",
        "application_platform": "Common App",
        "deadline": date(2025, 1, 15),
        "deadline_type": "RD",
        "test_policy": "Test Optional",
        "lors_required": 1,
        "portfolio_required": False,
        "essays": [
            COMMON_APP_PERSONAL_STATEMENT,
            {"title": "USC Short Answer 1", "essay_type": "Supplement",
             "prompt": "Describe how you plan to pursue your academic interests at USC.", "word_limit": 250},
            {"title": "USC Short Answer 2", "essay_type": "Supplement",
             "prompt": "Describe yourself in three words.", "word_limit": 100},
        ],
    },
    "University of California, Berkeley": {
        "name": "University of California, Berkeley",
        "application_platform": "UC Application",
        "deadline": date(2024, 11, 30),
        "deadline_type": "UC",
        "test_policy": "Test Blind",
        "lors_required": 0,
        "portfolio_required": False,
        "essays": _uc_piqs(),
    },
    "University of California, Los Angeles": {
        "name": "University of California, Los Angeles",
        "application_platform": "UC Application",
        "deadline": date(2024, 11, 30),
        "deadline_type": "UC",
        "test_policy": "Test Blind",
        "lors_required": 0,
        "portfolio_required": False,
        "essays": _uc_piqs(),
    },
    "Carnegie Mellon University": {
        "name": "Carnegie Mellon University",
        "application_platform": "Common App",
        "deadline": date(2025, 1, 3),
        "deadline_type": "RD",
        "test_policy": "Test Optional",
        "lors_required": 2,
        "portfolio_required": False,
        "essays": [
            COMMON_APP_PERSONAL_STATEMENT,
            {"title": "Why CMU", "essay_type": "Supplement",
             "prompt": "Why Carnegie Mellon?", "word_limit": 300},
        ],
    },
    "Georgia Tech": {
        "name": "Georgia Institute of Technology",
        "application_platform": "Common App",
        "deadline": date(2025, 1, 4),
        "deadline_type": "RD",
        "test_policy": "Test Optional",
        "lors_required": 1,
        "portfolio_required": False,
        "essays": [
            COMMON_APP_PERSONAL_STATEMENT,
            {"title": "Why Georgia Tech", "essay_type": "Supplement",
             "prompt": "Why do you want to study your chosen major specifically at Georgia Tech?",
             "word_limit": 300},
        ],
    },
    "University of Michigan": {
        "name": "University of Michigan",
        "application_platform": "Common App",
        "deadline": date(2025, 2, 1),
        "deadline_type": "RD",
        "test_policy": "Test Optional",
        "lors_required": 1,
        "portfolio_required": False,
        "essays": [
            COMMON_APP_PERSONAL_STATEMENT,
            {"title": "Community Essay", "essay_type": "Supplement",
             "prompt": "Describe one of the communities to which you belong and your place within it.",
             "word_limit": 300},
            {"title": "Why Michigan", "essay_type": "Supplement",
             "prompt": "Describe the unique qualities that attract you to the College or School you are applying to.",
             "word_limit": 550},
        ],
    },
}


def find_college(search_name: str) -> Optional[Dict[str, Any]]:
    """Case-insensitive lookup: exact key or official name first, then partial match"""
    needle = search_name.strip().lower()
    if not needle:
        return None

    for key, entry in COLLEGE_CATALOG.items():
        if key.lower() == needle or entry["name"].lower() == needle:
            return entry

    for key, entry in COLLEGE_CATALOG.items():
        key_lower = key.lower()
        if needle in key_lower or key_lower in needle or needle in entry["name"].lower():
            return entry

    return None


def catalog_names() -> List[str]:
    return sorted(entry["name"] for entry in COLLEGE_CATALOG.values())


def catalog_essay_title(college_name: str, essay_title: str) -> str:
    return f"{college_name} - {essay_title}"


async def ensure_catalog_essays(db: AsyncSession, college: College) -> int:
    """
    Create the catalog's required essays the college is still missing.
    Returns how many were added; colleges outside the catalog get none.
    """
    entry = find_college(college.name)
    if not entry:
        return 0

    result = await db.execute(
        select(Essay.title).where(
            Essay.user_id == college.user_id,
            Essay.college_id == college.id,
        )
    )
    existing_titles = set(result.scalars().all())

    count = 0
    for requirement in entry["essays"]:
        title = catalog_essay_title(college.name, requirement["title"])
        if title in existing_titles:
            continue
        db.add(Essay(
            user_id=college.user_id,
            college_id=college.id,
            title=title,
            essay_type=requirement.get("essay_type") or "Supplemental",
            prompt=requirement.get("prompt"),
            word_limit=requirement.get("word_limit"),
            content="",
            word_count=0,
            is_completed=False,
            version=1,
        ))
        existing_titles.add(title)
        count += 1

    if count:
        await db.flush()
        logger.info(f"Created {count} catalog essays for {college.name} (user {college.user_id})")
    return count

"""
Starter data for a new namespace

Two sources, tried in order by the goals service:
- A seed text file: "Category:" lines, each followed by "-goal" lines
- The built-in dataset below (5 categories x 3 goals)
"""

from datetime import datetime, timedelta
import logging
from pathlib import Path
from typing import List, Optional

from lifetrack.models import Category, Difficulty, Goal, User
from lifetrack.models.user import DEFAULT_USERNAME

logger = logging.getLogger(__name__)

DEFAULT_ICON = "bi-check-circle"
DEFAULT_COLOR = "#607D8B"  # Blue Grey

CATEGORY_ICONS = {
    "career": "bi-briefcase",
    "education": "bi-book",
    "health": "bi-heart",
    "finance": "bi-cash-coin",
    "personal development": "bi-person-plus",
}

CATEGORY_COLORS = {
    "career": "#4285F4",
    "education": "#34A853",
    "health": "#EA4335",
    "finance": "#FBBC05",
    "personal development": "#9C27B0",
}

# (name, [(goal id, description, points, difficulty), ...])
DEFAULT_DATASET = [
    ("Career", [
        (1, "Apply for one job", 10, Difficulty.NORMAL),
        (2, "Update LinkedIn profile", 5, Difficulty.EASY),
        (3, "Learn one new professional skill", 20, Difficulty.HARD),
    ]),
    ("Education", [
        (4, "Read 20 pages of a book", 10, Difficulty.NORMAL),
        (5, "Watch one educational video", 5, Difficulty.EASY),
        (6, "Practice a language for 15 minutes", 10, Difficulty.NORMAL),
    ]),
    ("Health", [
        (7, "Exercise for 30 minutes", 15, Difficulty.NORMAL),
        (8, "Drink 8 glasses of water", 5, Difficulty.EASY),
        (9, "Meditate for 10 minutes", 10, Difficulty.NORMAL),
    ]),
    ("Finance", [
        (10, "Track daily expenses", 5, Difficulty.EASY),
        (11, "Save 10% of income", 20, Difficulty.HARD),
        (12, "Review budget once a week", 10, Difficulty.NORMAL),
    ]),
    ("Personal Development", [
        (13, "Journal for 5 minutes", 5, Difficulty.EASY),
        (14, "Practice a hobby for 15 minutes", 10, Difficulty.NORMAL),
        (15, "Connect with a friend or family member", 10, Difficulty.NORMAL),
    ]),
]


def get_icon_for_category(category_name: str) -> str:
    return CATEGORY_ICONS.get(category_name.strip().lower(), DEFAULT_ICON)


def get_color_for_category(category_name: str) -> str:
    return CATEGORY_COLORS.get(category_name.strip().lower(), DEFAULT_COLOR)


def _new_category(category_id: int, name: str, now: datetime) -> Category:
    # Start two days back so the first completion begins a fresh streak
    return Category(
        id=category_id,
        name=name,
        icon=get_icon_for_category(name),
        color=get_color_for_category(name),
        last_completed_date=now - timedelta(days=2),
    )


def default_categories(now: datetime) -> List[Category]:
    """The built-in starter categories"""
    categories = []
    for category_id, (name, goals) in enumerate(DEFAULT_DATASET, start=1):
        category = _new_category(category_id, name, now)
        category.goals = [
            Goal(
                id=goal_id,
                description=description,
                category_id=category_id,
                points=points,
                difficulty=difficulty,
            )
            for goal_id, description, points, difficulty in goals
        ]
        categories.append(category)
    return categories


def default_user(now: datetime) -> User:
    return User(id=1, username=DEFAULT_USERNAME, last_active_date=now)


def parse_seed_text(text: str, now: datetime) -> List[Category]:
    """
    Parse seed text into categories

    Format:
        Career:
        -Apply for one job
        -Update LinkedIn profile

        Health:
        -Exercise for 30 minutes

    Blank lines, unrecognized lines and goal lines before the first category
    are ignored. Goal ids run sequentially across all categories. Seed goals
    are Normal difficulty.
    """
    categories: List[Category] = []
    current: Optional[Category] = None
    goal_id = 1

    for raw_line in text.splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            continue

        if line.endswith(":"):
            name = line.rstrip(":").strip()
            current = _new_category(len(categories) + 1, name, now)
            categories.append(current)
        elif line.startswith("-") and current is not None:
            current.goals.append(Goal(
                id=goal_id,
                description=line[1:].strip(),
                category_id=current.id,
                points=Difficulty.NORMAL.points,
                difficulty=Difficulty.NORMAL,
            ))
            goal_id += 1

    return categories


def load_seed_file(path: Path, now: datetime) -> List[Category]:
    """
    Read and parse a seed text file

    Returns:
        Parsed categories, or [] if the file does not exist

    Raises:
        OSError, UnicodeDecodeError: If the file exists but cannot be read
    """
    if not path.exists():
        logger.info(f"No seed file at {path}")
        return []

    categories = parse_seed_text(path.read_text(encoding="utf-8"), now)
    logger.info(f"Loaded {len(categories)} categories from seed file {path}")
    return categories

"""
Streak and Bonus Rules

Three day-based rules run after a goal completion:
- Category streak: consecutive days with a completion in that category
- Consistency streak: consecutive active days for the user, with a bonus
- Balance bonus: every category touched on the same day

All rules take the current time explicitly so callers (and tests) control
what "today" is.
"""

from datetime import datetime
import logging
from typing import List

from lifetrack.gamification.xp_system import (
    BALANCE_BONUS_POINTS,
    BALANCE_THRESHOLD,
    STREAK_BONUS,
)
from lifetrack.models import Category, User
from lifetrack.utils.datetime_helpers import day_of, is_previous_day, is_same_day

logger = logging.getLogger(__name__)


def update_category_streak(category: Category, now: datetime) -> int:
    """
    Count today toward the category streak

    Logic:
    - Already completed something today: no change
    - Last completion was yesterday: continue streak
    - Otherwise: streak restarts at 1

    Returns:
        Current completion streak
    """
    today = day_of(now)
    if is_same_day(category.last_completed_date, today):
        return category.completion_streak

    if is_previous_day(category.last_completed_date, today):
        category.completion_streak += 1
    else:
        category.completion_streak = 1

    category.last_completed_date = now
    return category.completion_streak


def update_user_streak(user: User, now: datetime) -> int:
    """
    Count today toward the user's consistency streak

    A continued streak awards STREAK_BONUS x new streak length.

    Returns:
        Bonus points awarded (0 if none)
    """
    today = day_of(now)
    bonus = 0

    if is_previous_day(user.last_active_date, today):
        user.consistency_streak += 1
        bonus = STREAK_BONUS * user.consistency_streak
        user.total_points += bonus
        logger.info(f"Streak bonus: +{bonus} points! (day {user.consistency_streak})")
    elif not is_same_day(user.last_active_date, today):
        user.consistency_streak = 1

    user.last_active_date = now
    return bonus


def all_categories_active(categories: List[Category], now: datetime) -> bool:
    """True if every category has BALANCE_THRESHOLD goals completed today"""
    today = day_of(now)
    return all(
        sum(
            1 for g in c.goals
            if g.is_completed and is_same_day(g.completed_date, today)
        ) >= BALANCE_THRESHOLD
        for c in categories
    )


def check_balance_bonus(categories: List[Category], user: User, now: datetime) -> int:
    """
    Award the balance bonus if every category was touched today

    Granted at most once per calendar day.

    Returns:
        Bonus points awarded (0 if none)
    """
    today = day_of(now)
    if user.last_balance_bonus_date == today:
        return 0

    if not categories or not all_categories_active(categories, now):
        return 0

    user.total_points += BALANCE_BONUS_POINTS
    user.balance_bonus += 1
    user.last_balance_bonus_date = today
    logger.info(f"Balance bonus awarded: +{BALANCE_BONUS_POINTS} points!")
    return BALANCE_BONUS_POINTS

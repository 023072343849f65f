"""
Points and Leveling

Point Award Rules:
- Goal completion: goal points (Easy 5, Normal 10, Hard 20)
- Consistency streak: 10 points x streak length, once per new active day
- Balance bonus: 50 points when every category has a goal completed today

Leveling Curve:
- Flat 100 points per level: level = 1 + total_points // 100
- Levels are never taken away, even if points drop after a goal reset
"""

import logging

from lifetrack.models import User

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 100
BALANCE_BONUS_POINTS = 50
STREAK_BONUS = 10  # Points per day of consistency streak
BALANCE_THRESHOLD = 1  # Goals completed today needed in every category


def calculate_level(total_points: int) -> int:
    """Level for a points total (never below 1)"""
    return max(1, 1 + total_points // POINTS_PER_LEVEL)


def update_user_level(user: User) -> bool:
    """
    Raise the user's level to match their points

    Returns:
        True if the user leveled up
    """
    calculated = calculate_level(user.total_points)
    if calculated > user.level:
        user.level = calculated
        logger.info(f"Level up! {user.username or 'User'} is now level {user.level}")
        return True
    return False


def points_to_next_level(user: User) -> int:
    """Points still needed to reach the level after the current one"""
    return max(0, user.level * POINTS_PER_LEVEL - user.total_points)

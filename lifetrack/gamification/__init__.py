"""
Gamification rules for LifeTrack

- Points and leveling (xp_system)
- Category and consistency streaks, balance bonus (streak_system)
- Starter data for new users (seed)
"""

from lifetrack.gamification.xp_system import calculate_level, update_user_level, points_to_next_level
from lifetrack.gamification.streak_system import (
    update_category_streak,
    update_user_streak,
    check_balance_bonus,
)
from lifetrack.gamification.seed import default_categories, default_user, load_seed_file, parse_seed_text

__all__ = [
    "calculate_level",
    "update_user_level",
    "points_to_next_level",
    "update_category_streak",
    "update_user_streak",
    "check_balance_bonus",
    "default_categories",
    "default_user",
    "load_seed_file",
    "parse_seed_text",
]

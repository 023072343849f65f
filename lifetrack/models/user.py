"""User-related Pydantic models"""
from datetime import date, datetime
from typing import Optional

from pydantic import Field

from lifetrack.models.base import Document

DEFAULT_USERNAME = "User"


class User(Document):
    """Gamification profile for one identity"""
    id: int = 0
    username: str = ""
    object_id: str = ""  # External identity (oid claim)
    email: str = ""
    total_points: int = 0
    level: int = 1
    balance_bonus: int = 0  # Days every category was touched
    consistency_streak: int = 0
    last_active_date: Optional[datetime] = None
    last_balance_bonus_date: Optional[date] = None
    category_completions: dict[str, int] = Field(default_factory=dict)

"""Category model"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from lifetrack.models.base import Document
from lifetrack.models.goal import Goal


class Category(Document):
    """A named group of goals with its own completion streak"""
    id: int = 0
    name: str = ""
    icon: str = ""
    color: str = ""
    goals: list[Goal] = Field(default_factory=list)
    completion_streak: int = Field(default=0, ge=0)
    last_completed_date: Optional[datetime] = None

    def get_goal(self, goal_id: int) -> Optional[Goal]:
        return next((g for g in self.goals if g.id == goal_id), None)

    def next_goal_id(self) -> int:
        return max((g.id for g in self.goals), default=0) + 1

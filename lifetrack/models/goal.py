"""Goal models"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator

from lifetrack.models.base import Document


class Difficulty(str, Enum):
    """Goal difficulty, which fixes the points a goal is worth"""
    EASY = "Easy"
    NORMAL = "Normal"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Coerce a raw value to a Difficulty; unknown values become NORMAL"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return cls.NORMAL

    @property
    def points(self) -> int:
        return DIFFICULTY_POINTS[self]


DIFFICULTY_POINTS: dict[Difficulty, int] = {
    Difficulty.EASY: 5,
    Difficulty.NORMAL: 10,
    Difficulty.HARD: 20,
}


def points_for_difficulty(difficulty: Any) -> int:
    """Points for a difficulty value (unrecognized values score as Normal)"""
    return Difficulty.parse(difficulty).points


class Goal(Document):
    """A checkable task inside a category"""
    id: int = 0
    description: str = ""
    category_id: int = 0
    is_completed: bool = False
    completed_date: Optional[datetime] = None
    points: int = 10
    difficulty: Difficulty = Difficulty.NORMAL

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, value: Any) -> Difficulty:
        return Difficulty.parse(value)

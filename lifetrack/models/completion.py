"""Result of completing a goal"""
from pydantic import BaseModel, computed_field


class CompletionResult(BaseModel):
    """What a single goal completion earned"""
    category_id: int
    goal_id: int
    goal_points: int
    streak_bonus: int = 0
    balance_bonus: int = 0
    category_streak: int = 0
    consistency_streak: int = 0
    total_points: int = 0
    old_level: int = 1
    new_level: int = 1

    @computed_field
    @property
    def points_awarded(self) -> int:
        return self.goal_points + self.streak_bonus + self.balance_bonus

    @computed_field
    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level

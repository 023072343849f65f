"""Domain models: persisted documents, completion results and identity claims"""
from lifetrack.models.category import Category
from lifetrack.models.completion import CompletionResult
from lifetrack.models.identity import Claim, ClientPrincipal
from lifetrack.models.goal import DIFFICULTY_POINTS, Difficulty, Goal, points_for_difficulty
from lifetrack.models.user import DEFAULT_USERNAME, User

__all__ = [
    "Category",
    "Claim",
    "ClientPrincipal",
    "CompletionResult",
    "DEFAULT_USERNAME",
    "DIFFICULTY_POINTS",
    "Difficulty",
    "Goal",
    "User",
    "points_for_difficulty",
]

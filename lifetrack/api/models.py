"""Pydantic models for API request/response validation"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from lifetrack.models import Category, CompletionResult, Goal, User


class AddGoalRequest(BaseModel):
    """Request to add a goal to a category"""
    description: str = Field(..., min_length=1, max_length=500, description="Goal text")
    difficulty: str = Field(
        default="Normal",
        description="Easy, Normal or Hard (other values count as Normal)"
    )


class UserUpdateRequest(BaseModel):
    """Request to change the display name"""
    username: str = Field(..., min_length=1, max_length=100)


class UserResponse(BaseModel):
    """Current user profile with level progress"""
    user: User
    authenticated: bool
    points_to_next_level: int


class CategoryListResponse(BaseModel):
    """All categories with their goals"""
    categories: List[Category]


class CompletionResponse(BaseModel):
    """Result of a goal completion request"""
    completed: bool = Field(..., description="False if the goal was already completed today")
    result: Optional[CompletionResult] = None
    user: User


class GoalResponse(BaseModel):
    """A single goal plus the updated profile"""
    goal: Goal
    user: User


class ClaimsResponse(BaseModel):
    """Identity claims of the caller"""
    claims: Dict[str, str]


class HealthCheckResponse(BaseModel):
    """Response for health check"""
    status: str
    storage: str
    timestamp: datetime

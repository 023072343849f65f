"""API routes for lifetrack"""
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request, status

from lifetrack.api.auth import get_client_principal
from lifetrack.api.middleware import limiter
from lifetrack.config import RATE_LIMIT_DEFAULT, RATE_LIMIT_STRICT
from lifetrack.exceptions import RecordNotFoundError, ValidationError
from lifetrack.api.models import (
    AddGoalRequest,
    CategoryListResponse,
    ClaimsResponse,
    CompletionResponse,
    GoalResponse,
    HealthCheckResponse,
    UserResponse,
    UserUpdateRequest,
)
from lifetrack.gamification import points_to_next_level
from lifetrack.models import Category, ClientPrincipal, Goal
from lifetrack.services import GoalsService, IdentityService, ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_identity_service(
    principal: ClientPrincipal = Depends(get_client_principal),
    container: ServiceContainer = Depends(get_container)
) -> IdentityService:
    return container.identity_service(principal)


async def get_goals_service(
    identity: IdentityService = Depends(get_identity_service)
) -> GoalsService:
    """GoalsService bound to the caller's documents"""
    await identity.resolve_namespace()
    return identity.goals


def _require_category(goals: GoalsService, category_id: int) -> Category:
    category = goals.get_category(category_id)
    if category is None:
        raise RecordNotFoundError(
            message=f"Category {category_id} not found",
            record_type="Category",
            record_id=str(category_id),
            user_id=goals.namespace or None,
            operation="get_category"
        )
    return category


def _require_goal(goals: GoalsService, category_id: int, goal_id: int) -> Goal:
    goal = _require_category(goals, category_id).get_goal(goal_id)
    if goal is None:
        raise RecordNotFoundError(
            message=f"Goal {goal_id} not found in category {category_id}",
            record_type="Goal",
            record_id=str(goal_id),
            user_id=goals.namespace or None,
            operation="get_goal"
        )
    return goal


# ============================================================================
# Profile
# ============================================================================

@router.get("/api/v1/me", response_model=UserResponse, response_model_by_alias=False)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def get_me(
    request: Request,
    identity: IdentityService = Depends(get_identity_service)
):
    """Current user's profile, refreshed from identity claims"""
    user = await identity.get_current_user()
    principal = await identity.auth_provider.get_principal()

    return UserResponse(
        user=user,
        authenticated=principal.is_authenticated,
        points_to_next_level=points_to_next_level(user)
    )


@router.patch("/api/v1/me", response_model=UserResponse, response_model_by_alias=False)
@limiter.limit(RATE_LIMIT_STRICT)
async def update_me(
    request: Request,
    update: UserUpdateRequest,
    identity: IdentityService = Depends(get_identity_service)
):
    """Change the display name"""
    principal = await identity.auth_provider.get_principal()
    if not principal.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in to update your profile"
        )

    username = update.username.strip()
    if not username:
        raise ValidationError(
            message="Username must not be blank",
            field="username",
            value=update.username,
            operation="update_me"
        )

    user = await identity.get_current_user()
    user.username = username
    user = await identity.goals.update_user(user)
    logger.info(f"Username updated for {user.object_id}")

    return UserResponse(
        user=user,
        authenticated=True,
        points_to_next_level=points_to_next_level(user)
    )


@router.get("/api/v1/me/claims", response_model=ClaimsResponse)
@limiter.limit(RATE_LIMIT_STRICT)
async def get_claims(
    request: Request,
    identity: IdentityService = Depends(get_identity_service)
):
    """Identity claims forwarded for the caller"""
    return ClaimsResponse(claims=await identity.get_user_claims())


# ============================================================================
# Categories & Goals
# ============================================================================

@router.get("/api/v1/categories", response_model=CategoryListResponse, response_model_by_alias=False)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def list_categories(
    request: Request,
    goals: GoalsService = Depends(get_goals_service)
):
    """All categories with their goals"""
    return CategoryListResponse(categories=goals.get_categories())


@router.get("/api/v1/categories/{category_id}", response_model=Category, response_model_by_alias=False)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def get_category(
    request: Request,
    category_id: int,
    goals: GoalsService = Depends(get_goals_service)
):
    """A single category with its goals"""
    return _require_category(goals, category_id)


@router.post(
    "/api/v1/categories/{category_id}/goals",
    response_model=GoalResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(RATE_LIMIT_STRICT)
async def add_goal(
    request: Request,
    category_id: int,
    goal_request: AddGoalRequest,
    goals: GoalsService = Depends(get_goals_service)
):
    """Add a goal to a category"""
    _require_category(goals, category_id)

    goal = await goals.add_goal(
        category_id,
        goal_request.description.strip(),
        goal_request.difficulty
    )
    return GoalResponse(goal=goal, user=goals.get_current_user())


@router.post(
    "/api/v1/categories/{category_id}/goals/{goal_id}/complete",
    response_model=CompletionResponse,
    response_model_by_alias=False
)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def complete_goal(
    request: Request,
    category_id: int,
    goal_id: int,
    goals: GoalsService = Depends(get_goals_service)
):
    """Complete a goal (no effect if it was already completed today)"""
    _require_goal(goals, category_id, goal_id)

    result = await goals.complete_goal(category_id, goal_id)
    return CompletionResponse(
        completed=result is not None,
        result=result,
        user=goals.get_current_user()
    )


@router.post(
    "/api/v1/categories/{category_id}/goals/{goal_id}/reset",
    response_model=GoalResponse,
    response_model_by_alias=False
)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def reset_goal(
    request: Request,
    category_id: int,
    goal_id: int,
    goals: GoalsService = Depends(get_goals_service)
):
    """Un-complete a goal and take back its points"""

    goal = _require_goal(goals, category_id, goal_id)
    await goals.reset_goal(category_id, goal_id)
    return GoalResponse(goal=goal, user=goals.get_current_user())


# ============================================================================
# Health
# ============================================================================

@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
async def health_check(
    request: Request,
    container: ServiceContainer = Depends(get_container)
):
    """Health check endpoint (degraded while any session runs on local storage)"""
    storage = container.storage_mode
    return HealthCheckResponse(
        status="healthy" if storage == "remote" else "degraded",
        storage=storage,
        timestamp=datetime.now()
    )

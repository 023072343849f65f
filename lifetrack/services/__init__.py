"""
Service Layer Package

- GoalsService: goal completion, streaks, bonuses, levels and persistence
- IdentityService: identity claims -> user profile and storage namespace
- ServiceContainer: storage clients and per-session services
"""

from lifetrack.services.container import ServiceContainer, build_container
from lifetrack.services.goals_service import GoalsService
from lifetrack.services.identity_service import (
    AuthenticationStateProvider,
    IdentityService,
    StaticPrincipalProvider,
)

__all__ = [
    "AuthenticationStateProvider",
    "GoalsService",
    "IdentityService",
    "ServiceContainer",
    "StaticPrincipalProvider",
    "build_container",
]

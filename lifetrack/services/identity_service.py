"""
IdentityService - Maps identity provider claims onto the user profile

The provider authenticates the caller; this service only reads the resolved
claims. The object id claim selects the storage namespace, so a new identity
gets its own categories and profile.
"""

import logging
from typing import Dict, Protocol

from lifetrack.models import ClientPrincipal, User
from lifetrack.models.identity import EMAIL_CLAIMS, NAME_CLAIMS
from lifetrack.models.user import DEFAULT_USERNAME
from lifetrack.services.goals_service import GoalsService

logger = logging.getLogger(__name__)


class AuthenticationStateProvider(Protocol):
    """Source of the current caller's principal"""

    async def get_principal(self) -> ClientPrincipal:
        ...


class StaticPrincipalProvider:
    """Provider for a principal resolved up front (e.g. from request headers)"""

    def __init__(self, principal: ClientPrincipal):
        self.principal = principal

    async def get_principal(self) -> ClientPrincipal:
        return self.principal


class IdentityService:
    """
    Service for the signed-in user's profile.

    Responsibilities:
    - Resolve the caller from the authentication state provider
    - Switch the goals service to the caller's storage namespace
    - Merge claim values into the stored profile
    """

    def __init__(self, auth_provider: AuthenticationStateProvider, goals_service: GoalsService):
        self.auth_provider = auth_provider
        self.goals = goals_service

    async def get_current_user(self) -> User:
        """
        Current user's profile, updated from identity claims.

        Returns:
            The stored profile, or an empty User if the caller is not
            authenticated
        """
        principal = await self.auth_provider.get_principal()
        if not principal.is_authenticated:
            logger.warning("User is not authenticated or has no object id claim")
            return User()

        object_id = await self._activate(principal)
        email = principal.find_first(*EMAIL_CLAIMS) or ""
        name = principal.find_first(*NAME_CLAIMS) or email.split("@")[0]

        current_user = self.goals.get_current_user()

        current_user.object_id = object_id
        if email:
            current_user.email = email

        # Keep a username the user chose; replace only the placeholder
        if name and (not current_user.username or current_user.username == DEFAULT_USERNAME):
            current_user.username = name

        return await self.goals.update_user(current_user)

    async def resolve_namespace(self) -> str:
        """
        Bind the goals service to the caller's documents without touching
        the profile.

        Returns:
            Object id of the caller ("" if unauthenticated or unknown)
        """
        principal = await self.auth_provider.get_principal()
        if not principal.is_authenticated:
            await self.goals.ensure_initialized()
            return ""
        return await self._activate(principal)

    async def _activate(self, principal: ClientPrincipal) -> str:
        await self.goals.switch_namespace(principal.object_id)
        await self.goals.ensure_initialized()
        return principal.object_id

    async def get_user_claims(self) -> Dict[str, str]:
        """Claim type -> value for the current principal (later claims win)"""
        principal = await self.auth_provider.get_principal()
        return {claim.type: claim.value for claim in principal.claims}

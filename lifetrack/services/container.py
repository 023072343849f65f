"""
Service Container - Dependency Injection Container

Holds the shared storage clients and hands out one GoalsService per session.
Sessions are keyed by identity, so each signed-in user gets an engine bound
to their own documents. At most max_sessions engines are kept; the least
recently used one is dropped first (every mutation is already persisted).
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from lifetrack.config import DATA_PATH, MAX_SESSIONS, SEED_FILE_PATH
from lifetrack.models import ClientPrincipal
from lifetrack.services.goals_service import GoalsService
from lifetrack.services.identity_service import IdentityService, StaticPrincipalProvider
from lifetrack.storage import BlobStore, LocalBlobStore, create_blob_store
from lifetrack.utils.datetime_helpers import Clock, now_local

logger = logging.getLogger(__name__)

ANONYMOUS_SESSION = "anonymous"


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Infrastructure dependencies (stores, clock) are injected; goal sessions
    are created on first access.
    """

    remote_store: Optional[BlobStore]
    local_store: BlobStore
    clock: Clock = now_local
    seed_file_path: Optional[Path] = SEED_FILE_PATH
    max_sessions: int = MAX_SESSIONS

    _sessions: "OrderedDict[str, GoalsService]" = field(default_factory=OrderedDict, init=False, repr=False)

    @staticmethod
    def session_key(principal: ClientPrincipal) -> str:
        if not principal.is_authenticated:
            return ANONYMOUS_SESSION
        return principal.object_id

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def goals_service(self, session_key: str) -> GoalsService:
        """Get the GoalsService for a session (created, not yet initialized)"""
        service = self._sessions.get(session_key)
        if service is not None:
            self._sessions.move_to_end(session_key)
            return service

        service = GoalsService(
            remote_store=self.remote_store,
            local_store=self.local_store,
            clock=self.clock,
            seed_file_path=self.seed_file_path,
        )
        self._sessions[session_key] = service
        logger.debug(f"GoalsService instantiated for session {session_key}")

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Session limit {self.max_sessions} reached, dropped session {evicted}")
        return service

    def identity_service(self, principal: ClientPrincipal) -> IdentityService:
        """IdentityService for a caller, bound to that caller's session"""
        goals = self.goals_service(self.session_key(principal))
        return IdentityService(StaticPrincipalProvider(principal), goals)

    @property
    def storage_mode(self) -> str:
        """
        "remote" while blob storage serves every session, "local" if it is
        not configured or any session fell back to local files
        """
        if self.remote_store is None:
            return "local"
        if any(service.use_local_storage for service in self._sessions.values()):
            return "local"
        return "remote"

    async def close(self) -> None:
        if self.remote_store is not None:
            await self.remote_store.close()
        logger.info("Service container closed")


def build_container(
    remote_store: Optional[BlobStore] = None,
    local_store: Optional[BlobStore] = None,
    clock: Clock = now_local,
    seed_file_path: Optional[Path] = SEED_FILE_PATH
) -> ServiceContainer:
    """
    Build a container from configuration.

    Args:
        remote_store: Blob store to use; built from configuration if omitted
        local_store: Fallback store; LocalBlobStore under DATA_PATH if omitted
    """
    if remote_store is None:
        remote_store = create_blob_store()

    container = ServiceContainer(
        remote_store=remote_store,
        local_store=local_store or LocalBlobStore(DATA_PATH),
        clock=clock,
        seed_file_path=seed_file_path,
    )
    logger.info(f"Service container initialized (storage: {container.storage_mode})")
    return container

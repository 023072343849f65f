"""Global test fixtures and utilities for lifetrack tests"""
import pytest
import pytest_asyncio
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from lifetrack.storage import BlobStore
from lifetrack.services import GoalsService


# ============================================================================
# Time
# ============================================================================

class FakeClock:
    """Controllable clock: call it for 'now', advance() to move days"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0) -> datetime:
        self.current = self.current + timedelta(days=days, hours=hours)
        return self.current


@pytest.fixture
def clock():
    """Clock starting Monday 2024-01-15 09:00"""
    return FakeClock(datetime(2024, 1, 15, 9, 0))


# ============================================================================
# Storage
# ============================================================================

class MemoryBlobStore(BlobStore):
    """Dict-backed store that can be told to fail"""

    def __init__(self, name: str = "memory"):
        self.name = name
        self.documents: Dict[str, bytes] = {}
        self.reads: List[str] = []
        self.fail_reads = False
        self.fail_writes = False
        self.closed = False

    async def _read(self, key: str) -> Optional[bytes]:
        self.reads.append(key)
        if self.fail_reads:
            raise OSError("storage unreachable")
        return self.documents.get(key)

    async def _write(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise OSError("storage unreachable")
        self.documents[key] = data

    async def _remove(self, key: str) -> None:
        if self.fail_writes:
            raise OSError("storage unreachable")
        self.documents.pop(key, None)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def remote_store():
    return MemoryBlobStore("remote")


@pytest.fixture
def local_store():
    return MemoryBlobStore("local")


# ============================================================================
# Services
# ============================================================================

@pytest.fixture
def make_goals_service(remote_store, local_store, clock):
    """Factory for GoalsService wired to the fake stores and clock"""
    def _make(**kwargs) -> GoalsService:
        kwargs.setdefault("remote_store", remote_store)
        kwargs.setdefault("local_store", local_store)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("seed_file_path", None)
        return GoalsService(**kwargs)
    return _make


@pytest_asyncio.fixture
async def goals_service(make_goals_service):
    """Initialized GoalsService on the built-in starter data"""
    service = make_goals_service()
    await service.initialize()
    return service

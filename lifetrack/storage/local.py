"""Local JSON file store used when blob storage is unavailable"""

import logging
from pathlib import Path
from typing import Optional

from lifetrack.config import DATA_PATH
from lifetrack.exceptions import StorageError
from lifetrack.storage.base import BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Documents as files in a single directory"""

    name = "local"

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def _path(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise StorageError(
                message=f"Invalid document key: {key!r}",
                key=key,
                operation="local_path"
            )
        return self.data_path / key

    async def _read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    async def _write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        self.data_path.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a crash never leaves half a document
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(path)

    async def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

"""
Blob store contract

Every store maps a key (file name) to one JSON document. Subclasses only move
bytes; this base class owns serialization and error conversion:

- load() raises StorageError on any failure, for callers that need to react
  (the goals service drops to local mode when a remote load fails)
- get()/put()/delete() never raise: failures are logged and reported as
  None/False
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python

from lifetrack.exceptions import StorageError, wrap_storage_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlobStore(ABC):
    """Async key -> JSON document store"""

    name: str = "blob"

    @abstractmethod
    async def _read(self, key: str) -> Optional[bytes]:
        """Raw document bytes, or None if the key does not exist"""

    @abstractmethod
    async def _write(self, key: str, data: bytes) -> None:
        """Create or overwrite a document"""

    @abstractmethod
    async def _remove(self, key: str) -> None:
        """Remove a document if it exists"""

    async def close(self) -> None:
        """Release client resources"""

    async def load(self, key: str, model: Optional[type[T]] = None) -> Optional[T]:
        """
        Read and decode a document.

        Args:
            key: Document key
            model: Optional type to validate the JSON into (e.g. list[Category])

        Returns:
            Decoded document, or None if it does not exist

        Raises:
            StorageError: On transport failure or an undecodable document
        """
        try:
            raw = await self._read(key)
        except Exception as e:
            raise wrap_storage_exception(e, key=key, operation=f"{self.name}_load")

        if raw is None:
            return None

        try:
            data = json.loads(raw)
            if model is None:
                return data
            return TypeAdapter(model).validate_python(data)
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
            raise StorageError(
                message=f"Document {key} in {self.name} store is not valid: {e}",
                key=key,
                operation=f"{self.name}_load",
                cause=e
            )

    async def get(self, key: str, model: Optional[type[T]] = None) -> Optional[T]:
        """Like load(), but failures are logged and reported as None"""
        try:
            return await self.load(key, model)
        except StorageError:
            logger.error(f"Error retrieving {key} from {self.name} store")
            return None

    async def put(self, key: str, value: Any) -> bool:
        """
        Serialize and store a document (indented JSON, overwrite).

        Returns:
            True if the document was written
        """
        try:
            payload = json.dumps(
                to_jsonable_python(value, by_alias=True),
                indent=2,
                ensure_ascii=False
            ).encode("utf-8")
            await self._write(key, payload)
        except Exception as e:
            logger.error(f"Error saving {key} to {self.name} store: {e}", exc_info=True)
            return False

        logger.info(f"Data saved to {self.name} store: {key}")
        return True

    async def delete(self, key: str) -> bool:
        """Delete a document; True if the store accepted the request"""
        try:
            await self._remove(key)
        except Exception as e:
            logger.error(f"Error deleting {key} from {self.name} store: {e}", exc_info=True)
            return False

        logger.info(f"Data deleted from {self.name} store: {key}")
        return True

"""Azure Blob Storage backed document store"""

import asyncio
import logging
from typing import Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from lifetrack.config import DEFAULT_CONTAINER_NAME
from lifetrack.storage.base import BlobStore

logger = logging.getLogger(__name__)


class AzureBlobStore(BlobStore):
    """
    One JSON document per blob in a single container.

    The container is created on first use if it does not exist.
    """

    name = "azure"

    def __init__(
        self,
        connection_string: Optional[str] = None,
        container_name: str = DEFAULT_CONTAINER_NAME,
        container_client: Optional[ContainerClient] = None
    ):
        """
        Args:
            connection_string: Storage account connection string
            container_name: Blob container holding all documents
            container_client: Pre-built container client (tests, custom credentials)

        Raises:
            ValueError: If the connection string cannot be parsed
        """
        self.container_name = container_name
        self._service_client: Optional[BlobServiceClient] = None

        if container_client is None:
            if not connection_string:
                raise ValueError("connection_string or container_client is required")
            self._service_client = BlobServiceClient.from_connection_string(connection_string)
            container_client = self._service_client.get_container_client(container_name)

        self._container = container_client
        self._container_ready = False
        self._container_lock = asyncio.Lock()

    async def _ensure_container(self) -> None:
        if self._container_ready:
            return

        async with self._container_lock:
            if self._container_ready:
                return
            try:
                await self._container.create_container()
                logger.info(f"Created blob container: {self.container_name}")
            except ResourceExistsError:
                pass
            self._container_ready = True

    async def _read(self, key: str) -> Optional[bytes]:
        await self._ensure_container()
        blob = self._container.get_blob_client(key)
        if not await blob.exists():
            return None

        downloader = await blob.download_blob()
        return await downloader.readall()

    async def _write(self, key: str, data: bytes) -> None:
        await self._ensure_container()
        blob = self._container.get_blob_client(key)
        await blob.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type="application/json")
        )

    async def _remove(self, key: str) -> None:
        await self._ensure_container()
        blob = self._container.get_blob_client(key)
        try:
            await blob.delete_blob()
        except ResourceNotFoundError:
            logger.debug(f"Blob {key} already absent")

    async def close(self) -> None:
        await self._container.close()
        if self._service_client is not None:
            await self._service_client.close()

"""
Document storage

- BlobStore: async key -> JSON document contract
- AzureBlobStore: Azure Blob Storage container
- LocalBlobStore: JSON files on disk (offline fallback)
"""

import logging
from typing import Any, Optional

from lifetrack.config import get_container_name, get_storage_connection_string, load_settings_file
from lifetrack.exceptions import ConfigurationError
from lifetrack.storage.azure_blob import AzureBlobStore
from lifetrack.storage.base import BlobStore
from lifetrack.storage.local import LocalBlobStore

logger = logging.getLogger(__name__)


def create_blob_store(settings: Optional[dict[str, Any]] = None) -> Optional[AzureBlobStore]:
    """
    Build the remote store from configuration.

    Returns:
        AzureBlobStore, or None when storage is not configured or the
        connection string is unusable (the app then runs on local files)
    """
    try:
        if settings is None:
            settings = load_settings_file()
        connection_string = get_storage_connection_string(settings)
        container_name = get_container_name(settings)
        store = AzureBlobStore(connection_string, container_name)
    except ConfigurationError as e:
        logger.warning(f"Blob storage disabled, using local storage fallback: {e.message}")
        return None
    except ValueError as e:
        logger.warning(f"Invalid blob storage connection string, using local storage fallback: {e}")
        return None

    logger.info(f"Blob storage configured (container: {container_name})")
    return store


__all__ = [
    "AzureBlobStore",
    "BlobStore",
    "LocalBlobStore",
    "create_blob_store",
]

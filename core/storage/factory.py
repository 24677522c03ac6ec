"""
Storage factory for creating storage backend instances.

This module provides factory functions to create the appropriate
storage implementations based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BasePostRepository


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MONGODB = "mongodb"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_post_repository(settings: "Settings") -> BasePostRepository:
    """
    Create a post repository instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured repository instance (not yet initialized)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBPostRepository

        logger.info(
            "Creating MongoDB post repository",
            database=settings.mongodb_database,
        )
        return MongoDBPostRepository(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            timeout_ms=settings.mongodb_timeout_ms,
        )

    raise ValueError(f"Unsupported backend: {backend}")

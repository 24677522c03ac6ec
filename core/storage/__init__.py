"""
Storage abstraction layer.

Provides the post repository contract and its backends.

Supported backends:
- MongoDB
"""

from core.storage.base import (
    AuthorName,
    BasePostRepository,
    PostRecord,
    StorageError,
)
from core.storage.factory import (
    create_post_repository,
    get_storage_backend,
    StorageBackend,
)

__all__ = [
    # Records and errors
    "AuthorName",
    "PostRecord",
    "StorageError",
    # Abstract interface
    "BasePostRepository",
    # Factory functions
    "create_post_repository",
    "get_storage_backend",
    "StorageBackend",
]

"""
Abstract base classes for post storage backends.

This module defines the record types and the contract that every
storage implementation must follow. The HTTP layer only ever talks
to a BasePostRepository, never to a driver directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_storage_time(value: datetime) -> datetime:
    """
    Normalize a timestamp to what MongoDB keeps: UTC, millisecond precision.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


class StorageError(Exception):
    """
    Raised when the underlying store is unreachable or rejects an operation.

    The driver exception is kept as ``__cause__``.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


@dataclass
class AuthorName:
    """Embedded author value. Stored as {firstName, lastName}."""
    first_name: str
    last_name: str

    def to_dict(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthorName":
        return cls(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
        )


@dataclass
class PostRecord:
    """
    One blog post as persisted by the store.

    ``id`` is None until the store assigns one on insert and never
    changes afterwards.
    """
    author: AuthorName
    title: str
    content: str
    created: datetime = field(default_factory=utcnow)
    id: Optional[str] = None

    def __post_init__(self) -> None:
        self.created = to_storage_time(self.created)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored document shape (without the identifier)."""
        return {
            "author": self.author.to_dict(),
            "title": self.title,
            "content": self.content,
            "created": self.created,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PostRecord":
        """Create from a stored document. ``_id`` becomes the string ``id``."""
        raw_id = data.get("_id", data.get("id"))
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            author=AuthorName.from_dict(data.get("author") or {}),
            title=data.get("title", ""),
            content=data.get("content", ""),
            created=data.get("created") or utcnow(),
        )


class BasePostRepository(ABC):
    """
    Abstract base class for post storage.

    Implementations are constructed explicitly and handed to the
    application; setup() and close() bracket their lifetime.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Connect and create collections/indexes.

        This should be idempotent.
        """
        pass

    @abstractmethod
    async def insert_many(self, records: Sequence[PostRecord]) -> list[PostRecord]:
        """
        Insert records in bulk.

        Returns the stored records with their freshly assigned ids.
        """
        pass

    async def create(self, record: PostRecord) -> PostRecord:
        """Insert a single record and return it with its id."""
        created = await self.insert_many([record])
        return created[0]

    @abstractmethod
    async def find_all(self) -> list[PostRecord]:
        """Get every stored record in insertion order."""
        pass

    @abstractmethod
    async def find_by_id(self, post_id: str) -> Optional[PostRecord]:
        """Get a record by id, or None when no record has that id."""
        pass

    @abstractmethod
    async def update_by_id(self, post_id: str, fields: dict[str, Any]) -> bool:
        """
        Merge the given fields into an existing record.

        Fields not present in ``fields`` are left unchanged.
        Returns True if the record was found.
        """
        pass

    @abstractmethod
    async def delete_by_id(self, post_id: str) -> bool:
        """
        Remove a record.

        Returns True if a record was removed, False if none had that id.
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Total number of stored records."""
        pass

    @abstractmethod
    async def drop_all(self) -> None:
        """Drop every stored record, including the backing database."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources."""
        pass

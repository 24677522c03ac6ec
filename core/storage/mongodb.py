"""
MongoDB storage backend implementation.

Provides the motor-based post repository. Every driver error is
re-raised as StorageError so callers never see pymongo exceptions.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from core.logging import get_logger
from core.storage.base import BasePostRepository, PostRecord, StorageError


logger = get_logger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Translate driver exceptions raised inside the block."""
    try:
        yield
    except PyMongoError as exc:
        logger.error(
            "MongoDB operation failed",
            operation=operation,
            error=str(exc),
        )
        raise StorageError(operation, str(exc)) from exc


def _to_object_id(post_id: str) -> Optional[ObjectId]:
    """Parse a post id. Strings that are not ObjectIds match nothing."""
    if not ObjectId.is_valid(post_id):
        return None
    return ObjectId(post_id)


class MongoDBPostRepository(BasePostRepository):
    """
    MongoDB-based post repository.

    Posts live in a single collection; the ObjectId assigned on insert
    is the post id.
    """

    COLLECTION_NAME = "posts"

    def __init__(
        self,
        connection_string: str = "mongodb://localhost:27017",
        database_name: str = "blog_posts",
        *,
        client: Optional[AsyncIOMotorClient] = None,
        timeout_ms: int = 5000,
    ):
        """
        Initialize MongoDB post repository.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database name
            client: Pre-built async client; the repository does not close it
            timeout_ms: Server selection timeout for clients created here
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._timeout_ms = timeout_ms
        self._client: Optional[AsyncIOMotorClient] = client
        self._owns_client = client is None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def setup(self) -> None:
        """Initialize connection and create indexes."""
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self._connection_string,
                serverSelectionTimeoutMS=self._timeout_ms,
                tz_aware=True,
            )
        self._db = self._client[self._database_name]

        with _storage_errors("setup"):
            await self._create_indexes()

        logger.info(
            "MongoDB post repository initialized",
            database=self._database_name,
            collection=self.COLLECTION_NAME,
        )

    async def _create_indexes(self) -> None:
        await self._collection.create_index(
            [("created", DESCENDING)],
            name="idx_created",
        )

    @property
    def _collection(self):
        """Get the posts collection."""
        if self._db is None:
            raise RuntimeError(
                "Repository not initialized. Call setup() first."
            )
        return self._db[self.COLLECTION_NAME]

    async def insert_many(self, records: Sequence[PostRecord]) -> list[PostRecord]:
        """Insert records and fill in their assigned ids."""
        if not records:
            return []

        docs = [record.to_dict() for record in records]
        with _storage_errors("insert_many"):
            result = await self._collection.insert_many(docs)

        created = []
        for record, inserted_id in zip(records, result.inserted_ids):
            record.id = str(inserted_id)
            created.append(record)

        logger.debug("Posts inserted", count=len(created))
        return created

    async def find_all(self) -> list[PostRecord]:
        """Get every post."""
        with _storage_errors("find_all"):
            docs = await self._collection.find({}).to_list(length=None)
        return [PostRecord.from_dict(doc) for doc in docs]

    async def find_by_id(self, post_id: str) -> Optional[PostRecord]:
        """Get a post by id."""
        oid = _to_object_id(post_id)
        if oid is None:
            return None

        with _storage_errors("find_by_id"):
            doc = await self._collection.find_one({"_id": oid})
        if doc is None:
            return None
        return PostRecord.from_dict(doc)

    async def update_by_id(self, post_id: str, fields: dict[str, Any]) -> bool:
        """Set the given fields on a post."""
        oid = _to_object_id(post_id)
        if oid is None:
            return False

        if not fields:
            with _storage_errors("update_by_id"):
                found = await self._collection.count_documents({"_id": oid}, limit=1)
            return found > 0

        with _storage_errors("update_by_id"):
            result = await self._collection.update_one(
                {"_id": oid},
                {"$set": fields},
            )

        if result.matched_count > 0:
            logger.debug("Post updated", post_id=post_id, fields=sorted(fields))
            return True
        return False

    async def delete_by_id(self, post_id: str) -> bool:
        """Delete a post."""
        oid = _to_object_id(post_id)
        if oid is None:
            return False

        with _storage_errors("delete_by_id"):
            result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def count(self) -> int:
        with _storage_errors("count"):
            return await self._collection.count_documents({})

    async def drop_all(self) -> None:
        """Drop the whole database, then recreate the empty collection's indexes."""
        if self._client is None:
            raise RuntimeError(
                "Repository not initialized. Call setup() first."
            )
        self._db = self._client[self._database_name]
        with _storage_errors("drop_all"):
            await self._client.drop_database(self._database_name)
            await self._create_indexes()
        logger.warning("Database dropped", database=self._database_name)

    async def close(self) -> None:
        """Close MongoDB connection if this repository opened it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        self._db = None
        logger.info("MongoDB post repository closed")

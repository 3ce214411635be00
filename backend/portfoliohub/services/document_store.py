"""
Document store boundary over MongoDB.

Key-addressed records in named collections: point reads, overwrite writes,
create-if-absent, single-field equality queries. Driver failures surface as
StorageError so callers never see pymongo exceptions.
"""
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from portfoliohub.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class DocumentStore:
    """Thin key/value facade over one MongoDB database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the database holding the collections."""
        self.db = db

    async def get(self, collection: str, key: str) -> Optional[dict[str, Any]]:
        """Point read. Returns the document (with its _id) or None."""
        try:
            return await self.db[collection].find_one({"_id": key})
        except PyMongoError as e:
            logger.error("Read %s/%s failed: %s", collection, key, e)
            raise StorageError() from e

    async def put(self, collection: str, key: str, value: dict[str, Any]) -> None:
        """Point write with overwrite semantics: the stored document becomes exactly `value`."""
        document = {k: v for k, v in value.items() if k != "_id"}
        try:
            await self.db[collection].replace_one({"_id": key}, document, upsert=True)
        except PyMongoError as e:
            logger.error("Write %s/%s failed: %s", collection, key, e)
            raise StorageError() from e

    async def create(self, collection: str, key: str, value: dict[str, Any]) -> bool:
        """
        Create-if-absent.

        Returns:
            True if the document was inserted, False if the key already existed
        """
        document = {**{k: v for k, v in value.items() if k != "_id"}, "_id": key}
        try:
            await self.db[collection].insert_one(document)
        except DuplicateKeyError:
            return False
        except PyMongoError as e:
            logger.error("Create %s/%s failed: %s", collection, key, e)
            raise StorageError() from e
        return True

    async def update_fields(self, collection: str, key: str, fields: dict[str, Any]) -> bool:
        """
        Merge `fields` into an existing document.

        Returns:
            True if a document with that key exists
        """
        if not fields:
            return await self.get(collection, key) is not None
        try:
            result = await self.db[collection].update_one({"_id": key}, {"$set": fields})
        except PyMongoError as e:
            logger.error("Update %s/%s failed: %s", collection, key, e)
            raise StorageError() from e
        return result.matched_count > 0

    async def delete_if(self, collection: str, key: str, field: str, value: Any) -> bool:
        """Delete the document only while `field == value` still holds."""
        try:
            result = await self.db[collection].delete_one({"_id": key, field: value})
        except PyMongoError as e:
            logger.error("Delete %s/%s failed: %s", collection, key, e)
            raise StorageError() from e
        return result.deleted_count > 0

    async def find_by(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        """Equality query on a single field."""
        return await self.scan(collection, {field: value})

    async def scan(
        self,
        collection: str,
        query: Optional[dict[str, Any]] = None,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        """Return every document matching a raw filter (all documents by default)."""
        try:
            cursor = self.db[collection].find(query or {})
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Query on %s failed: %s", collection, e)
            raise StorageError() from e

"""MongoDB implementation of the document store."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from src.commons.infrastructure.documentdb.base import (
    DeleteSummary,
    DocumentStoreBase,
    HealthStatus,
    InsertManySummary,
    UpdateSummary,
)
from src.commons.infrastructure.documentdb.connection import (
    ConnectionConfig,
    MongoConnectionFactory,
)
from src.commons.infrastructure.documentdb.exceptions import (
    DocumentDBError,
    DocumentDBOperationError,
)
from src.commons.telemetry.decorators import timed
from src.commons.telemetry.logger import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

# pymongo reports malformed filters and update documents as TypeError
DRIVER_ERRORS = (PyMongoError, BSONError, TypeError)


class MongoDocumentStore(DocumentStoreBase):
    """MongoDB document store.

    Uses Motor for async operations. No client is kept between calls:
    each operation connects, runs one command and disconnects.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        connections: MongoConnectionFactory | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Endpoint URL and database name.
            connections: Optional connection factory override.
        """
        self._config = config
        self._connections = connections or MongoConnectionFactory(config)

    async def _execute(
        self,
        collection: str,
        operation: str,
        action: Callable[[AsyncIOMotorCollection[dict[str, Any]]], Awaitable[R]],
    ) -> R:
        async with self._connections.acquire() as handle:
            try:
                return await action(handle.database[collection])
            except DRIVER_ERRORS as e:
                logger.error(
                    f"MongoDB {operation} failed",
                    extra={"collection": collection, "error": str(e)},
                )
                raise DocumentDBOperationError(collection, operation, e) from e

    @timed
    async def read_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every document in the collection."""

        async def action(
            coll: AsyncIOMotorCollection[dict[str, Any]],
        ) -> list[dict[str, Any]]:
            results: list[dict[str, Any]] = []
            async for doc in coll.find({}):
                results.append(doc)
            return results

        return await self._execute(collection, "find", action)

    @timed
    async def insert_many(
        self,
        collection: str,
        documents: list[dict[str, Any]],
    ) -> InsertManySummary:
        """Insert all documents with a single driver call.

        Raises:
            ValueError: If documents is empty. No connection is opened.
        """
        if not documents:
            raise ValueError("insert_many requires at least one document")

        async def action(
            coll: AsyncIOMotorCollection[dict[str, Any]],
        ) -> InsertManySummary:
            result = await coll.insert_many(documents)
            return InsertManySummary(
                inserted_count=len(result.inserted_ids),
                inserted_ids=list(result.inserted_ids),
            )

        return await self._execute(collection, "insert_many", action)

    @timed
    async def remove_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> DeleteSummary:
        """Delete the first document matching filters.

        A filter that matches nothing is not an error.
        """

        async def action(coll: AsyncIOMotorCollection[dict[str, Any]]) -> DeleteSummary:
            result = await coll.delete_one(filters)
            return DeleteSummary(deleted_count=int(result.deleted_count))

        return await self._execute(collection, "delete_one", action)

    @timed
    async def update_many(
        self,
        collection: str,
        update: dict[str, Any],
        filters: dict[str, Any] | None = None,
    ) -> UpdateSummary:
        """Apply update as a $set patch to every document matching filters.

        Warning: filters defaults to {} and so matches every document in
        the collection when omitted.
        """
        query = filters if filters is not None else {}

        async def action(coll: AsyncIOMotorCollection[dict[str, Any]]) -> UpdateSummary:
            result = await coll.update_many(query, {"$set": update})
            return UpdateSummary(
                matched_count=int(result.matched_count),
                modified_count=int(result.modified_count),
            )

        return await self._execute(collection, "update_many", action)

    async def health_check(self) -> HealthStatus:
        """Check service health with a full connect/close cycle."""
        start = time.perf_counter()
        try:
            async with self._connections.acquire():
                pass
        except DocumentDBError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MongoDB health check failed: {e}",
                details={"database": self._config.database_name, "error": str(e)},
            )
        latency_ms = (time.perf_counter() - start) * 1000
        return HealthStatus(
            healthy=True,
            latency_ms=latency_ms,
            message="MongoDB is healthy",
            details={"database": self._config.database_name},
        )

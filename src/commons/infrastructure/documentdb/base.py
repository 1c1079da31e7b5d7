"""Abstract base class for document store operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


@dataclass
class InsertManySummary:
    """Outcome of a bulk insert."""

    inserted_count: int
    inserted_ids: list[Any] = field(default_factory=list)


@dataclass
class DeleteSummary:
    """Outcome of a delete."""

    deleted_count: int


@dataclass
class UpdateSummary:
    """Outcome of an update."""

    matched_count: int
    modified_count: int


class DocumentStoreBase(ABC):
    """Abstract base class for document store operations.

    Every operation is self-contained: it opens its own connection, runs a
    single database call and closes the connection before returning.
    """

    @abstractmethod
    async def read_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every document in a collection.

        Args:
            collection: Collection name.

        Returns:
            All documents, in the order the database yields them.
        """

    @abstractmethod
    async def insert_many(
        self,
        collection: str,
        documents: list[dict[str, Any]],
    ) -> InsertManySummary:
        """Insert documents in one call.

        Args:
            collection: Collection name.
            documents: Non-empty list of documents.

        Returns:
            Inserted count and generated identifiers.
        """

    @abstractmethod
    async def remove_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> DeleteSummary:
        """Delete at most one document matching filters.

        Args:
            collection: Collection name.
            filters: Query filters.

        Returns:
            Deleted count, 0 when nothing matched.
        """

    @abstractmethod
    async def update_many(
        self,
        collection: str,
        update: dict[str, Any],
        filters: dict[str, Any] | None = None,
    ) -> UpdateSummary:
        """Set fields on every document matching filters.

        Args:
            collection: Collection name.
            update: Fields to set.
            filters: Query filters. When omitted, every document matches.

        Returns:
            Matched and modified counts.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """

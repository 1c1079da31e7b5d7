"""Short-lived MongoDB connections.

A connection is opened for exactly one operation and closed when that
operation ends, whether it succeeded or not.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from src.commons.infrastructure.documentdb.exceptions import DocumentDBConnectionError
from src.commons.telemetry.logger import get_logger

logger = get_logger(__name__)

SERVER_API_VERSION = "1"


@dataclass(frozen=True)
class ConnectionConfig:
    """Endpoint and logical database a store talks to."""

    url: str
    database_name: str


@dataclass
class ConnectionHandle:
    """A connected database plus the client that must be closed afterwards."""

    database: AsyncIOMotorDatabase[dict[str, Any]]
    client: AsyncIOMotorClient[dict[str, Any]]


class MongoConnectionFactory:
    """Opens and closes one MongoDB connection per call."""

    def __init__(self, config: ConnectionConfig) -> None:
        """Initialize the factory.

        Args:
            config: Endpoint URL and database name.
        """
        self._config = config

    @property
    def config(self) -> ConnectionConfig:
        """Connection settings this factory was built with."""
        return self._config

    async def connect(self) -> ConnectionHandle:
        """Open a connection and verify it with a ping.

        Motor connects lazily, so the ping forces the handshake and
        surfaces unreachable hosts or bad credentials here.

        Returns:
            Handle holding the database and its client.

        Raises:
            DocumentDBConnectionError: If the driver reports any fault.
        """
        client: AsyncIOMotorClient[dict[str, Any]] | None = None
        try:
            client = AsyncIOMotorClient(
                self._config.url,
                server_api=ServerApi(
                    SERVER_API_VERSION,
                    strict=True,
                    deprecation_errors=True,
                ),
            )
            await client.admin.command("ping")
            # Raises InvalidName for names such as "my db"
            database = client[self._config.database_name]
        except PyMongoError as e:
            logger.warning(
                "Failed to connect to MongoDB",
                extra={"database": self._config.database_name, "error": str(e)},
            )
            if client is not None:
                client.close()
            raise DocumentDBConnectionError(e) from e

        logger.info(
            "Connected to MongoDB",
            extra={"database": self._config.database_name},
        )
        return ConnectionHandle(database=database, client=client)

    def release(self, handle: ConnectionHandle | None) -> None:
        """Close the client behind a handle."""
        if handle is None:
            return
        logger.info("Closing MongoDB connection")
        handle.client.close()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[ConnectionHandle]:
        """Connect, yield the handle, and always release it on exit."""
        handle = await self.connect()
        try:
            yield handle
        finally:
            self.release(handle)

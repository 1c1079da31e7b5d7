"""Document database abstractions and implementations."""

from src.commons.infrastructure.documentdb.base import (
    DeleteSummary,
    DocumentStoreBase,
    HealthStatus,
    InsertManySummary,
    UpdateSummary,
)
from src.commons.infrastructure.documentdb.connection import (
    ConnectionConfig,
    ConnectionHandle,
    MongoConnectionFactory,
)
from src.commons.infrastructure.documentdb.exceptions import (
    DocumentDBConnectionError,
    DocumentDBError,
    DocumentDBOperationError,
)
from src.commons.infrastructure.documentdb.mongodb_provider import MongoDocumentStore

__all__ = [
    # Base classes
    "DocumentStoreBase",
    "HealthStatus",
    # Results
    "InsertManySummary",
    "DeleteSummary",
    "UpdateSummary",
    # Connections
    "ConnectionConfig",
    "ConnectionHandle",
    "MongoConnectionFactory",
    # Errors
    "DocumentDBError",
    "DocumentDBConnectionError",
    "DocumentDBOperationError",
    # Implementations
    "MongoDocumentStore",
]

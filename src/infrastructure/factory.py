"""Infrastructure factory for creating service instances from configuration."""

from typing import Any, cast

from src.commons.infrastructure.documentdb import (
    ConnectionConfig,
    DocumentStoreBase,
    MongoDocumentStore,
)
from src.commons.settings.models import Settings


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings.
    Instances are cached per factory; there is no process-wide factory.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}

    def get_connection_config(self) -> ConnectionConfig:
        """Build the connection config for the document database."""
        doc_settings = self._settings.document_db
        return ConnectionConfig(
            url=doc_settings.url,
            database_name=doc_settings.database,
        )

    def get_document_store(self) -> DocumentStoreBase:
        """Get document store instance.

        Returns:
            Configured document store.
        """
        if "document_store" not in self._instances:
            self._instances["document_store"] = MongoDocumentStore(
                self.get_connection_config()
            )
        return cast("DocumentStoreBase", self._instances["document_store"])

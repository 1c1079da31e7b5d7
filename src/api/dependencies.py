"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.application.services.templates import ProjectTemplateService
from src.commons.infrastructure.documentdb import DocumentStoreBase
from src.commons.settings.loader import load_settings
from src.commons.settings.models import Settings
from src.infrastructure.factory import InfrastructureFactory


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory for the current settings."""
    return InfrastructureFactory(settings)


def get_document_store(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
) -> DocumentStoreBase:
    """Get the document store."""
    return factory.get_document_store()


def get_template_service(
    store: Annotated[DocumentStoreBase, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProjectTemplateService:
    """Get project template service with its dependencies.

    Args:
        store: Document store.
        settings: Application settings.

    Returns:
        Configured template service.
    """
    return ProjectTemplateService(
        document_store=store,
        doc_settings=settings.document_db,
    )


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
DocumentStoreDep = Annotated[DocumentStoreBase, Depends(get_document_store)]
TemplateServiceDep = Annotated[ProjectTemplateService, Depends(get_template_service)]

"""Application layer - use cases sitting between the API and infrastructure."""

from src.application.services import ProjectTemplateService

__all__ = [
    "ProjectTemplateService",
]

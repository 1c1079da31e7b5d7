"""Application services."""

from src.application.services.templates import ProjectTemplateService

__all__ = [
    "ProjectTemplateService",
]

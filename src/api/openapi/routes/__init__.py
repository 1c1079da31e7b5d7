"""API route handlers."""

from src.api.openapi.routes import health, project

__all__ = [
    "health",
    "project",
]

"""Infrastructure layer - wiring of external services."""

from src.infrastructure.factory import InfrastructureFactory

__all__ = [
    "InfrastructureFactory",
]

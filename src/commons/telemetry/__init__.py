"""Telemetry module - logging and timing."""

from src.commons.telemetry.decorators import timed
from src.commons.telemetry.logger import (
    JsonFormatter,
    TextFormatter,
    build_formatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)

__all__ = [
    # Decorators
    "timed",
    # Logger
    "get_logger",
    "configure_logging",
    "build_formatter",
    "JsonFormatter",
    "TextFormatter",
    # Correlation ID
    "get_correlation_id",
    "set_correlation_id",
]

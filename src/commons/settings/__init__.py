"""Settings management module."""

from src.commons.settings.loader import SettingsLoader, load_settings
from src.commons.settings.models import (
    AppSettings,
    DocumentCollectionSettings,
    DocumentDBSettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "load_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Storage
    "DocumentDBSettings",
    "DocumentCollectionSettings",
    # Telemetry
    "TelemetrySettings",
]

"""Public API for shared regstore configuration utilities."""

from .loader import load_config, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    LoggingSettings,
    RegstoreSettings,
    StorageSettings,
    component_settings_mapping,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "LoggingSettings",
    "RegstoreSettings",
    "StorageSettings",
    "component_settings_mapping",
    "load_config",
    "load_settings",
]

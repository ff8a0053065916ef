"""Public API for shared Pastebin configuration utilities."""

from .loader import CONFIG_FILE_ENV, load_settings, resolve_config_path
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    HttpSettings,
    LoggingSettings,
    PastebinSettings,
    resolve_component_settings,
)

__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "HttpSettings",
    "LoggingSettings",
    "PastebinSettings",
    "load_settings",
    "resolve_component_settings",
    "resolve_config_path",
]

"""Configuration models and loaders."""

from .config import (
    DEFAULT_MARKER,
    CatalogSettings,
    Config,
    ExtractionConfig,
    MonitoringConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "DEFAULT_MARKER",
    "CatalogSettings",
    "Config",
    "ExtractionConfig",
    "MonitoringConfig",
    "find_config_file",
    "load_config",
]

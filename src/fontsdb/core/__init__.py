"""Core components of the font registry."""

from .config import FontsDbConfig, load_config_from_yaml
from .exceptions import (
    ConfigurationError,
    FontError,
    FontsDbError,
    ProviderError,
    StorageError,
)

__all__ = [
    "ConfigurationError",
    "FontError",
    "FontsDbConfig",
    "FontsDbError",
    "ProviderError",
    "StorageError",
    "load_config_from_yaml",
]

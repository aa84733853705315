"""Config module exports."""

from typelens.config.loader import load_config
from typelens.config.models import (
    CacheConfig,
    InspectionConfig,
    LimitsConfig,
    LoggingConfig,
    ServerConfig,
    TypeLensConfig,
)
from typelens.config.runtime import RuntimeOptions, RuntimeOptionsStore

__all__ = [
    "load_config",
    "TypeLensConfig",
    "CacheConfig",
    "InspectionConfig",
    "LimitsConfig",
    "LoggingConfig",
    "ServerConfig",
    "RuntimeOptions",
    "RuntimeOptionsStore",
]

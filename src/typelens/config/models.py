"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TYPELENS__SECTION__KEY)
3. Repo YAML (.typelens/config.yaml)
4. Global YAML (~/.config/typelens/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TYPELENS__<SECTION>__<KEY>=<VALUE>

Examples:
    TYPELENS__LOGGING__LEVEL=DEBUG
    TYPELENS__SERVER__TRANSPORT=http
    TYPELENS__LIMITS__DEFAULT_PAGE_SIZE=25
    TYPELENS__CACHE__TTL_SECONDS=60
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from typelens.config.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TYPELENS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit and attribute failure.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """Server configuration.

    Env vars:
        TYPELENS__SERVER__TRANSPORT: stdio (default) or http
        TYPELENS__SERVER__HOST: Bind address for http transport
        TYPELENS__SERVER__PORT: Port for http transport
    """

    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport. stdio keeps stdout reserved for protocol frames.",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for http transport.",
    )
    port: int = Field(
        default=7655,
        description="Port for http transport.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (0 <= v <= 65535):
            raise ValueError(f"Port must be 0-65535, got {v}")
        return v


class LimitsConfig(BaseModel):
    """Paging defaults.

    Env vars:
        TYPELENS__LIMITS__DEFAULT_PAGE_SIZE: Items per page when max_items is omitted
    """

    default_page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Items per page when a call omits max_items.",
    )
    page_size_overrides: dict[str, int] = Field(
        default_factory=dict,
        description="Per-operation page size defaults keyed by operation kind "
        "(e.g. 'member.methods': 20). Must not exceed the hard page cap.",
    )

    @field_validator("page_size_overrides")
    @classmethod
    def validate_overrides(cls, v: dict[str, int]) -> dict[str, int]:
        for kind, size in v.items():
            if not (1 <= size <= MAX_PAGE_SIZE):
                raise ValueError(f"Page size for '{kind}' must be 1-{MAX_PAGE_SIZE}, got {size}")
        return v


class CacheConfig(BaseModel):
    """Response cache configuration.

    Env vars:
        TYPELENS__CACHE__TTL_SECONDS: Lifetime of a cached response
    """

    ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        description="Lifetime of a cached response. Values below 1 are raised to 1.",
    )


class InspectionConfig(BaseModel):
    """Module inspection defaults.

    Env vars:
        TYPELENS__INSPECTION__INCLUDE_NON_PUBLIC_BY_DEFAULT: Include non-public members
    """

    include_non_public_by_default: bool = Field(
        default=False,
        description="Include non-public members when a call does not say otherwise.",
    )
    search_roots: list[str] = Field(
        default_factory=list,
        description="Directories searched when a module path is relative and not found.",
    )


class TypeLensConfig(BaseModel):
    """Root configuration for typelens.

    All settings can be configured via:
    1. Environment variables: TYPELENS__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    inspection: InspectionConfig = Field(default_factory=InspectionConfig)

"""Core module exports."""

from typelens.core.errors import ConfigError, ErrorKind, TypeLensError
from typelens.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)
from typelens.core.results import Found, Invalid, NotFound

__all__ = [
    # Errors
    "ConfigError",
    "ErrorKind",
    "TypeLensError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Results
    "Found",
    "Invalid",
    "NotFound",
]

"""typelens error types with typed error kinds.

Every failure an operation can report maps to one ErrorKind. Operations
raise TypeLensError internally; the operation boundary converts it to a
single error envelope (see typelens.mcp.envelope). None of these errors
are retryable with identical arguments.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Machine-readable error codes carried in the envelope ``code`` field."""

    MODULE_NOT_FOUND = "ModuleNotFound"
    TYPE_NOT_FOUND = "TypeNotFound"
    MEMBER_NOT_FOUND = "MemberNotFound"
    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_CONTINUATION_TOKEN = "InvalidContinuationToken"
    RESPONSE_TOO_LARGE = "ResponseTooLarge"
    INTERNAL_ERROR = "InternalError"


@dataclass(eq=False)
class TypeLensError(Exception):
    """Base error with structured context for error envelopes.

    Not frozen: raising through a generator-based context manager assigns
    ``__traceback__`` on the exception.
    """

    code: ErrorKind
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error fields of an envelope."""
        result: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @classmethod
    def module_not_found(cls, path: str) -> "TypeLensError":
        return cls(
            code=ErrorKind.MODULE_NOT_FOUND,
            message=f"Module not found: {path}",
            details={"module_path": path},
        )

    @classmethod
    def type_not_found(cls, type_name: str, module_path: str) -> "TypeLensError":
        return cls(
            code=ErrorKind.TYPE_NOT_FOUND,
            message=f"Type '{type_name}' not found in {module_path}",
            details={"type_name": type_name, "module_path": module_path},
        )

    @classmethod
    def member_not_found(cls, member_name: str, type_name: str) -> "TypeLensError":
        return cls(
            code=ErrorKind.MEMBER_NOT_FOUND,
            message=f"Member '{member_name}' not found on type '{type_name}'",
            details={"member_name": member_name, "type_name": type_name},
        )

    @classmethod
    def invalid_argument(cls, argument: str, reason: str, **details: Any) -> "TypeLensError":
        return cls(
            code=ErrorKind.INVALID_ARGUMENT,
            message=f"Invalid value for '{argument}': {reason}",
            details={"argument": argument, "reason": reason, **details},
        )

    @classmethod
    def invalid_token(cls, reason: str) -> "TypeLensError":
        return cls(
            code=ErrorKind.INVALID_CONTINUATION_TOKEN,
            message=f"Invalid continuation token: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def response_too_large(cls, actual: int, maximum: int) -> "TypeLensError":
        return cls(
            code=ErrorKind.RESPONSE_TOO_LARGE,
            message=(
                f"Response size {actual:,} chars exceeds the maximum of {maximum:,}. "
                "Use pagination (max_items) or narrower filters."
            ),
            details={"actual": actual, "maximum": maximum},
        )

    @classmethod
    def internal(cls, reason: str, **details: Any) -> "TypeLensError":
        return cls(
            code=ErrorKind.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )


class ConfigError(TypeLensError):
    """Configuration-related errors raised while loading config files."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorKind.INVALID_ARGUMENT,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorKind.INVALID_ARGUMENT,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

"""Error catalog for introspection.

Documents each ErrorKind an operation can return so agents can look up
what went wrong and how to change their arguments. No error is retryable
with identical arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from typelens.core.errors import ErrorKind


@dataclass
class ErrorDocumentation:
    """Documentation for an error code."""

    code: ErrorKind
    category: str  # lookup, validation, paging, size, system
    description: str
    causes: list[str]
    remediation: list[str]
    retryable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category,
            "description": self.description,
            "causes": self.causes,
            "remediation": self.remediation,
            "retryable": self.retryable,
        }


ERROR_CATALOG: dict[str, ErrorDocumentation] = {
    ErrorKind.MODULE_NOT_FOUND.value: ErrorDocumentation(
        code=ErrorKind.MODULE_NOT_FOUND,
        category="lookup",
        description="The module path does not resolve to a readable module.",
        causes=[
            "Path is misspelled or relative to a different working directory",
            "Module is not under any configured search root",
        ],
        remediation=[
            "Pass an absolute module path",
            "Add the containing directory with update_runtime_options add_search_roots",
        ],
    ),
    ErrorKind.TYPE_NOT_FOUND.value: ErrorDocumentation(
        code=ErrorKind.TYPE_NOT_FOUND,
        category="lookup",
        description="No type in the module matches the requested name.",
        causes=[
            "Name is missing its namespace and is ambiguous or misspelled",
            "Case differs and case_sensitive is true",
            "Type lives in a different module",
        ],
        remediation=[
            "List types with list_types and copy the full_name",
            "Use either Outer.Inner or Outer+Inner for nested types",
            "Retry with case_sensitive=false",
        ],
    ),
    ErrorKind.MEMBER_NOT_FOUND.value: ErrorDocumentation(
        code=ErrorKind.MEMBER_NOT_FOUND,
        category="lookup",
        description="The type has no member with the requested name under the given filters.",
        causes=[
            "Member is non-public and include_non_public is false",
            "Member is inherited and declared_only is true",
        ],
        remediation=[
            "List members with list_all_members to see available names",
            "Set include_non_public or include_inherited",
        ],
    ),
    ErrorKind.INVALID_ARGUMENT.value: ErrorDocumentation(
        code=ErrorKind.INVALID_ARGUMENT,
        category="validation",
        description="A parameter value is out of range or not supported by the operation.",
        causes=[
            "max_items outside 1..1000 or negative skip",
            "sort_by key not supported for this listing",
            "Empty module path or type name",
        ],
        remediation=["Check details.argument and details.reason and fix that parameter"],
    ),
    ErrorKind.INVALID_CONTINUATION_TOKEN.value: ErrorDocumentation(
        code=ErrorKind.INVALID_CONTINUATION_TOKEN,
        category="paging",
        description="The continuation token is malformed or was issued for a different query.",
        causes=[
            "Filter, sort, type or page-size parameters changed between pages",
            "Token was truncated or edited",
            "Module changed on disk since the token was issued",
        ],
        remediation=[
            "Repeat the exact parameters of the call that returned the token",
            "Start again from the first page without a token",
        ],
    ),
    ErrorKind.RESPONSE_TOO_LARGE.value: ErrorDocumentation(
        code=ErrorKind.RESPONSE_TOO_LARGE,
        category="size",
        description="The rendered response exceeds the hard size ceiling.",
        causes=[
            "A single item is larger than the ceiling on its own",
            "Type descriptor with very many nested types or attributes",
        ],
        remediation=[
            "Use a listing operation with a smaller max_items",
            "Narrow the result with name_contains or has_attribute_contains",
        ],
    ),
    ErrorKind.INTERNAL_ERROR.value: ErrorDocumentation(
        code=ErrorKind.INTERNAL_ERROR,
        category="system",
        description="An unexpected failure occurred while handling the call.",
        causes=["Unreadable or corrupt module metadata", "Bug in typelens"],
        remediation=["Check the server log for the request_id in the error details"],
    ),
}


def get_error_documentation(code: str) -> ErrorDocumentation | None:
    """Get documentation for an error code."""
    return ERROR_CATALOG.get(code)

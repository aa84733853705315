"""Operations. Each returns exactly one envelope dict."""

from typelens.mcp.operations.members import (
    MEMBER_ALL,
    MEMBER_DOCS,
    MEMBER_KINDS,
    MEMBER_LOOKUP,
    get_member_docs,
    list_all_members,
    list_members,
    lookup_member,
)
from typelens.mcp.operations.runtime import (
    ERROR_CATALOG_KIND,
    RUNTIME_OPTIONS,
    describe_errors,
    get_runtime_options,
    update_runtime_options,
)
from typelens.mcp.operations.types import (
    TYPE_ATTRIBUTES,
    TYPE_DOCS,
    TYPE_GENERIC,
    TYPE_HIERARCHY,
    TYPE_INFO,
    TYPE_LIST,
    TYPE_NESTED,
    get_generic_info,
    get_nested_types,
    get_type_attributes,
    get_type_docs,
    get_type_hierarchy,
    get_type_info,
    list_types,
)

__all__ = [
    "ERROR_CATALOG_KIND",
    "MEMBER_ALL",
    "MEMBER_DOCS",
    "MEMBER_KINDS",
    "MEMBER_LOOKUP",
    "RUNTIME_OPTIONS",
    "TYPE_ATTRIBUTES",
    "TYPE_DOCS",
    "TYPE_GENERIC",
    "TYPE_HIERARCHY",
    "TYPE_INFO",
    "TYPE_LIST",
    "TYPE_NESTED",
    "describe_errors",
    "get_generic_info",
    "get_member_docs",
    "get_nested_types",
    "get_runtime_options",
    "get_type_attributes",
    "get_type_docs",
    "get_type_hierarchy",
    "get_type_info",
    "list_all_members",
    "list_members",
    "list_types",
    "lookup_member",
    "update_runtime_options",
]

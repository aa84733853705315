"""Type MCP tools - list_types and the per-type description handlers."""

import asyncio
from typing import TYPE_CHECKING, Any

from typelens.mcp.operations import types as ops
from typelens.mcp.tools.base import (
    CaseSensitive,
    ContinuationTokenParam,
    HasAttributeContains,
    IncludeNonPublic,
    IncludePublic,
    MaxItems,
    ModulePath,
    NameContains,
    NoCache,
    Skip,
    SortBy,
    SortOrderParam,
    TypeName,
    filter_options,
)

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from typelens.mcp.context import AppContext


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register type tools with FastMCP server."""

    @mcp.tool
    async def list_types(
        module_path: ModulePath,
        include_public: IncludePublic = None,
        include_non_public: IncludeNonPublic = None,
        case_sensitive: CaseSensitive = True,
        name_contains: NameContains = None,
        has_attribute_contains: HasAttributeContains = None,
        sort_by: SortBy = None,
        sort_order: SortOrderParam = None,
        skip: Skip = None,
        max_items: MaxItems = None,
        continuation_token: ContinuationTokenParam = None,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """List the types of a module, one page at a time.

        Public types only unless include_non_public is set. Pass next_token
        back as continuation_token with otherwise identical arguments to get
        the following page.
        """
        options = filter_options(
            include_public=include_public,
            include_non_public=include_non_public,
            case_sensitive=case_sensitive,
            name_contains=name_contains,
            has_attribute_contains=has_attribute_contains,
            sort_by=sort_by,
            sort_order=sort_order,
            skip=skip,
            max_items=max_items,
            continuation_token=continuation_token,
        )
        return await asyncio.to_thread(
            ops.list_types, app_ctx, module_path, options, no_cache=no_cache
        )

    @mcp.tool
    async def get_type_info(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Full descriptor of one type.

        Covers kind, modifiers, base type, interfaces, generic parameters,
        attributes and nested types.
        """
        return await asyncio.to_thread(
            ops.get_type_info,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_type_hierarchy(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Inheritance chain, implemented interfaces and derived types within the module."""
        return await asyncio.to_thread(
            ops.get_type_hierarchy,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_generic_info(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Generic parameters of a type with their variance and constraints."""
        return await asyncio.to_thread(
            ops.get_generic_info,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_type_attributes(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Attributes declared on a type."""
        return await asyncio.to_thread(
            ops.get_type_attributes,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_nested_types(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Types nested inside a type, recursively."""
        return await asyncio.to_thread(
            ops.get_nested_types,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_type_docs(
        module_path: ModulePath,
        type_name: TypeName,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Documentation comment of a type. docs is null when the type has none."""
        return await asyncio.to_thread(
            ops.get_type_docs,
            app_ctx,
            module_path,
            type_name,
            case_sensitive=case_sensitive,
            no_cache=no_cache,
        )

"""Member MCP tools - per-kind listings, list_all_members, lookup_member, get_member_docs."""

import asyncio
from typing import TYPE_CHECKING, Any

from typelens.mcp.operations import members as ops
from typelens.mcp.tools.base import (
    CaseSensitive,
    ContinuationTokenParam,
    DeclaredOnly,
    HasAttributeContains,
    IncludeInherited,
    IncludeInstance,
    IncludeNonPublic,
    IncludePublic,
    IncludeStatic,
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
from typelens.provider.models import MemberKind

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from typelens.mcp.context import AppContext

# tool name -> (member kind, description)
_KIND_TOOLS: dict[str, tuple[MemberKind, str]] = {
    "list_methods": (
        MemberKind.METHOD,
        "Methods of a type with full signatures. Property and event accessors are excluded.",
    ),
    "list_properties": (
        MemberKind.PROPERTY,
        "Properties and indexers of a type with accessor accessibility.",
    ),
    "list_fields": (MemberKind.FIELD, "Fields of a type, including constants and their values."),
    "list_events": (MemberKind.EVENT, "Events of a type with their handler types."),
    "list_constructors": (MemberKind.CONSTRUCTOR, "Constructors and static initializers."),
}


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register member tools with FastMCP server."""

    def register_kind(tool_name: str, member_kind: MemberKind, description: str) -> None:
        async def handler(
            module_path: ModulePath,
            type_name: TypeName,
            include_public: IncludePublic = None,
            include_non_public: IncludeNonPublic = None,
            include_static: IncludeStatic = None,
            include_instance: IncludeInstance = None,
            include_inherited: IncludeInherited = None,
            declared_only: DeclaredOnly = None,
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
            options = filter_options(
                include_public=include_public,
                include_non_public=include_non_public,
                include_static=include_static,
                include_instance=include_instance,
                include_inherited=include_inherited,
                declared_only=declared_only,
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
                ops.list_members,
                app_ctx,
                member_kind,
                module_path,
                type_name,
                options,
                no_cache=no_cache,
            )

        handler.__name__ = tool_name
        mcp.tool(handler, name=tool_name, description=description)

    for tool_name, (member_kind, description) in _KIND_TOOLS.items():
        register_kind(tool_name, member_kind, description)

    @mcp.tool
    async def list_all_members(
        module_path: ModulePath,
        type_name: TypeName,
        include_public: IncludePublic = None,
        include_non_public: IncludeNonPublic = None,
        include_static: IncludeStatic = None,
        include_instance: IncludeInstance = None,
        include_inherited: IncludeInherited = None,
        declared_only: DeclaredOnly = None,
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
        """All members of a type in one ordered listing, with per-kind counts."""
        options = filter_options(
            include_public=include_public,
            include_non_public=include_non_public,
            include_static=include_static,
            include_instance=include_instance,
            include_inherited=include_inherited,
            declared_only=declared_only,
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
            ops.list_all_members, app_ctx, module_path, type_name, options, no_cache=no_cache
        )

    @mcp.tool
    async def lookup_member(
        module_path: ModulePath,
        type_name: TypeName,
        member_name: str,
        include_non_public: IncludeNonPublic = None,
        include_inherited: IncludeInherited = None,
        declared_only: DeclaredOnly = None,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Every member with the given name: all overloads, all kinds."""
        options = filter_options(
            include_non_public=include_non_public,
            include_inherited=include_inherited,
            declared_only=declared_only,
            case_sensitive=case_sensitive,
        )
        return await asyncio.to_thread(
            ops.lookup_member,
            app_ctx,
            module_path,
            type_name,
            member_name,
            options,
            no_cache=no_cache,
        )

    @mcp.tool
    async def get_member_docs(
        module_path: ModulePath,
        type_name: TypeName,
        member_name: str,
        include_non_public: IncludeNonPublic = None,
        include_inherited: IncludeInherited = None,
        declared_only: DeclaredOnly = None,
        case_sensitive: CaseSensitive = True,
        no_cache: NoCache = False,
    ) -> dict[str, Any]:
        """Documentation of every member with the given name, one entry per overload."""
        options = filter_options(
            include_non_public=include_non_public,
            include_inherited=include_inherited,
            declared_only=declared_only,
            case_sensitive=case_sensitive,
        )
        return await asyncio.to_thread(
            ops.get_member_docs,
            app_ctx,
            module_path,
            type_name,
            member_name,
            options,
            no_cache=no_cache,
        )

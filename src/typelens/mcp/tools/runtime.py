"""Runtime MCP tools - runtime options and the error catalog."""

import asyncio
from typing import TYPE_CHECKING, Any

from pydantic import Field

from typelens.config.constants import MAX_PAGE_SIZE
from typelens.mcp.operations import runtime as ops

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from typelens.mcp.context import AppContext


def register_tools(mcp: "FastMCP", app_ctx: "AppContext") -> None:
    """Register runtime tools with FastMCP server."""

    @mcp.tool
    async def get_runtime_options() -> dict[str, Any]:
        """Current page sizes, cache TTL, non-public default and search roots."""
        return await asyncio.to_thread(ops.get_runtime_options, app_ctx)

    @mcp.tool
    async def update_runtime_options(
        default_page_size: int | None = Field(
            None, ge=1, le=MAX_PAGE_SIZE, description="Default page size for listings"
        ),
        page_size_overrides: dict[str, int] | None = Field(
            None, description="Per operation kind page sizes, e.g. {'member.methods': 100}; 0 drops"
        ),
        cache_ttl_seconds: int | None = Field(
            None, description="Response cache TTL in seconds (values below 1 act as 1)"
        ),
        include_non_public_by_default: bool | None = Field(
            None, description="Include non-public entries when a call does not say"
        ),
        add_search_roots: list[str] | None = Field(
            None, description="Existing directories to search for relative module paths"
        ),
        remove_search_roots: list[str] | None = Field(None, description="Search roots to drop"),
    ) -> dict[str, Any]:
        """Change runtime options. Omitted settings stay as they are.

        Changes apply to calls made after this one returns.
        """
        return await asyncio.to_thread(
            ops.update_runtime_options,
            app_ctx,
            default_page_size=default_page_size,
            page_size_overrides=page_size_overrides,
            cache_ttl_seconds=cache_ttl_seconds,
            include_non_public_by_default=include_non_public_by_default,
            add_search_roots=add_search_roots,
            remove_search_roots=remove_search_roots,
        )

    @mcp.tool
    async def describe_error(
        code: str | None = Field(None, description="Error code, e.g. TypeNotFound; omit for all"),
    ) -> dict[str, Any]:
        """Causes and remediation for error codes returned by the other tools."""
        return await asyncio.to_thread(ops.describe_errors, app_ctx, code)

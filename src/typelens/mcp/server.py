"""FastMCP server creation and wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from typelens.config.models import TypeLensConfig
    from typelens.mcp.context import AppContext

log = structlog.get_logger(__name__)

INSTRUCTIONS = """\
typelens answers questions about the types and members of compiled modules
without executing them. Start with list_types, then get_type_info or the
member listings (list_methods, list_properties, ...). Large listings are
paged: pass next_token back as continuation_token with otherwise identical
arguments. Every response is an envelope with kind and version; errors have
kind "error" and a code you can look up with describe_error.
"""


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext shared by every tool

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from typelens.mcp.middleware import ToolMiddleware
    from typelens.mcp.tools import members, runtime, types

    mcp = FastMCP("typelens", instructions=INSTRUCTIONS, middleware=[ToolMiddleware()])

    for module in (types, members, runtime):
        module.register_tools(mcp, context)

    log.info("mcp_server_created", provider=type(context.provider).__name__)
    return mcp


def run_server(config: TypeLensConfig, context: AppContext | None = None) -> None:
    """Run the MCP server with the configured transport until interrupted."""
    from typelens.mcp.context import AppContext

    context = context or AppContext.create(config=config)
    mcp = create_mcp_server(context)

    server = config.server
    log.info("server_starting", transport=server.transport, host=server.host, port=server.port)
    if server.transport == "http":
        mcp.run(transport="http", host=server.host, port=server.port)
    else:
        mcp.run(transport="stdio", show_banner=False)

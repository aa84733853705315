"""MCP server module - operations, FastMCP tool registration and wiring."""

from typelens.mcp.context import AppContext
from typelens.mcp.server import create_mcp_server, run_server

__all__ = ["AppContext", "create_mcp_server", "run_server"]

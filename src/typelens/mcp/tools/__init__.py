"""MCP tool handlers."""

from typelens.mcp.tools import members, runtime, types

__all__ = ["members", "runtime", "types"]

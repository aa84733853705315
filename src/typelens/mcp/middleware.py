"""MCP middleware for tool call handling.

Provides:
- Two-phase logging (tool_start with params, tool_completed with timing)
- Last-resort conversion of anything escaping a tool into an error envelope

Operations already return envelopes for every expected failure, so the
except branches here only fire for argument binding errors raised by
FastMCP itself and for bugs.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from pydantic import ValidationError

from typelens.core.errors import TypeLensError
from typelens.mcp.envelope import failure

if TYPE_CHECKING:
    from fastmcp.server.middleware import CallNext
    from mcp import types as mt

log = structlog.get_logger(__name__)

_MAX_LOGGED_VALUE = 80


def _extract_log_params(arguments: dict[str, Any]) -> dict[str, Any]:
    """Key params for tool_start; long values truncated."""
    params: dict[str, Any] = {}
    for key, value in arguments.items():
        if value is None:
            continue
        if isinstance(value, str) and len(value) > _MAX_LOGGED_VALUE:
            params[key] = value[:_MAX_LOGGED_VALUE] + "..."
        elif isinstance(value, (list, dict)) and len(value) > 3:
            params[key] = f"[{len(value)} items]"
        else:
            params[key] = value
    return params


class ToolMiddleware(Middleware):
    """Logs every tool call and guarantees an envelope comes back."""

    async def on_call_tool(  # type: ignore[override]
        self,
        context: MiddlewareContext[mt.CallToolRequest],
        call_next: CallNext[mt.CallToolRequest, Any],
    ) -> Any:
        params = context.message
        tool_name = getattr(params, "name", "unknown")
        arguments = getattr(params, "arguments", {}) or {}

        start_time = time.perf_counter()
        log.info("tool_start", tool=tool_name, **_extract_log_params(arguments))

        try:
            result = await call_next(context)
            log.info(
                "tool_completed",
                tool=tool_name,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            )
            return result

        except ValidationError as e:
            errors = e.errors()
            error_details = [
                {
                    "field": ".".join(str(p) for p in err.get("loc", ())),
                    "message": err.get("msg", ""),
                }
                for err in errors[:5]
            ]
            log.warning(
                "tool_validation_error",
                tool=tool_name,
                errors=error_details,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            )
            first = error_details[0] if error_details else {"field": "arguments", "message": str(e)}
            error = TypeLensError.invalid_argument(
                first["field"] or "arguments", first["message"], errors=error_details
            )
            return ToolResult(structured_content=failure(error))

        except Exception as e:
            log.error(
                "tool_internal_error",
                tool=tool_name,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            )
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            error = TypeLensError.internal(
                f"Error calling tool '{tool_name}': {e}", error_type=type(e).__name__
            )
            return ToolResult(structured_content=failure(error))

"""Runtime options and error catalog operations. Neither is cached."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from typelens.core.errors import TypeLensError
from typelens.mcp.errors import ERROR_CATALOG, get_error_documentation
from typelens.mcp.operations.base import Plan, run_operation

if TYPE_CHECKING:
    from typelens.config.runtime import RuntimeOptions
    from typelens.mcp.context import AppContext

log = structlog.get_logger(__name__)

RUNTIME_OPTIONS = "runtime.options"
ERROR_CATALOG_KIND = "error.catalog"


def get_runtime_options(ctx: AppContext) -> dict[str, Any]:
    def prepare() -> Plan:
        return Plan(produce=lambda: {"options": ctx.options.current.to_dict()})

    return run_operation(ctx, RUNTIME_OPTIONS, prepare)


def _checked_roots(argument: str, roots: list[str]) -> list[str]:
    resolved = []
    for root in roots:
        path = Path(root).expanduser()
        if not path.is_dir():
            raise TypeLensError.invalid_argument(argument, f"not a directory: {root}")
        resolved.append(str(path.resolve()))
    return resolved


def update_runtime_options(
    ctx: AppContext,
    *,
    default_page_size: int | None = None,
    page_size_overrides: dict[str, int] | None = None,
    cache_ttl_seconds: int | None = None,
    include_non_public_by_default: bool | None = None,
    add_search_roots: list[str] | None = None,
    remove_search_roots: list[str] | None = None,
) -> dict[str, Any]:
    """Apply the given changes atomically; ``None`` leaves a setting unchanged.

    ``page_size_overrides`` is merged into the existing overrides; an entry
    whose value is 0 removes the override for that kind. The response cache
    is not cleared: cached entries expire by their own TTL, and any change
    that alters results already changes the cache key.
    """

    def compute(current: RuntimeOptions, added: list[str], removed: set[str]) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        if default_page_size is not None:
            changes["default_page_size"] = default_page_size
        if cache_ttl_seconds is not None:
            changes["cache_ttl_seconds"] = cache_ttl_seconds
        if include_non_public_by_default is not None:
            changes["include_non_public_by_default"] = include_non_public_by_default
        if page_size_overrides:
            overrides = dict(current.page_size_overrides)
            for kind, size in page_size_overrides.items():
                if size == 0:
                    overrides.pop(kind, None)
                else:
                    overrides[kind] = size
            changes["page_size_overrides"] = overrides
        if added or removed:
            roots = list(current.search_roots)
            for root in added:
                if root not in roots:
                    roots.append(root)
            changes["search_roots"] = tuple(r for r in roots if r not in removed)
        return changes

    def prepare() -> Plan:
        added = _checked_roots("add_search_roots", add_search_roots or [])
        removed = {str(Path(r).expanduser().resolve()) for r in remove_search_roots or []}
        updated, changes = ctx.options.update_with(lambda cur: compute(cur, added, removed))
        if changes:
            log.info("runtime_options_updated", changed=sorted(changes))
        return Plan(produce=lambda: {"options": updated.to_dict(), "changed": sorted(changes)})

    return run_operation(ctx, RUNTIME_OPTIONS, prepare)


def describe_errors(ctx: AppContext, code: str | None = None) -> dict[str, Any]:
    """Document one error kind, or all of them when *code* is omitted."""

    def prepare() -> Plan:
        if code is None or not code.strip():
            entries = [doc.to_dict() for doc in ERROR_CATALOG.values()]
            return Plan(produce=lambda: {"count": len(entries), "errors": entries})
        doc = get_error_documentation(code.strip())
        if doc is None:
            raise TypeLensError.invalid_argument(
                "code", f"unknown error code '{code}'", available=sorted(ERROR_CATALOG)
            )
        return Plan(produce=lambda: {"count": 1, "errors": [doc.to_dict()]})

    return run_operation(ctx, ERROR_CATALOG_KIND, prepare)

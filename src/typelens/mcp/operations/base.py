"""Operation boundary.

Every operation goes through run_operation, which guarantees exactly one
envelope per call: a success envelope within the size ceiling, or an
error envelope. Nothing raised below this point reaches the transport.

An operation supplies a ``prepare`` callable that validates arguments,
resolves the module and computes keys, and returns a Plan whose
``produce`` callable does the actual introspection. ``produce`` only runs
on a cache miss.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from typelens.config.constants import CONTRACT_VERSION
from typelens.core.errors import TypeLensError
from typelens.core.logging import clear_request_id, set_request_id
from typelens.core.results import Found, Invalid
from typelens.inspect.options import FilterOptions
from typelens.mcp.budget import enforce_ceiling, pagination_advice
from typelens.mcp.cache_keys import build_key
from typelens.mcp.envelope import failure, render, success
from typelens.mcp.pagination import Page, make_salt, resolve_offset
from typelens.provider.base import ModuleHandle, ModuleStamp, open_module

if TYPE_CHECKING:
    from typelens.mcp.context import AppContext
    from typelens.provider.models import RawType

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Plan:
    """What to compute, and where to cache it (None means uncached)."""

    produce: Callable[[], dict[str, Any]]
    cache_key: str | None = None


@dataclass(frozen=True, slots=True)
class QueryKeys:
    """Keys derived from one call's parameters."""

    query_key: str
    salt: str
    offset: int
    cache_key: str


# =============================================================================
# Boundary
# =============================================================================


def run_operation(
    ctx: AppContext,
    kind: str,
    prepare: Callable[[], Plan],
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Run an operation and return its envelope."""
    request_id = set_request_id()
    start = time.perf_counter()
    log.info("operation_start", kind=kind, no_cache=no_cache)
    try:
        plan = prepare()

        def producer() -> str:
            return enforce_ceiling(render(success(kind, plan.produce())))

        if plan.cache_key is None:
            text = producer()
        else:
            text = ctx.executor.execute(plan.cache_key, producer, no_cache=no_cache)
        log.info(
            "operation_completed",
            kind=kind,
            chars=len(text),
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return json.loads(text)  # type: ignore[no-any-return]

    except ValidationError as e:
        err = e.errors()[0]
        argument = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        error = TypeLensError.invalid_argument(
            argument,
            err.get("msg", str(e)),
            errors=[
                {"field": ".".join(str(p) for p in x.get("loc", ())), "message": x.get("msg", "")}
                for x in e.errors()[:5]
            ],
        )
        log.warning("operation_failed", kind=kind, code=error.code.value, error=error.message)
        return failure(error)

    except TypeLensError as e:
        log.warning("operation_failed", kind=kind, code=e.code.value, error=e.message)
        return failure(e)

    except Exception as e:
        log.error("operation_internal_error", kind=kind, error=str(e), error_type=type(e).__name__)
        log.debug("operation_internal_error_traceback", kind=kind, exc_info=True)
        error = TypeLensError.internal(f"{type(e).__name__}: {e}", request_id=request_id)
        return failure(error)

    finally:
        clear_request_id()


# =============================================================================
# Shared preparation helpers
# =============================================================================


def coerce_options(options: FilterOptions | dict[str, Any] | None) -> FilterOptions:
    """Accept a FilterOptions, a plain mapping of its fields, or None.

    Raises:
        pydantic.ValidationError: On unknown fields or out-of-range values.
    """
    if options is None:
        return FilterOptions()
    if isinstance(options, FilterOptions):
        return options
    return FilterOptions.model_validate(options)


def require_text(argument: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise TypeLensError.invalid_argument(argument, "must not be empty")
    return value.strip()


def resolve_module(ctx: AppContext, module_path: str | None) -> ModuleStamp:
    """Locate a module by path, falling back to search roots for relative paths.

    Raises:
        TypeLensError: InvalidArgument for an empty path, ModuleNotFound otherwise.
    """
    path = require_text("module_path", module_path)
    stamp = ctx.provider.stat(path)
    if stamp is not None:
        return stamp
    if not Path(path).is_absolute():
        for root in ctx.options.current.search_roots:
            stamp = ctx.provider.stat(str(Path(root) / path))
            if stamp is not None:
                return stamp
    raise TypeLensError.module_not_found(path)


def query_keys(
    kind: str, stamp: ModuleStamp, parts: list[Any], offset_source: FilterOptions
) -> QueryKeys:
    """Build query key, salt, offset and response cache key.

    *parts* must cover every parameter that affects the result except the
    paging position (skip / continuation token).
    """
    base = [stamp.path, stamp.fingerprint, *parts]
    query_key = build_key(kind, CONTRACT_VERSION, *base)
    salt = make_salt(query_key)
    offset = resolve_offset(
        skip=offset_source.skip,
        continuation_token=offset_source.continuation_token,
        salt=salt,
    )
    cache_key = build_key(kind, CONTRACT_VERSION, *base, "offset", offset)
    return QueryKeys(query_key=query_key, salt=salt, offset=offset, cache_key=cache_key)


def options_parts(options: FilterOptions, *, non_public: bool, take: int) -> list[Any]:
    """Key parts for a FilterOptions with runtime defaults already resolved."""
    return [
        options.include_public,
        non_public,
        options.include_static,
        options.include_instance,
        options.include_inherited,
        options.declared_only,
        options.case_sensitive,
        options.name_contains,
        options.has_attribute_contains,
        options.sort_by,
        options.sort_order,
        take,
    ]


@contextmanager
def module_session(ctx: AppContext, stamp: ModuleStamp) -> Iterator[ModuleHandle]:
    """Open the resolved module for one block and close it on exit.

    Raises:
        TypeLensError: ModuleNotFound if the module vanished after resolution.
    """
    with open_module(ctx.provider, stamp.path) as handle:
        if handle is None:
            raise TypeLensError.module_not_found(stamp.path)
        yield handle


def require_type(
    ctx: AppContext, handle: ModuleHandle, type_name: str, case_sensitive: bool
) -> RawType:
    found = ctx.normalizer.find(handle, type_name, case_sensitive=case_sensitive)
    if isinstance(found, Invalid):
        raise TypeLensError.invalid_argument("type_name", found.reason)
    if not isinstance(found, Found):
        raise TypeLensError.type_not_found(type_name, handle.path)
    return found.value


def page_data(page: Page) -> dict[str, Any]:
    """Paging fields common to every listing response."""
    return {
        "total": page.total,
        "count": page.count,
        "offset": page.offset,
        "next_token": page.next_token,
        "reduced": page.reduced,
        "items": page.items,
        "pagination": pagination_advice(
            total=page.total,
            count=page.count,
            current_page_chars=page.used_chars,
            has_more=page.next_token is not None,
        ),
    }

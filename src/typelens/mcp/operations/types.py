"""Type-level operations: listing, info, hierarchy, generics, attributes, nesting, docs."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from typelens.config.constants import CONTRACT_VERSION
from typelens.inspect.descriptors import TypeDescriptor
from typelens.inspect.options import TYPE_SORT_KEYS, FilterOptions
from typelens.inspect.pipeline import filter_items, sort_items
from typelens.mcp.cache_keys import build_key
from typelens.mcp.operations.base import (
    Plan,
    coerce_options,
    module_session,
    options_parts,
    page_data,
    query_keys,
    require_text,
    require_type,
    resolve_module,
    run_operation,
)
from typelens.mcp.pagination import build_page
from typelens.provider.base import ModuleHandle
from typelens.provider.models import RawType

if TYPE_CHECKING:
    from typelens.mcp.context import AppContext

TYPE_LIST = "type.list"
TYPE_INFO = "type.info"
TYPE_HIERARCHY = "type.hierarchy"
TYPE_GENERIC = "type.generic"
TYPE_ATTRIBUTES = "type.attributes"
TYPE_NESTED = "type.nested"
TYPE_DOCS = "type.docs"

# (handle, raw type, descriptor, every type in the module) -> data
TypeDataBuilder = Callable[[ModuleHandle, RawType, TypeDescriptor, list[RawType]], dict[str, Any]]


def _list_item(td: TypeDescriptor) -> dict[str, Any]:
    return td.to_dict(include_nested=False)


def list_types(
    ctx: AppContext,
    module_path: str,
    options: FilterOptions | dict[str, Any] | None = None,
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """List the types of a module. Public types only unless non-public is included."""

    def prepare() -> Plan:
        opts = coerce_options(options)
        stamp = resolve_module(ctx, module_path)
        runtime = ctx.options.current
        flags = opts.include_flags(runtime.include_non_public_by_default)
        take = opts.max_items or runtime.page_size_for(TYPE_LIST)
        parts = options_parts(opts, non_public=flags.non_public, take=take)
        keys = query_keys(TYPE_LIST, stamp, parts, opts)

        def produce() -> dict[str, Any]:
            with module_session(ctx, stamp) as handle:
                descriptors = [
                    ctx.normalizer.describe_type(handle, raw)
                    for raw in ctx.provider.enumerate_types(handle)
                    if (flags.public if raw.accessibility.is_public else flags.non_public)
                ]
                module_name = handle.name
            items = filter_items(
                descriptors,
                name_contains=opts.name_contains,
                has_attribute_contains=opts.has_attribute_contains,
                case_sensitive=opts.case_sensitive,
            )
            items = sort_items(
                items, sort_by=opts.sort_by, sort_order=opts.sort_order, supported=TYPE_SORT_KEYS
            )
            page = build_page(
                items, offset=keys.offset, take=take, salt=keys.salt, render=_list_item
            )
            return {"module": module_name, "module_path": stamp.path, **page_data(page)}

        return Plan(produce=produce, cache_key=keys.cache_key)

    return run_operation(ctx, TYPE_LIST, prepare, no_cache=no_cache)


def _single_type_operation(
    ctx: AppContext,
    kind: str,
    module_path: str,
    type_name: str,
    case_sensitive: bool,
    no_cache: bool,
    build: TypeDataBuilder,
) -> dict[str, Any]:
    """Shared shape of the unpaged per-type operations.

    *build* receives (handle, raw_type, descriptor, all_types) with the
    module open and returns the data dict.
    """

    def prepare() -> Plan:
        name = require_text("type_name", type_name)
        stamp = resolve_module(ctx, module_path)
        cache_key = build_key(
            kind, CONTRACT_VERSION, stamp.path, stamp.fingerprint, name, case_sensitive
        )

        def produce() -> dict[str, Any]:
            with module_session(ctx, stamp) as handle:
                raw = require_type(ctx, handle, name, case_sensitive)
                descriptor = ctx.normalizer.describe_type(handle, raw)
                all_types = list(ctx.provider.enumerate_types(handle))
                return build(handle, raw, descriptor, all_types)

        return Plan(produce=produce, cache_key=cache_key)

    return run_operation(ctx, kind, prepare, no_cache=no_cache)


def get_type_info(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        return {"module_path": handle.path, "type": td.to_dict()}

    return _single_type_operation(
        ctx, TYPE_INFO, module_path, type_name, case_sensitive, no_cache, build
    )


def get_type_hierarchy(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Base chain (walked while bases are in the module), interfaces and in-module derived types."""

    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        by_name = {t.full_name: t for t in all_types}
        chain: list[dict[str, Any]] = []
        bases: list[dict[str, Any]] = []
        seen = {raw.full_name}
        current = raw
        while current.base_type is not None:
            base_name = current.base_type.full_name
            base = by_name.get(base_name)
            chain.append({"full_name": base_name, "in_module": base is not None})
            if base is None or base.full_name in seen:
                break
            seen.add(base.full_name)
            bases.append(ctx.normalizer.describe_type(handle, base).to_dict(include_nested=False))
            current = base

        derived = sorted(
            t.full_name
            for t in all_types
            if t.base_type is not None and t.base_type.full_name == raw.full_name
        )
        return {
            "module_path": handle.path,
            "type_name": td.full_name,
            "base_type": td.base_type,
            "inheritance_chain": chain,
            "base_types": bases,
            "interfaces": list(td.interfaces),
            "derived_types": derived,
        }

    return _single_type_operation(
        ctx, TYPE_HIERARCHY, module_path, type_name, case_sensitive, no_cache, build
    )


def get_generic_info(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        return {
            "module_path": handle.path,
            "type_name": td.full_name,
            "is_generic": td.is_generic,
            "is_generic_definition": raw.is_generic_definition,
            "arity": len(td.generic_parameters),
            "generic_parameters": [g.to_dict() for g in td.generic_parameters],
        }

    return _single_type_operation(
        ctx, TYPE_GENERIC, module_path, type_name, case_sensitive, no_cache, build
    )


def get_type_attributes(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        return {
            "module_path": handle.path,
            "type_name": td.full_name,
            "count": len(td.attributes),
            "attributes": [a.to_dict() for a in td.attributes],
        }

    return _single_type_operation(
        ctx, TYPE_ATTRIBUTES, module_path, type_name, case_sensitive, no_cache, build
    )


def get_nested_types(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        return {
            "module_path": handle.path,
            "type_name": td.full_name,
            "count": len(td.nested_types),
            "nested_types": [n.to_dict() for n in td.nested_types],
        }

    return _single_type_operation(
        ctx, TYPE_NESTED, module_path, type_name, case_sensitive, no_cache, build
    )


def get_type_docs(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    *,
    case_sensitive: bool = True,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Documentation comment of a type. ``docs`` is null when the type has none."""

    def build(
        handle: ModuleHandle, raw: RawType, td: TypeDescriptor, all_types: list[RawType]
    ) -> dict[str, Any]:
        return {
            "module_path": handle.path,
            "type_name": td.full_name,
            "has_docs": td.docs is not None,
            "docs": td.docs.to_dict() if td.docs is not None else None,
        }

    return _single_type_operation(
        ctx, TYPE_DOCS, module_path, type_name, case_sensitive, no_cache, build
    )

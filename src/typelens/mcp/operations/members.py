"""Member-level operations: per-kind listings, combined listing, lookup and docs by name."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from typelens.core.errors import TypeLensError
from typelens.inspect.descriptors import AnyMember
from typelens.inspect.options import MEMBER_SORT_KEYS, FilterOptions
from typelens.inspect.pipeline import filter_items, sort_items
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
from typelens.provider.models import MemberKind

if TYPE_CHECKING:
    from typelens.mcp.context import AppContext

MEMBER_ALL = "member.all"
MEMBER_LOOKUP = "member.lookup"
MEMBER_DOCS = "member.docs"

MEMBER_KINDS: dict[MemberKind, str] = {
    MemberKind.METHOD: "member.methods",
    MemberKind.PROPERTY: "member.properties",
    MemberKind.FIELD: "member.fields",
    MemberKind.EVENT: "member.events",
    MemberKind.CONSTRUCTOR: "member.constructors",
}


def _render(member: AnyMember) -> dict[str, Any]:
    return member.to_dict()


def _list(
    ctx: AppContext,
    kind: str,
    member_kinds: tuple[MemberKind, ...],
    module_path: str,
    type_name: str,
    options: FilterOptions | dict[str, Any] | None,
    no_cache: bool,
) -> dict[str, Any]:
    def prepare() -> Plan:
        opts = coerce_options(options)
        name = require_text("type_name", type_name)
        stamp = resolve_module(ctx, module_path)
        runtime = ctx.options.current
        flags = opts.include_flags(runtime.include_non_public_by_default)
        take = opts.max_items or runtime.page_size_for(kind)
        parts = [name, *options_parts(opts, non_public=flags.non_public, take=take)]
        keys = query_keys(kind, stamp, parts, opts)

        def produce() -> dict[str, Any]:
            with module_session(ctx, stamp) as handle:
                raw = require_type(ctx, handle, name, opts.case_sensitive)
                members = ctx.normalizer.describe_members(handle, raw, flags, member_kinds)
                module_name = handle.name
            items = filter_items(
                members,
                name_contains=opts.name_contains,
                has_attribute_contains=opts.has_attribute_contains,
                case_sensitive=opts.case_sensitive,
            )
            items = sort_items(
                items, sort_by=opts.sort_by, sort_order=opts.sort_order, supported=MEMBER_SORT_KEYS
            )
            page = build_page(items, offset=keys.offset, take=take, salt=keys.salt, render=_render)
            data: dict[str, Any] = {
                "module": module_name,
                "module_path": stamp.path,
                "type_name": raw.full_name,
            }
            if len(member_kinds) > 1:
                counts = Counter(m.kind.value for m in items)
                data["counts"] = {k.value: counts.get(k.value, 0) for k in member_kinds}
            data.update(page_data(page))
            return data

        return Plan(produce=produce, cache_key=keys.cache_key)

    return run_operation(ctx, kind, prepare, no_cache=no_cache)


def list_members(
    ctx: AppContext,
    member_kind: MemberKind | str,
    module_path: str,
    type_name: str,
    options: FilterOptions | dict[str, Any] | None = None,
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Page through the members of one kind declared on (or inherited by) a type."""
    member_kind = MemberKind(member_kind)
    kind = MEMBER_KINDS[member_kind]
    return _list(ctx, kind, (member_kind,), module_path, type_name, options, no_cache)


def list_all_members(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    options: FilterOptions | dict[str, Any] | None = None,
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Every member kind in one ordered listing, with per-kind counts of the filtered set."""
    return _list(ctx, MEMBER_ALL, tuple(MemberKind), module_path, type_name, options, no_cache)


def _docs_item(member: AnyMember) -> dict[str, Any]:
    return {
        "kind": member.kind.value,
        "name": member.name,
        "signature": member.signature,
        "declaring_type": member.declaring_type,
        "docs": member.docs.to_dict() if member.docs is not None else None,
    }


def _by_name(
    ctx: AppContext,
    kind: str,
    module_path: str,
    type_name: str,
    member_name: str,
    options: FilterOptions | dict[str, Any] | None,
    no_cache: bool,
    render: Callable[[AnyMember], dict[str, Any]],
) -> dict[str, Any]:
    def prepare() -> Plan:
        opts = coerce_options(options)
        name = require_text("type_name", type_name)
        wanted = require_text("member_name", member_name)
        stamp = resolve_module(ctx, module_path)
        flags = opts.include_flags(ctx.options.current.include_non_public_by_default)
        parts = [name, wanted, *options_parts(opts, non_public=flags.non_public, take=0)]
        # paging fields do not apply to name queries
        keys = query_keys(kind, stamp, parts, FilterOptions())

        def produce() -> dict[str, Any]:
            with module_session(ctx, stamp) as handle:
                raw = require_type(ctx, handle, name, opts.case_sensitive)
                members = ctx.normalizer.describe_members(handle, raw, flags)
            target = wanted if opts.case_sensitive else wanted.casefold()
            matches = [
                m
                for m in members
                if (m.name if opts.case_sensitive else m.name.casefold()) == target
            ]
            if not matches:
                raise TypeLensError.member_not_found(wanted, raw.full_name)
            matches.sort(key=lambda m: (m.kind.value, m.signature, m.declaring_type))
            data: dict[str, Any] = {
                "module_path": stamp.path,
                "type_name": raw.full_name,
                "member_name": wanted,
                "count": len(matches),
            }
            if kind == MEMBER_DOCS:
                data["documented"] = sum(1 for m in matches if m.docs is not None)
            data["items"] = [render(m) for m in matches]
            return data

        return Plan(produce=produce, cache_key=keys.cache_key)

    return run_operation(ctx, kind, prepare, no_cache=no_cache)


def lookup_member(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    member_name: str,
    options: FilterOptions | dict[str, Any] | None = None,
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """All members named *member_name* (every overload, every kind).

    Include flags and case sensitivity from *options* apply; paging and
    sorting fields are ignored.
    """
    return _by_name(
        ctx, MEMBER_LOOKUP, module_path, type_name, member_name, options, no_cache, _render
    )


def get_member_docs(
    ctx: AppContext,
    module_path: str,
    type_name: str,
    member_name: str,
    options: FilterOptions | dict[str, Any] | None = None,
    *,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Documentation of every member named *member_name*, one item per overload.

    Matches the same members as :func:`lookup_member`. An undocumented
    member is still listed, with ``docs`` null.
    """
    return _by_name(
        ctx, MEMBER_DOCS, module_path, type_name, member_name, options, no_cache, _docs_item
    )

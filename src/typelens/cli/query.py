"""tlens query commands - one-shot introspection without a server.

Each command runs the same operation an MCP tool would and prints its
envelope. Use --token with a previous next_token to get the next page.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from typelens.cli.utils import build_context, emit
from typelens.mcp.operations import members as member_ops
from typelens.mcp.operations import types as type_ops
from typelens.provider.models import MemberKind

_MEMBER_KINDS = {
    "methods": MemberKind.METHOD,
    "properties": MemberKind.PROPERTY,
    "fields": MemberKind.FIELD,
    "events": MemberKind.EVENT,
    "constructors": MemberKind.CONSTRUCTOR,
}

_TYPE_VIEWS: dict[str, Callable[..., dict[str, Any]]] = {
    "info": type_ops.get_type_info,
    "hierarchy": type_ops.get_type_hierarchy,
    "generic": type_ops.get_generic_info,
    "attributes": type_ops.get_type_attributes,
    "nested": type_ops.get_nested_types,
    "docs": type_ops.get_type_docs,
}


def _common_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option(
            "--root",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            help="Directory whose .typelens/config.yaml applies (default: cwd)",
        ),
        click.option("--raw", is_flag=True, help="Compact JSON without highlighting"),
        click.option("--ignore-case", is_flag=True, help="Match names case-insensitively"),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _listing_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option(
            "--non-public/--public-only",
            "non_public",
            default=None,
            help="Include non-public entries (default: config)",
        ),
        click.option("--name-contains", help="Substring the name must contain"),
        click.option("--attribute", "has_attribute", help="Substring of an attribute type name"),
        click.option("--sort-by", help="Sort key"),
        click.option("--desc", is_flag=True, help="Sort descending"),
        click.option("--skip", type=int, help="Items to skip"),
        click.option("--max-items", "-n", type=int, help="Page size"),
        click.option("--token", help="Continuation token from a previous page"),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _filter_options(**fields: Any) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


@click.command()
@click.argument("module_path")
@_listing_options
@_common_options
def types_command(
    module_path: str,
    non_public: bool | None,
    name_contains: str | None,
    has_attribute: str | None,
    sort_by: str | None,
    desc: bool,
    skip: int | None,
    max_items: int | None,
    token: str | None,
    root: Path | None,
    raw: bool,
    ignore_case: bool,
) -> None:
    """List the types of MODULE_PATH."""
    ctx = build_context(root)
    options = _filter_options(
        include_non_public=non_public,
        case_sensitive=not ignore_case,
        name_contains=name_contains,
        has_attribute_contains=has_attribute,
        sort_by=sort_by,
        sort_order="desc" if desc else None,
        skip=skip,
        max_items=max_items,
        continuation_token=token,
    )
    emit(type_ops.list_types(ctx, module_path, options), raw=raw)


@click.command()
@click.argument("module_path")
@click.argument("type_name")
@click.option(
    "--view",
    type=click.Choice(sorted(_TYPE_VIEWS)),
    default="info",
    show_default=True,
    help="What to show about the type",
)
@_common_options
def type_command(
    module_path: str,
    type_name: str,
    view: str,
    root: Path | None,
    raw: bool,
    ignore_case: bool,
) -> None:
    """Describe TYPE_NAME in MODULE_PATH."""
    ctx = build_context(root)
    operation = _TYPE_VIEWS[view]
    emit(operation(ctx, module_path, type_name, case_sensitive=not ignore_case), raw=raw)


@click.command()
@click.argument("module_path")
@click.argument("type_name")
@click.option(
    "--kind",
    "-k",
    type=click.Choice([*_MEMBER_KINDS, "all"]),
    default="all",
    show_default=True,
    help="Member kind to list",
)
@click.option("--inherited", is_flag=True, help="Include inherited members")
@click.option("--static-only", is_flag=True, help="Only static members")
@click.option("--instance-only", is_flag=True, help="Only instance members")
@_listing_options
@_common_options
def members_command(
    module_path: str,
    type_name: str,
    kind: str,
    inherited: bool,
    static_only: bool,
    instance_only: bool,
    non_public: bool | None,
    name_contains: str | None,
    has_attribute: str | None,
    sort_by: str | None,
    desc: bool,
    skip: int | None,
    max_items: int | None,
    token: str | None,
    root: Path | None,
    raw: bool,
    ignore_case: bool,
) -> None:
    """List the members of TYPE_NAME in MODULE_PATH."""
    if static_only and instance_only:
        raise click.UsageError("--static-only and --instance-only are mutually exclusive")
    ctx = build_context(root)
    options = _filter_options(
        include_non_public=non_public,
        include_static=False if instance_only else None,
        include_instance=False if static_only else None,
        include_inherited=True if inherited else None,
        declared_only=False if inherited else None,
        case_sensitive=not ignore_case,
        name_contains=name_contains,
        has_attribute_contains=has_attribute,
        sort_by=sort_by,
        sort_order="desc" if desc else None,
        skip=skip,
        max_items=max_items,
        continuation_token=token,
    )
    if kind == "all":
        envelope = member_ops.list_all_members(ctx, module_path, type_name, options)
    else:
        envelope = member_ops.list_members(
            ctx, _MEMBER_KINDS[kind], module_path, type_name, options
        )
    emit(envelope, raw=raw)


@click.command()
@click.argument("module_path")
@click.argument("type_name")
@click.argument("member_name")
@click.option("--non-public", is_flag=True, help="Include non-public members")
@click.option("--inherited", is_flag=True, help="Include inherited members")
@click.option("--docs", is_flag=True, help="Show documentation instead of signatures")
@_common_options
def member_command(
    module_path: str,
    type_name: str,
    member_name: str,
    non_public: bool,
    inherited: bool,
    docs: bool,
    root: Path | None,
    raw: bool,
    ignore_case: bool,
) -> None:
    """Show every overload of MEMBER_NAME on TYPE_NAME, or its documentation."""
    ctx = build_context(root)
    options = _filter_options(
        include_non_public=True if non_public else None,
        include_inherited=True if inherited else None,
        declared_only=False if inherited else None,
        case_sensitive=not ignore_case,
    )
    operation = member_ops.get_member_docs if docs else member_ops.lookup_member
    emit(operation(ctx, module_path, type_name, member_name, options), raw=raw)

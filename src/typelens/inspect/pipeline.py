"""Filter and sort stages of the listing pipeline.

Include flags are applied by the provider before descriptors exist. The
stages here run on the materialized descriptor set: substring filters
first, then a stable sort. Paging happens afterwards (mcp.pagination).

Ordering never depends on provider enumeration order. Ties on the sort
key fall back to declaration order, then to signature (members) or full
name (types), then to the declaring type, so every call over the same
module sees the same sequence and offsets stay meaningful across pages.
Strings compare ordinally.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from typelens.core.errors import TypeLensError
from typelens.inspect.descriptors import MemberDescriptor, TypeDescriptor
from typelens.inspect.options import SortKey, SortOrder

Item = TypeVar("Item", MemberDescriptor, TypeDescriptor)


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.casefold() in haystack.casefold()


def filter_items(
    items: Sequence[Item],
    *,
    name_contains: str | None = None,
    has_attribute_contains: str | None = None,
    case_sensitive: bool = True,
) -> list[Item]:
    result = list(items)
    if name_contains:
        result = [i for i in result if _contains(i.name_key, name_contains, case_sensitive)]
    if has_attribute_contains:
        result = [
            i
            for i in result
            if any(
                _contains(a.type_name, has_attribute_contains, case_sensitive)
                for a in i.attributes
            )
        ]
    return result


def _sort_value(item: MemberDescriptor | TypeDescriptor, key: SortKey) -> str | int:
    if key is SortKey.NAME:
        return item.name_key
    if key is SortKey.KIND:
        return item.kind.value
    if key is SortKey.ACCESSIBILITY:
        return item.accessibility.value
    if key is SortKey.DECLARATION:
        return item.order
    if isinstance(item, TypeDescriptor):
        if key is SortKey.FULL_NAME:
            return item.full_name
        if key is SortKey.NAMESPACE:
            return item.namespace
    elif key is SortKey.SIGNATURE:
        return item.signature
    raise ValueError(f"no sort value for {key}")


def _tie_key(item: MemberDescriptor | TypeDescriptor) -> tuple[int, str, str]:
    if isinstance(item, TypeDescriptor):
        return (item.order, item.full_name, "")
    return (item.order, item.signature, item.declaring_type)


def sort_items(
    items: Sequence[Item],
    *,
    sort_by: SortKey,
    sort_order: SortOrder,
    supported: frozenset[SortKey],
) -> list[Item]:
    """Stable sort by *sort_by*.

    Raises:
        TypeLensError: InvalidArgument when *sort_by* is not supported here.
    """
    if sort_by not in supported:
        raise TypeLensError.invalid_argument(
            "sort_by",
            f"'{sort_by.value}' is not supported for this operation",
            supported=sorted(k.value for k in supported),
        )
    ordered = sorted(items, key=_tie_key)
    # Python's sort is stable under reverse=True, so ties keep ascending tie order.
    ordered.sort(key=lambda i: _sort_value(i, sort_by), reverse=sort_order is SortOrder.DESC)
    return ordered

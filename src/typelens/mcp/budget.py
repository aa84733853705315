"""Response-size governance.

Every response is measured in characters of its compact JSON rendering.
Two limits apply:

  - WARNING_THRESHOLD_CHARS is the target for a page. The page builder
    stops accepting items once the next one would push the page past it,
    so a page shrinks instead of growing oversized.
  - MAX_RESPONSE_CHARS is the absolute ceiling for a rendered envelope.
    Anything above it fails closed with ResponseTooLarge; an over-ceiling
    or mid-item truncated response is never emitted.
"""

from __future__ import annotations

import json
from typing import Any

from typelens.config.constants import (
    MAX_RESPONSE_CHARS,
    MIN_RECOMMENDED_PAGE_SIZE,
    WARNING_THRESHOLD_CHARS,
)
from typelens.core.errors import TypeLensError


def measure_chars(item: Any) -> int:
    """Return the character length of *item* serialised as compact JSON."""
    return len(json.dumps(item, separators=(",", ":"), ensure_ascii=False, default=str))


class AdaptivePageBuilder:
    """Size-aware page accumulator.

    Usage::

        builder = AdaptivePageBuilder()
        for item in candidates:
            if not builder.try_add(item):
                break  # page is full
        page = builder.items
        truncated = builder.reduced

    The first item is always accepted, so a page is never empty while
    candidates remain; an item too large even on its own is caught by the
    ceiling check on the final envelope.
    """

    __slots__ = ("_target", "_items", "_used", "_reduced")

    def __init__(self, target: int = WARNING_THRESHOLD_CHARS) -> None:
        self._target = target
        self._items: list[dict[str, Any]] = []
        self._used = 0
        self._reduced = False

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def try_add(self, item: dict[str, Any]) -> bool:
        """Accept *item* if it fits in the remaining target, else mark the page reduced."""
        size = measure_chars(item)
        if self._items:
            size += 1  # array separator
        if self._items and self._used + size > self._target:
            self._reduced = True
            return False
        self._items.append(item)
        self._used += size
        return True

    @property
    def items(self) -> list[dict[str, Any]]:
        return self._items

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def used_chars(self) -> int:
        return self._used

    @property
    def reduced(self) -> bool:
        """Whether at least one candidate was turned away for size."""
        return self._reduced


def enforce_ceiling(rendered: str, maximum: int = MAX_RESPONSE_CHARS) -> str:
    """Return *rendered* unchanged if within *maximum*.

    Raises:
        TypeLensError: ResponseTooLarge with actual and maximum sizes.
    """
    actual = len(rendered)
    if actual > maximum:
        raise TypeLensError.response_too_large(actual, maximum)
    return rendered


def pagination_advice(
    *,
    total: int,
    count: int,
    current_page_chars: int,
    has_more: bool,
    warning_threshold: int = WARNING_THRESHOLD_CHARS,
) -> dict[str, Any]:
    """Advisory paging metadata.

    Extrapolates the size of the unpaginated result from the current page
    and recommends a smaller page when the projection is over the warning
    threshold. The recommendation is non-binding.
    """
    estimated_total = (current_page_chars // count) * total if count > 0 else 0
    advised = estimated_total > warning_threshold
    recommended = count
    if advised and count > MIN_RECOMMENDED_PAGE_SIZE:
        recommended = max(MIN_RECOMMENDED_PAGE_SIZE, count // 2)
    return {
        "has_more": has_more,
        "current_page_chars": current_page_chars,
        "estimated_total_chars": estimated_total,
        "pagination_advised": advised,
        "recommended_page_size": recommended,
    }

"""Process-wide runtime options.

Static configuration (models.py) seeds a RuntimeOptions snapshot at
startup; the runtime.options operation can replace it while the server
runs. Snapshots are immutable. Readers take ``store.current`` once per call
and never see a half-applied update; writers build a new snapshot under a
lock and swap the reference. Nothing is persisted across restarts.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from typelens.config.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_CACHE_TTL_SECONDS,
)

if TYPE_CHECKING:
    from typelens.config.models import TypeLensConfig


class RuntimeOptions(BaseModel):
    """Immutable snapshot of the defaults every operation resolves against."""

    model_config = ConfigDict(frozen=True)

    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    page_size_overrides: dict[str, int] = Field(default_factory=dict)
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    include_non_public_by_default: bool = False
    search_roots: tuple[str, ...] = ()

    @field_validator("page_size_overrides")
    @classmethod
    def validate_overrides(cls, v: dict[str, int]) -> dict[str, int]:
        for kind, size in v.items():
            if not (1 <= size <= MAX_PAGE_SIZE):
                raise ValueError(f"Page size for '{kind}' must be 1-{MAX_PAGE_SIZE}, got {size}")
        return v

    @classmethod
    def from_config(cls, config: TypeLensConfig) -> RuntimeOptions:
        return cls(
            default_page_size=config.limits.default_page_size,
            page_size_overrides=dict(config.limits.page_size_overrides),
            cache_ttl_seconds=config.cache.ttl_seconds,
            include_non_public_by_default=config.inspection.include_non_public_by_default,
            search_roots=tuple(config.inspection.search_roots),
        )

    def page_size_for(self, kind: str) -> int:
        """Default max_items for an operation kind."""
        return self.page_size_overrides.get(kind, self.default_page_size)

    @property
    def effective_ttl(self) -> int:
        return max(MIN_CACHE_TTL_SECONDS, self.cache_ttl_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_page_size": self.default_page_size,
            "page_size_overrides": dict(sorted(self.page_size_overrides.items())),
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "include_non_public_by_default": self.include_non_public_by_default,
            "search_roots": list(self.search_roots),
        }


class RuntimeOptionsStore:
    """Holder for the current RuntimeOptions snapshot.

    Usage::

        store = RuntimeOptionsStore(RuntimeOptions())
        opts = store.current            # lock-free read
        store.update(cache_ttl_seconds=60)
    """

    __slots__ = ("_current", "_write_lock")

    def __init__(self, initial: RuntimeOptions | None = None) -> None:
        self._current = initial or RuntimeOptions()
        self._write_lock = threading.Lock()

    @property
    def current(self) -> RuntimeOptions:
        return self._current

    def update(self, **changes: Any) -> RuntimeOptions:
        """Validate and install a new snapshot with *changes* applied.

        Raises:
            pydantic.ValidationError: If the merged snapshot is invalid.
        """
        snapshot, _ = self.update_with(lambda _current: changes)
        return snapshot

    def update_with(
        self, compute: Callable[[RuntimeOptions], dict[str, Any]]
    ) -> tuple[RuntimeOptions, dict[str, Any]]:
        """Derive changes from the current snapshot and install them in one step.

        *compute* runs under the writer lock, so changes that merge into
        existing values (overrides, search roots) never lose a concurrent
        writer's update. Returns the installed snapshot and the changes;
        when *compute* returns no changes the current snapshot is kept.
        """
        with self._write_lock:
            changes = compute(self._current)
            if not changes:
                return self._current, changes
            merged = {**self._current.model_dump(), **changes}
            snapshot = RuntimeOptions.model_validate(merged)
            self._current = snapshot
        return snapshot, changes

    def replace(self, options: RuntimeOptions) -> None:
        with self._write_lock:
            self._current = options

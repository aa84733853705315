"""Introspection provider interface.

A provider reads structural metadata from a compiled module and never
executes module code. Everything above this seam (normalization, paging,
caching) is oblivious to which provider produced the facts.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog

from typelens.core.results import Found, NotFound
from typelens.provider.models import IncludeFlags, RawMember, RawModule, RawType

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ModuleStamp:
    """Identity of a module's current content.

    ``fingerprint`` changes whenever the module changes on disk, so cached
    responses keyed on it cannot outlive the content they describe.
    """

    path: str
    fingerprint: str


@dataclass(frozen=True, slots=True)
class ModuleHandle:
    """An opened module. Only valid between open() and close()."""

    path: str
    module: RawModule

    @property
    def name(self) -> str:
        return self.module.name


@runtime_checkable
class IntrospectionProvider(Protocol):
    def stat(self, path: str) -> ModuleStamp | None:
        """Existence check plus content fingerprint, without opening the module."""
        ...

    def open(self, path: str) -> Found[ModuleHandle] | NotFound: ...

    def enumerate_types(self, handle: ModuleHandle) -> Sequence[RawType]: ...

    def enumerate_members(
        self, handle: ModuleHandle, raw_type: RawType, flags: IncludeFlags
    ) -> Sequence[RawMember]: ...

    def close(self, handle: ModuleHandle) -> None: ...


@contextmanager
def open_module(provider: IntrospectionProvider, path: str) -> Iterator[ModuleHandle | None]:
    """Open *path* for the duration of a block; yields None when it cannot be opened.

    The handle is closed on exit even when the block raises.
    """
    result = provider.open(path)
    if isinstance(result, NotFound):
        yield None
        return
    handle = result.value
    try:
        yield handle
    finally:
        provider.close(handle)
        log.debug("module_closed", module_path=path)

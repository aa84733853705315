"""In-memory provider for embedding and tests.

Counts opens and closes so callers can observe whether a response came
from the cache or from fresh introspection.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from typelens.core.results import Found, NotFound
from typelens.provider.base import ModuleHandle, ModuleStamp
from typelens.provider.models import (
    IncludeFlags,
    RawMember,
    RawModule,
    RawType,
    assign_declaration_order,
)


class InMemoryProvider:
    """Serves RawModule objects registered under a path."""

    def __init__(self, modules: dict[str, RawModule] | None = None) -> None:
        self._modules: dict[str, RawModule] = {}
        self._revisions: dict[str, int] = {}
        self._lock = threading.Lock()
        self.open_count = 0
        self.close_count = 0
        for path, module in (modules or {}).items():
            self.replace(path, module)

    def replace(self, path: str, module: RawModule) -> None:
        """Register or swap the module at *path*, changing its fingerprint."""
        with self._lock:
            self._modules[path] = assign_declaration_order(module)
            self._revisions[path] = self._revisions.get(path, 0) + 1

    def remove(self, path: str) -> None:
        with self._lock:
            self._modules.pop(path, None)

    @property
    def open_handles(self) -> int:
        return self.open_count - self.close_count

    def stat(self, path: str) -> ModuleStamp | None:
        if path not in self._modules:
            return None
        return ModuleStamp(path=path, fingerprint=f"rev-{self._revisions[path]}")

    def open(self, path: str) -> Found[ModuleHandle] | NotFound:
        with self._lock:
            module = self._modules.get(path)
            if module is None:
                return NotFound(path)
            self.open_count += 1
        return Found(ModuleHandle(path=path, module=module))

    def enumerate_types(self, handle: ModuleHandle) -> Sequence[RawType]:
        return handle.module.iter_types()

    def enumerate_members(
        self, handle: ModuleHandle, raw_type: RawType, flags: IncludeFlags
    ) -> Sequence[RawMember]:
        return [m for m in raw_type.members if flags.admits(m, raw_type.full_name)]

    def close(self, handle: ModuleHandle) -> None:  # noqa: ARG002
        with self._lock:
            self.close_count += 1

"""Provider backed by module metadata manifests.

A manifest is a JSON or YAML document describing one module in the raw
fact schema of typelens.provider.models. External metadata readers export
modules into this format; typelens never loads the binary itself.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from typelens.core.results import Found, NotFound
from typelens.provider.base import ModuleHandle, ModuleStamp
from typelens.provider.models import (
    IncludeFlags,
    RawMember,
    RawModule,
    RawType,
    assign_declaration_order,
)

log = structlog.get_logger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class ManifestError(ValueError):
    """A manifest exists but cannot be read as a module description."""


def load_manifest(path: Path) -> RawModule:
    """Parse and validate a manifest file.

    Raises:
        ManifestError: On syntax or schema errors.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ManifestError(f"Failed to parse manifest {path}: {e}") from e
    try:
        module = RawModule.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e.errors()[0]['msg']}") from e
    return assign_declaration_order(module)


class ManifestProvider:
    """Reads modules from manifest files on disk.

    Manifests are parsed on every open(). The response cache sits above the
    provider, so repeated identical queries do not reach here.
    """

    def stat(self, path: str) -> ModuleStamp | None:
        p = Path(path)
        if not p.is_file():
            return None
        st = p.stat()
        return ModuleStamp(path=str(p.resolve()), fingerprint=f"{st.st_size}-{st.st_mtime_ns}")

    def open(self, path: str) -> Found[ModuleHandle] | NotFound:
        p = Path(path)
        if not p.is_file():
            return NotFound(path)
        module = load_manifest(p)
        log.debug("manifest_loaded", module_path=path, types=len(module.types))
        return Found(ModuleHandle(path=str(p.resolve()), module=module))

    def enumerate_types(self, handle: ModuleHandle) -> Sequence[RawType]:
        return handle.module.iter_types()

    def enumerate_members(
        self, handle: ModuleHandle, raw_type: RawType, flags: IncludeFlags
    ) -> Sequence[RawMember]:
        return [m for m in raw_type.members if flags.admits(m, raw_type.full_name)]

    def close(self, handle: ModuleHandle) -> None:  # noqa: ARG002
        return None

"""Response envelopes.

Success::

    {"kind": "<operation kind>", "version": "1.0", "data": {...}}

Failure::

    {"kind": "error", "version": "1.0", "code": "<ErrorKind>", "message": "...", "details": {...}}

``kind`` and ``version`` always come first, so a consumer can switch on
them before looking at the rest.
"""

from __future__ import annotations

import json
from typing import Any

from typelens.config.constants import CONTRACT_VERSION
from typelens.core.errors import TypeLensError

ERROR_KIND = "error"


def success(kind: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"kind": kind, "version": CONTRACT_VERSION, "data": data}


def failure(error: TypeLensError) -> dict[str, Any]:
    return {"kind": ERROR_KIND, "version": CONTRACT_VERSION, **error.to_dict()}


def render(envelope: dict[str, Any]) -> str:
    """Compact, deterministic JSON text of an envelope."""
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False, default=str)


def is_error(envelope: dict[str, Any]) -> bool:
    return envelope.get("kind") == ERROR_KIND

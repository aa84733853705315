"""Deterministic cache keys.

Key layout::

    <kind>|<version>|<part>|<part>...:<sha256 of the full text>

The readable prefix is truncated to CACHE_KEY_PREFIX_MAX characters so keys
stay bounded; the hash always covers the untruncated text, so truncation
never makes two different queries share a key.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from enum import Enum
from typing import Any

from typelens.config.constants import CACHE_KEY_PREFIX_MAX


def _escape(text: str) -> str:
    return text.replace("%", "%25").replace("|", "%7C").replace(",", "%2C")


def normalize_part(value: Any) -> str:
    """Locale-independent text form of one key part.

    Separator characters inside values are percent-escaped so distinct
    part lists never join to the same text.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _escape(str(value.value))
    if isinstance(value, Sequence) and not isinstance(value, str):
        return ",".join(normalize_part(v) for v in value)
    return _escape(str(value))


def build_key(kind: str, version: str, *parts: Any) -> str:
    base = "|".join([kind, version, *(normalize_part(p) for p in parts)])
    digest = hashlib.sha256(base.encode("utf-8")).hexdigest()
    return f"{base[:CACHE_KEY_PREFIX_MAX]}:{digest}"

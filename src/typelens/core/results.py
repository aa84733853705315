"""Explicit lookup outcomes.

Lookups that can legitimately miss (type lookup, module open, token decode)
return one of these instead of raising. Callers match on the variant and
decide which miss is an error for their operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    query: str = ""


@dataclass(frozen=True, slots=True)
class Invalid:
    reason: str


Lookup = Found[T] | NotFound | Invalid

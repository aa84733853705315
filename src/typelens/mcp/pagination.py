"""Query-bound continuation tokens and page construction.

A token carries an offset plus a salt: the first SALT_LENGTH hex chars of
sha256(query key), where the query key covers every parameter of the
query except its paging position. A token is only honoured by a call whose
own query key produces the same salt, so a token minted for one query can
never be replayed against another, even one whose total happens to make
the offset look plausible. Rejected tokens are an error, never offset 0.

Wire form: urlsafe base64 of ``"{offset}:{salt}"``.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from typelens.config.constants import SALT_LENGTH, WARNING_THRESHOLD_CHARS
from typelens.core.errors import TypeLensError
from typelens.core.results import Invalid
from typelens.mcp.budget import AdaptivePageBuilder

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ContinuationToken:
    offset: int
    salt: str

    def encode(self) -> str:
        """Encode token as urlsafe base64 for transport."""
        raw = f"{self.offset}:{self.salt}".encode("ascii")
        return base64.urlsafe_b64encode(raw).decode("ascii")


def make_salt(query_key: str) -> str:
    return hashlib.sha256(query_key.encode("utf-8")).hexdigest()[:SALT_LENGTH]


def decode_token(text: str) -> ContinuationToken | Invalid:
    """Decode a token string; any malformed shape yields Invalid."""
    try:
        raw = base64.b64decode(text.encode("ascii"), altchars=b"-_", validate=True)
        decoded = raw.decode("ascii")
    except ValueError as e:
        return Invalid(f"not a token: {e}")

    parts = decoded.split(":")
    if len(parts) != 2:
        return Invalid("wrong field count")
    offset_text, salt = parts
    if not (offset_text.isascii() and offset_text.isdigit()):
        return Invalid("offset is not a non-negative integer")
    if not salt:
        return Invalid("missing salt")
    return ContinuationToken(offset=int(offset_text), salt=salt)


def resolve_offset(*, skip: int | None, continuation_token: str | None, salt: str) -> int:
    """Starting offset for a page.

    A token takes precedence over skip. An empty token string counts as no
    token.

    Raises:
        TypeLensError: InvalidContinuationToken for malformed or foreign tokens.
    """
    if continuation_token:
        decoded = decode_token(continuation_token)
        if isinstance(decoded, Invalid):
            raise TypeLensError.invalid_token(decoded.reason)
        if decoded.salt != salt:
            raise TypeLensError.invalid_token(
                "token was issued for a different query; "
                "repeat the original parameters or start again without a token"
            )
        return decoded.offset
    return skip or 0


# =============================================================================
# Pages
# =============================================================================


@dataclass(slots=True)
class Page:
    """One size-bounded slice of a sorted, filtered result."""

    items: list[dict[str, Any]]
    total: int
    offset: int
    next_token: str | None = None
    reduced: bool = False
    used_chars: int = 0

    @property
    def count(self) -> int:
        return len(self.items)


def build_page(
    items: Sequence[T],
    *,
    offset: int,
    take: int,
    salt: str,
    render: Callable[[T], dict[str, Any]],
    target: int = WARNING_THRESHOLD_CHARS,
) -> Page:
    """Slice ``items[offset:offset + take]`` and trim it to the size target.

    Items are accepted in order until the first one that does not fit, so
    the page is always a contiguous run and the next token resumes exactly
    after it.
    """
    builder = AdaptivePageBuilder(target)
    for item in items[offset : offset + take]:
        if not builder.try_add(render(item)):
            break
    total = len(items)
    end = offset + builder.count
    next_token = ContinuationToken(end, salt).encode() if end < total else None
    return Page(
        items=builder.items,
        total=total,
        offset=offset,
        next_token=next_token,
        reduced=builder.reduced,
        used_chars=builder.used_chars,
    )

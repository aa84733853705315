"""Tests for mcp/cache_keys.py module."""

from __future__ import annotations

import hashlib

from typelens.config.constants import CACHE_KEY_PREFIX_MAX
from typelens.inspect.options import SortKey
from typelens.mcp.cache_keys import build_key, normalize_part


class TestNormalizePart:
    """Locale-independent key parts."""

    def test_scalars(self) -> None:
        assert normalize_part(None) == ""
        assert normalize_part(True) == "true"
        assert normalize_part(False) == "false"
        assert normalize_part(42) == "42"

    def test_enum_uses_value(self) -> None:
        assert normalize_part(SortKey.SIGNATURE) == "signature"

    def test_sequences_join(self) -> None:
        assert normalize_part(["a", "b"]) == "a,b"

    def test_separators_escaped(self) -> None:
        assert normalize_part("a|b,c%") == "a%7Cb%2Cc%25"


class TestBuildKey:
    """Key layout and collision resistance."""

    def test_layout(self) -> None:
        key = build_key("member.methods", "1.0", "/m.json", "Widget", True)
        base = "member.methods|1.0|/m.json|Widget|true"

        assert key == f"{base}:{hashlib.sha256(base.encode()).hexdigest()}"

    def test_deterministic(self) -> None:
        assert build_key("k", "1.0", "a", 1) == build_key("k", "1.0", "a", 1)

    def test_distinct_part_lists_do_not_collide(self) -> None:
        assert build_key("k", "1.0", "a|b") != build_key("k", "1.0", "a", "b")
        assert build_key("k", "1.0", ["a", "b"]) != build_key("k", "1.0", "a,b")

    def test_none_differs_from_false(self) -> None:
        assert build_key("k", "1.0", None) != build_key("k", "1.0", False)

    def test_long_prefix_truncated_but_hash_covers_all(self) -> None:
        first = build_key("k", "1.0", "x" * 500 + "a")
        second = build_key("k", "1.0", "x" * 500 + "b")
        prefix, _, digest = first.rpartition(":")

        assert len(prefix) == CACHE_KEY_PREFIX_MAX
        assert len(digest) == 64
        assert first != second

"""Tests for inspect/naming.py module."""

from __future__ import annotations

import pytest

from typelens.inspect.naming import render_full_name, render_type_name, strip_arity
from typelens.provider.models import RawTypeRef


def ref(text: str) -> RawTypeRef:
    return RawTypeRef.model_validate(text)


class TestStripArity:
    def test_strips_suffix(self) -> None:
        assert strip_arity("List`1") == "List"

    def test_leaves_plain_names(self) -> None:
        assert strip_arity("Widget") == "Widget"


class TestRenderTypeName:
    """Tests for source-style type names."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("System.Int32", "int"),
            ("System.String", "string"),
            ("System.Void", "void"),
            ("System.Single", "float"),
            ("Acme.Widgets.Widget", "Widget"),
            ("Acme.Widgets.Widget+Part", "Part"),
            ("System.String[]", "string[]"),
            ("System.Int32[,,]", "int[,,]"),
            ("System.Int32&", "int&"),
            ("System.Byte*", "byte*"),
            ("!T", "T"),
            ("System.Collections.Generic.List`1<System.String>", "List<string>"),
            (
                "System.Collections.Generic.Dictionary`2<System.String, "
                "System.Collections.Generic.List`1<!T>>",
                "Dictionary<string, List<T>>",
            ),
            ("Acme.Widgets.Box`1", "Box"),
        ],
    )
    def test_render(self, text: str, expected: str) -> None:
        assert render_type_name(ref(text)) == expected

    def test_missing_reference_is_void(self) -> None:
        assert render_type_name(None) == "void"


class TestRenderFullName:
    def test_none(self) -> None:
        assert render_full_name(None) is None

    def test_keeps_qualified_names(self) -> None:
        assert render_full_name(ref("System.Int32[]")) == "System.Int32[]"

    def test_constructed_generic(self) -> None:
        text = "System.Collections.Generic.List`1<System.String>"

        assert render_full_name(ref(text)) == text

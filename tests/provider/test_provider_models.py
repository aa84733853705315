"""Tests for provider/models.py module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from typelens.provider.models import (
    Accessibility,
    IncludeFlags,
    MemberKind,
    RawDocs,
    RawMember,
    RawModule,
    RawType,
    RawTypeRef,
    RefKind,
    Variance,
    assign_declaration_order,
    parse_type_ref,
)


class TestParseTypeRef:
    """Tests for the shorthand type reference syntax."""

    def test_named(self) -> None:
        assert parse_type_ref("System.Int32") == {
            "kind": RefKind.NAMED,
            "full_name": "System.Int32",
        }

    def test_array_rank_from_commas(self) -> None:
        ref = RawTypeRef.model_validate("System.Int32[,]")

        assert ref.kind is RefKind.ARRAY
        assert ref.rank == 2
        assert ref.element is not None
        assert ref.element.full_name == "System.Int32"

    def test_byref_of_array(self) -> None:
        ref = RawTypeRef.model_validate("System.String[]&")

        assert ref.is_byref
        assert ref.element is not None
        assert ref.element.kind is RefKind.ARRAY

    def test_pointer(self) -> None:
        assert RawTypeRef.model_validate("System.Byte*").kind is RefKind.POINTER

    def test_generic_parameter(self) -> None:
        ref = RawTypeRef.model_validate("!TKey")

        assert ref.kind is RefKind.GENERIC_PARAMETER
        assert ref.full_name == "TKey"

    def test_nested_generic_arguments(self) -> None:
        ref = RawTypeRef.model_validate(
            "System.Collections.Generic.Dictionary`2<System.String, "
            "System.Collections.Generic.List`1<System.Int32>>"
        )

        assert ref.full_name == "System.Collections.Generic.Dictionary`2"
        assert [a.full_name for a in ref.type_arguments] == [
            "System.String",
            "System.Collections.Generic.List`1",
        ]
        assert ref.type_arguments[1].type_arguments[0].full_name == "System.Int32"

    @pytest.mark.parametrize("text", ["", "   ", "[]", "System.Int32[x]"])
    def test_rejects_malformed(self, text: str) -> None:
        with pytest.raises((ValueError, ValidationError)):
            RawTypeRef.model_validate(text)

    def test_name_and_namespace(self) -> None:
        ref = RawTypeRef.model_validate("Acme.Widgets.Widget+Part")

        assert ref.name == "Part"
        assert ref.namespace == "Acme.Widgets"


class TestRawType:
    """Tests for type-level validation hooks."""

    def test_members_default_to_owner(self) -> None:
        raw = RawType.model_validate(
            {
                "full_name": "Acme.Gadget",
                "members": [
                    {"kind": "method", "name": "Spin"},
                    {"kind": "method", "name": "ToString", "declaring_type": "System.Object"},
                ],
            }
        )

        assert [m.declaring_type for m in raw.members] == ["Acme.Gadget", "System.Object"]

    def test_parameter_positions_numbered(self) -> None:
        member = RawMember.model_validate(
            {
                "kind": "method",
                "name": "Move",
                "declaring_type": "Acme.Gadget",
                "parameters": [
                    {"name": "x", "type": "System.Int32"},
                    {"name": "y", "type": "System.Int32"},
                ],
            }
        )

        assert [p.position for p in member.parameters] == [0, 1]

    def test_static_class_detection(self) -> None:
        static_class = RawType(full_name="Acme.Util", is_abstract=True, is_sealed=True)
        abstract_class = RawType(full_name="Acme.Base", is_abstract=True)

        assert static_class.is_static
        assert not abstract_class.is_static

    def test_generic_parameters(self) -> None:
        raw = RawType.model_validate(
            {
                "full_name": "Acme.Pair`2",
                "generic_parameters": [
                    {"name": "TLeft"},
                    {"name": "TRight", "variance": "covariant"},
                ],
            }
        )

        assert [(g.name, g.position) for g in raw.generic_parameters] == [
            ("TLeft", 0),
            ("TRight", 1),
        ]
        assert raw.generic_parameters[1].variance is Variance.COVARIANT


class TestRawDocs:
    def test_string_is_summary(self) -> None:
        member = RawMember.model_validate(
            {"kind": "method", "name": "Spin", "declaring_type": "Acme.Gadget", "docs": "Spins."}
        )

        assert member.docs == RawDocs(summary="Spins.")

    def test_params_mapping(self) -> None:
        docs = RawDocs.model_validate({"returns": "Count.", "params": {"a": "First.", "b": ""}})

        assert [(p.name, p.text) for p in docs.params] == [("a", "First."), ("b", "")]
        assert docs.returns == "Count."

    def test_params_list(self) -> None:
        docs = RawDocs.model_validate({"params": [{"name": "a", "text": "First."}]})

        assert docs.params[0].text == "First."

    def test_absent_by_default(self) -> None:
        assert RawType(full_name="Acme.Gadget").docs is None

    def test_rejects_non_text(self) -> None:
        with pytest.raises(ValidationError):
            RawDocs.model_validate({"summary": ["not", "text"]})


class TestRawModule:
    """Tests for module traversal and declaration order."""

    def test_iter_types_parent_first(self, sample_module: RawModule) -> None:
        names = [t.full_name for t in sample_module.iter_types()]

        assert names.index("Acme.Widgets.Widget") < names.index("Acme.Widgets.Widget+Part")
        assert len(names) == 7

    def test_assign_declaration_order_fills_tokens(self, sample_module: RawModule) -> None:
        ordered = assign_declaration_order(sample_module)
        widget = ordered.types[1]

        assert [t.token for t in ordered.types] == [1, 2, 3, 4, 5, 6]
        assert [m.token for m in widget.members[:3]] == [1, 2, 3]
        assert widget.nested_types[0].token == 1

    def test_assign_declaration_order_keeps_explicit_tokens(self) -> None:
        module = RawModule.model_validate(
            {"name": "M", "types": [{"full_name": "A", "token": 0x02000005}]}
        )

        assert assign_declaration_order(module).types[0].token == 0x02000005


class TestIncludeFlags:
    """Tests for the provider-side member filter."""

    def _member(self, **kwargs: object) -> RawMember:
        data: dict[str, object] = {"kind": MemberKind.METHOD, "name": "M", "declaring_type": "T"}
        data.update(kwargs)
        return RawMember.model_validate(data)

    def test_defaults_admit_public_declared(self) -> None:
        flags = IncludeFlags()

        assert flags.admits(self._member(), "T")
        assert flags.admits(self._member(is_static=True), "T")
        assert not flags.admits(self._member(accessibility=Accessibility.PRIVATE), "T")
        assert not flags.admits(self._member(declaring_type="Base"), "T")

    def test_non_public(self) -> None:
        flags = IncludeFlags(public=False, non_public=True)

        assert flags.admits(self._member(accessibility=Accessibility.INTERNAL), "T")
        assert not flags.admits(self._member(), "T")

    def test_static_and_instance(self) -> None:
        assert not IncludeFlags(static=False).admits(self._member(is_static=True), "T")
        assert not IncludeFlags(instance=False).admits(self._member(), "T")

    def test_inherited_requires_inherited_or_not_declared_only(self) -> None:
        inherited = self._member(declaring_type="Base")

        assert IncludeFlags(inherited=True).admits(inherited, "T")
        assert IncludeFlags(declared_only=False).admits(inherited, "T")
        assert not IncludeFlags(inherited=False, declared_only=True).admits(inherited, "T")

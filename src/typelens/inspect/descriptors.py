"""Normalized, renderable descriptors.

Descriptors are immutable snapshots built from raw provider facts. They
hold only strings, flags and nested descriptors, never a reference back to
the provider handle, so they stay valid after the module is closed and can
be cached, sorted and serialized freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from typelens.provider.models import Accessibility, MemberKind, TypeKind, Variance


def _opt(value: Accessibility | None) -> str | None:
    return value.value if value is not None else None


@dataclass(frozen=True, slots=True)
class AttributeDescriptor:
    type_name: str
    constructor_arguments: tuple[Any, ...] = ()
    named_arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "constructor_arguments": list(self.constructor_arguments),
            "named_arguments": dict(self.named_arguments),
        }


@dataclass(frozen=True, slots=True)
class GenericParameterDescriptor:
    name: str
    position: int
    constraints: tuple[str, ...] = ()
    reference_type_constraint: bool = False
    value_type_constraint: bool = False
    default_constructor_constraint: bool = False
    variance: Variance = Variance.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position,
            "constraints": list(self.constraints),
            "reference_type_constraint": self.reference_type_constraint,
            "value_type_constraint": self.value_type_constraint,
            "default_constructor_constraint": self.default_constructor_constraint,
            "variance": self.variance.value,
        }


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    name: str
    position: int
    type_name: str
    default_value: str | None = None
    is_optional: bool = False
    is_out: bool = False
    is_ref: bool = False
    is_in: bool = False
    is_params: bool = False
    attributes: tuple[AttributeDescriptor, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position,
            "type": self.type_name,
            "default_value": self.default_value,
            "is_optional": self.is_optional,
            "is_out": self.is_out,
            "is_ref": self.is_ref,
            "is_in": self.is_in,
            "is_params": self.is_params,
            "attributes": [a.to_dict() for a in self.attributes],
        }


@dataclass(frozen=True, slots=True)
class DocsDescriptor:
    """Documentation text, whitespace-normalized. Empty sections are None."""

    summary: str | None = None
    remarks: str | None = None
    returns: str | None = None
    params: tuple[tuple[str, str], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "remarks": self.remarks,
            "returns": self.returns,
            "params": [{"name": name, "text": text} for name, text in self.params],
        }


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    full_name: str
    name: str
    namespace: str
    kind: TypeKind
    accessibility: Accessibility
    module: str
    order: int = 0
    is_abstract: bool = False
    is_sealed: bool = False
    is_static: bool = False
    is_generic: bool = False
    is_nested: bool = False
    declaring_type: str | None = None
    base_type: str | None = None
    interfaces: tuple[str, ...] = ()
    attributes: tuple[AttributeDescriptor, ...] = ()
    generic_parameters: tuple[GenericParameterDescriptor, ...] = ()
    nested_types: tuple[TypeDescriptor, ...] = ()
    # Served by the docs operations only; listings stay compact.
    docs: DocsDescriptor | None = None

    @property
    def name_key(self) -> str:
        return self.name

    def to_dict(self, *, include_nested: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {
            "full_name": self.full_name,
            "name": self.name,
            "namespace": self.namespace,
            "kind": self.kind.value,
            "accessibility": self.accessibility.value,
            "module": self.module,
            "is_abstract": self.is_abstract,
            "is_sealed": self.is_sealed,
            "is_static": self.is_static,
            "is_generic": self.is_generic,
            "is_nested": self.is_nested,
            "declaring_type": self.declaring_type,
            "base_type": self.base_type,
            "interfaces": list(self.interfaces),
            "attributes": [a.to_dict() for a in self.attributes],
            "generic_parameters": [g.to_dict() for g in self.generic_parameters],
        }
        if include_nested:
            result["nested_types"] = [n.to_dict() for n in self.nested_types]
        return result


# =============================================================================
# Members
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class MemberDescriptor:
    """Fields shared by every member kind. Subclasses add the kind payload."""

    kind: MemberKind
    name: str
    type_name: str
    accessibility: Accessibility
    signature: str
    declaring_type: str
    order: int = 0
    is_static: bool = False
    is_virtual: bool = False
    is_abstract: bool = False
    is_sealed: bool = False
    is_override: bool = False
    attributes: tuple[AttributeDescriptor, ...] = ()
    docs: DocsDescriptor | None = None

    @property
    def name_key(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "type": self.type_name,
            "accessibility": self.accessibility.value,
            "signature": self.signature,
            "declaring_type": self.declaring_type,
            "is_static": self.is_static,
            "is_virtual": self.is_virtual,
            "is_abstract": self.is_abstract,
            "is_sealed": self.is_sealed,
            "is_override": self.is_override,
            "attributes": [a.to_dict() for a in self.attributes],
        }
        result.update(self._payload())
        return result

    def _payload(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodDescriptor(MemberDescriptor):
    parameters: tuple[ParameterDescriptor, ...] = ()
    generic_parameters: tuple[str, ...] = ()
    is_operator: bool = False
    is_extension: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "parameters": [p.to_dict() for p in self.parameters],
            "generic_parameters": list(self.generic_parameters),
            "is_operator": self.is_operator,
            "is_extension": self.is_extension,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class PropertyDescriptor(MemberDescriptor):
    can_read: bool = False
    can_write: bool = False
    is_indexer: bool = False
    indexer_parameters: tuple[ParameterDescriptor, ...] = ()
    getter_accessibility: Accessibility | None = None
    setter_accessibility: Accessibility | None = None

    def _payload(self) -> dict[str, Any]:
        return {
            "can_read": self.can_read,
            "can_write": self.can_write,
            "is_indexer": self.is_indexer,
            "indexer_parameters": [p.to_dict() for p in self.indexer_parameters],
            "getter_accessibility": _opt(self.getter_accessibility),
            "setter_accessibility": _opt(self.setter_accessibility),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDescriptor(MemberDescriptor):
    is_const: bool = False
    is_readonly: bool = False
    is_volatile: bool = False
    constant_value: Any = None

    def _payload(self) -> dict[str, Any]:
        return {
            "is_const": self.is_const,
            "is_readonly": self.is_readonly,
            "is_volatile": self.is_volatile,
            "constant_value": self.constant_value,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class EventDescriptor(MemberDescriptor):
    add_accessibility: Accessibility | None = None
    remove_accessibility: Accessibility | None = None

    def _payload(self) -> dict[str, Any]:
        return {
            "handler_type": self.type_name,
            "add_accessibility": _opt(self.add_accessibility),
            "remove_accessibility": _opt(self.remove_accessibility),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ConstructorDescriptor(MemberDescriptor):
    parameters: tuple[ParameterDescriptor, ...] = ()
    is_static_initializer: bool = False

    @property
    def name_key(self) -> str:
        # Constructors all share one metadata name; the signature tells them apart.
        return self.signature

    def _payload(self) -> dict[str, Any]:
        return {
            "parameters": [p.to_dict() for p in self.parameters],
            "is_static_initializer": self.is_static_initializer,
        }


AnyMember = (
    MethodDescriptor
    | PropertyDescriptor
    | FieldDescriptor
    | EventDescriptor
    | ConstructorDescriptor
)

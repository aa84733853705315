"""Raw structural facts produced by introspection providers.

These models mirror what a metadata reader can see in a compiled module
without executing it: types, members, parameters, generic parameters and
custom attribute data. They are frozen so a materialized module can be
shared between calls; the normalizer turns them into descriptors.

Type references accept a shorthand string wherever a model is expected::

    "System.Int32"                          named type
    "System.String[]" / "System.Int32[,]"   arrays (rank from commas)
    "System.Int32&" / "System.Byte*"        byref / pointer
    "System.Collections.Generic.List`1<System.String>"   constructed generic
    "!T"                                    generic parameter
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Accessibility(StrEnum):
    """Member or type accessibility, valued by its source keyword."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"

    @property
    def is_public(self) -> bool:
        return self is Accessibility.PUBLIC


class TypeKind(StrEnum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    STRUCT = "struct"
    DELEGATE = "delegate"
    ARRAY = "array"
    POINTER = "pointer"
    BYREF = "byref"
    GENERIC_PARAMETER = "generic_parameter"
    UNKNOWN = "unknown"


class MemberKind(StrEnum):
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"
    CONSTRUCTOR = "constructor"


class Variance(StrEnum):
    NONE = "none"
    COVARIANT = "covariant"
    CONTRAVARIANT = "contravariant"


class RefKind(StrEnum):
    NAMED = "named"
    ARRAY = "array"
    POINTER = "pointer"
    BYREF = "byref"
    GENERIC_PARAMETER = "generic_parameter"


_FROZEN = ConfigDict(frozen=True)


# =============================================================================
# Type references
# =============================================================================


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested inside angle brackets."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i].strip())
            start = i + 1
    parts.append(text[start:].strip())
    return [p for p in parts if p]


def parse_type_ref(text: str) -> dict[str, Any]:
    """Parse shorthand reference text into RawTypeRef field values."""
    text = text.strip()
    if not text:
        raise ValueError("empty type reference")
    if text.endswith("&"):
        return {"kind": RefKind.BYREF, "element": parse_type_ref(text[:-1])}
    if text.endswith("*"):
        return {"kind": RefKind.POINTER, "element": parse_type_ref(text[:-1])}
    if text.endswith("]"):
        open_at = text.rfind("[")
        inner = text[open_at + 1 : -1]
        if open_at <= 0 or inner.strip(","):
            raise ValueError(f"malformed array reference: {text}")
        return {
            "kind": RefKind.ARRAY,
            "element": parse_type_ref(text[:open_at]),
            "rank": len(inner) + 1,
        }
    if text.startswith("!"):
        return {"kind": RefKind.GENERIC_PARAMETER, "full_name": text[1:]}
    if text.endswith(">"):
        open_at = text.index("<")
        return {
            "kind": RefKind.NAMED,
            "full_name": text[:open_at].strip(),
            "type_arguments": [parse_type_ref(a) for a in _split_top_level(text[open_at + 1 : -1])],
        }
    return {"kind": RefKind.NAMED, "full_name": text}


class RawTypeRef(BaseModel):
    """Reference to a type from a signature, base list or constraint."""

    model_config = _FROZEN

    kind: RefKind = RefKind.NAMED
    full_name: str = ""
    element: RawTypeRef | None = None
    rank: int = Field(default=1, ge=1)
    type_arguments: tuple[RawTypeRef, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _accept_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return parse_type_ref(data)
        return data

    @model_validator(mode="after")
    def _check_shape(self) -> RawTypeRef:
        wraps = self.kind in (RefKind.ARRAY, RefKind.POINTER, RefKind.BYREF)
        if wraps and self.element is None:
            raise ValueError(f"{self.kind} reference requires an element type")
        if not wraps and not self.full_name:
            raise ValueError("named reference requires full_name")
        return self

    @property
    def name(self) -> str:
        """Simple name: last segment after namespace and nesting separators."""
        return self.full_name.rsplit(".", 1)[-1].rsplit("+", 1)[-1]

    @property
    def namespace(self) -> str:
        outer = self.full_name.split("+", 1)[0]
        return outer.rsplit(".", 1)[0] if "." in outer else ""

    @property
    def is_byref(self) -> bool:
        return self.kind is RefKind.BYREF


# =============================================================================
# Attributes, parameters, generics
# =============================================================================


class RawAttribute(BaseModel):
    """Custom attribute data as recorded in metadata.

    ``load_error`` is set when the provider could record the attribute's
    presence but not resolve its type; reading such an attribute fails.
    """

    model_config = _FROZEN

    type_name: str
    constructor_arguments: tuple[Any, ...] = ()
    named_arguments: dict[str, Any] = Field(default_factory=dict)
    load_error: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"type_name": data}
        return data


class RawGenericParameter(BaseModel):
    model_config = _FROZEN

    name: str
    position: int = 0
    constraints: tuple[RawTypeRef, ...] = ()
    reference_type_constraint: bool = False
    value_type_constraint: bool = False
    default_constructor_constraint: bool = False
    variance: Variance = Variance.NONE


class RawParameter(BaseModel):
    model_config = _FROZEN

    name: str
    type: RawTypeRef
    position: int = 0
    is_optional: bool = False
    has_default: bool = False
    default_value: Any = None
    is_out: bool = False
    is_in: bool = False
    is_params: bool = False
    attributes: tuple[RawAttribute, ...] = ()


class RawParamDoc(BaseModel):
    model_config = _FROZEN

    name: str
    text: str = ""


class RawDocs(BaseModel):
    """Documentation comment text recorded for a type or member.

    A plain string is read as the summary. ``params`` accepts either a list
    of ``{name, text}`` entries or a ``{name: text}`` mapping.
    """

    model_config = _FROZEN

    summary: str | None = None
    remarks: str | None = None
    returns: str | None = None
    params: tuple[RawParamDoc, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _accept_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"summary": data}
        if isinstance(data, dict) and isinstance(data.get("params"), dict):
            data = dict(data)
            data["params"] = [{"name": k, "text": v} for k, v in data["params"].items()]
        return data


# =============================================================================
# Members and types
# =============================================================================


class RawMember(BaseModel):
    """One member as seen on a type, declared or inherited.

    ``declaring_type`` is the full name of the type that declares it; an
    inherited member carries its base type's name. ``base_declaring_type``
    names the type that declares the root definition of a virtual method
    (None for non-virtual members).
    """

    model_config = _FROZEN

    kind: MemberKind
    name: str
    declaring_type: str
    accessibility: Accessibility = Accessibility.PUBLIC
    token: int = 0
    type: RawTypeRef | None = None
    parameters: tuple[RawParameter, ...] = ()
    generic_parameters: tuple[RawGenericParameter, ...] = ()
    attributes: tuple[RawAttribute, ...] = ()
    docs: RawDocs | None = None

    is_static: bool = False
    is_virtual: bool = False
    is_abstract: bool = False
    is_final: bool = False
    is_special_name: bool = False
    base_declaring_type: str | None = None

    # method
    is_extension: bool = False
    # property
    can_read: bool = False
    can_write: bool = False
    getter_accessibility: Accessibility | None = None
    setter_accessibility: Accessibility | None = None
    # field
    is_literal: bool = False
    is_init_only: bool = False
    is_volatile: bool = False
    constant_value: Any = None
    # event
    add_accessibility: Accessibility | None = None
    remove_accessibility: Accessibility | None = None

    @model_validator(mode="before")
    @classmethod
    def _number_positions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("parameters", "generic_parameters"):
            items = data.get(key)
            if items:
                data[key] = [
                    {"position": i, **item} if isinstance(item, dict) else item
                    for i, item in enumerate(items)
                ]
        return data


class RawType(BaseModel):
    """A type definition plus every member visible on it."""

    model_config = _FROZEN

    full_name: str
    kind: TypeKind = TypeKind.CLASS
    accessibility: Accessibility = Accessibility.PUBLIC
    token: int = 0
    is_abstract: bool = False
    is_sealed: bool = False
    is_generic_definition: bool = False
    declaring_type: str | None = None
    base_type: RawTypeRef | None = None
    interfaces: tuple[RawTypeRef, ...] = ()
    attributes: tuple[RawAttribute, ...] = ()
    generic_parameters: tuple[RawGenericParameter, ...] = ()
    members: tuple[RawMember, ...] = ()
    docs: RawDocs | None = None
    nested_types: tuple[RawType, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _stamp_members(cls, data: Any) -> Any:
        # Members listed without a declaring type belong to this type.
        if not isinstance(data, dict):
            return data
        data = dict(data)
        owner = data.get("full_name")
        if data.get("members"):
            data["members"] = [
                {"declaring_type": owner, **m} if isinstance(m, dict) else m
                for m in data["members"]
            ]
        if data.get("nested_types"):
            data["nested_types"] = [
                {"declaring_type": owner, **n} if isinstance(n, dict) else n
                for n in data["nested_types"]
            ]
        if data.get("generic_parameters"):
            data["generic_parameters"] = [
                {"position": i, **g} if isinstance(g, dict) else g
                for i, g in enumerate(data["generic_parameters"])
            ]
        return data

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1].rsplit("+", 1)[-1]

    @property
    def namespace(self) -> str:
        outer = self.full_name.split("+", 1)[0]
        return outer.rsplit(".", 1)[0] if "." in outer else ""

    @property
    def is_nested(self) -> bool:
        return self.declaring_type is not None or "+" in self.full_name

    @property
    def is_static(self) -> bool:
        return self.is_abstract and self.is_sealed and self.kind is not TypeKind.INTERFACE


class RawModule(BaseModel):
    """A whole module: its name and top-level types (nested types hang off their parents)."""

    model_config = _FROZEN

    name: str
    version: str = ""
    types: tuple[RawType, ...] = ()

    def iter_types(self) -> list[RawType]:
        """All types, nested ones included, parents before children."""
        result: list[RawType] = []
        stack = list(reversed(self.types))
        while stack:
            current = stack.pop()
            result.append(current)
            stack.extend(reversed(current.nested_types))
        return result


def assign_declaration_order(module: RawModule) -> RawModule:
    """Fill zero tokens with positional declaration order.

    Tokens give every type and member an ordering that does not depend on
    how a provider happens to enumerate them. Manifests may omit them, in
    which case listing order in the manifest is the declaration order.
    """

    def _members(members: tuple[RawMember, ...]) -> list[RawMember]:
        return [
            m if m.token else m.model_copy(update={"token": i + 1})
            for i, m in enumerate(members)
        ]

    def _type(raw: RawType, position: int) -> RawType:
        return raw.model_copy(
            update={
                "token": raw.token or position,
                "members": tuple(_members(raw.members)),
                "nested_types": tuple(
                    _type(n, i + 1) for i, n in enumerate(raw.nested_types)
                ),
            }
        )

    return module.model_copy(
        update={"types": tuple(_type(t, i + 1) for i, t in enumerate(module.types))}
    )


# =============================================================================
# Include flags
# =============================================================================


@dataclass(frozen=True, slots=True)
class IncludeFlags:
    """Accessibility/static/inheritance filter applied by providers."""

    public: bool = True
    non_public: bool = False
    static: bool = True
    instance: bool = True
    inherited: bool = False
    declared_only: bool = True

    def admits(self, member: RawMember, type_full_name: str) -> bool:
        if member.accessibility.is_public:
            if not self.public:
                return False
        elif not self.non_public:
            return False
        if member.is_static and not self.static:
            return False
        if not member.is_static and not self.instance:
            return False
        if member.declaring_type != type_full_name:
            return self.inherited or not self.declared_only
        return True

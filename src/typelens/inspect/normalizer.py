"""Metadata normalizer: raw provider facts -> descriptors.

The normalizer is read-only with respect to the module. It asks the
provider for types and members, and returns frozen descriptors that no
longer depend on the provider handle. Callers close the handle as soon as
normalization returns.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

import structlog

from typelens.core.results import Found, Invalid, NotFound
from typelens.inspect.descriptors import (
    AnyMember,
    AttributeDescriptor,
    ConstructorDescriptor,
    DocsDescriptor,
    EventDescriptor,
    FieldDescriptor,
    GenericParameterDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
)
from typelens.inspect.naming import render_full_name, render_type_name
from typelens.inspect.signatures import (
    constructor_signature,
    event_signature,
    field_signature,
    is_override,
    method_signature,
    property_signature,
    render_literal,
)
from typelens.provider.base import IntrospectionProvider, ModuleHandle
from typelens.provider.models import (
    IncludeFlags,
    MemberKind,
    RawAttribute,
    RawDocs,
    RawGenericParameter,
    RawMember,
    RawParameter,
    RawType,
)

log = structlog.get_logger(__name__)

_ACCESSOR_PREFIXES = ("get_", "set_", "add_", "remove_")


class AttributeLoadError(Exception):
    """Raised when attribute data cannot be resolved."""


# =============================================================================
# Type lookup
# =============================================================================


def find_type(
    types: Iterable[RawType],
    type_name: str,
    *,
    case_sensitive: bool = True,
) -> Found[RawType] | NotFound | Invalid:
    """Resolve a type by qualified name, simple name, or either nesting form.

    Order: exact qualified match, then qualified-or-simple scan, then (when
    the query has a separator) the query with '.' read as the nesting
    separator, then qualified names with '+' read as '.'.
    """
    query = type_name.strip()
    if not query:
        return Invalid("type name must not be empty")

    def fold(text: str) -> str:
        return text if case_sensitive else text.casefold()

    target = fold(query)
    candidates = sorted(types, key=lambda t: t.full_name)

    for raw in candidates:
        if fold(raw.full_name) == target:
            return Found(raw)
    for raw in candidates:
        if fold(raw.name) == target:
            return Found(raw)

    if "." in query or "+" in query:
        nested_form = target.replace(".", "+")
        for raw in candidates:
            if fold(raw.full_name) == nested_form:
                return Found(raw)
        dotted = target.replace("+", ".")
        for raw in candidates:
            if fold(raw.full_name).replace("+", ".") == dotted:
                return Found(raw)

    return NotFound(query)


# =============================================================================
# Leaf conversions
# =============================================================================


def _attribute(raw: RawAttribute) -> AttributeDescriptor:
    if raw.load_error:
        raise AttributeLoadError(f"{raw.type_name}: {raw.load_error}")
    return AttributeDescriptor(
        type_name=raw.type_name,
        constructor_arguments=tuple(raw.constructor_arguments),
        named_arguments=dict(raw.named_arguments),
    )


def extract_attributes(
    raw_attributes: Sequence[RawAttribute], owner: str
) -> tuple[AttributeDescriptor, ...]:
    """Convert attribute data; any failure yields an empty tuple for *owner*."""
    try:
        return tuple(_attribute(a) for a in raw_attributes)
    except Exception as e:  # noqa: BLE001
        log.debug("attribute_extraction_failed", owner=owner, error=str(e))
        return ()


def describe_parameters(
    raw_params: Sequence[RawParameter], owner: str
) -> tuple[ParameterDescriptor, ...]:
    result = []
    for p in sorted(raw_params, key=lambda p: p.position):
        by_ref = p.type.is_byref
        result.append(
            ParameterDescriptor(
                name=p.name or "param",
                position=p.position,
                type_name=render_type_name(p.type),
                default_value=render_literal(p.default_value) if p.has_default else None,
                is_optional=p.is_optional,
                is_out=p.is_out,
                is_ref=by_ref and not p.is_out and not p.is_in,
                is_in=p.is_in,
                is_params=p.is_params,
                attributes=extract_attributes(p.attributes, f"{owner}({p.name})"),
            )
        )
    return tuple(result)


def _clean_text(text: str | None) -> str | None:
    """Collapse whitespace inside paragraphs; keep blank-line paragraph breaks."""
    if text is None:
        return None
    paragraphs = [" ".join(p.split()) for p in re.split(r"\n\s*\n", text)]
    cleaned = "\n\n".join(p for p in paragraphs if p)
    return cleaned or None


def describe_docs(raw: RawDocs | None) -> DocsDescriptor | None:
    """Normalize documentation text; None when nothing is documented."""
    if raw is None:
        return None
    docs = DocsDescriptor(
        summary=_clean_text(raw.summary),
        remarks=_clean_text(raw.remarks),
        returns=_clean_text(raw.returns),
        params=tuple((p.name, _clean_text(p.text) or "") for p in raw.params),
    )
    return docs if docs != DocsDescriptor() else None


def describe_generic_parameters(
    raw_params: Sequence[RawGenericParameter],
) -> tuple[GenericParameterDescriptor, ...]:
    return tuple(
        GenericParameterDescriptor(
            name=g.name,
            position=g.position,
            constraints=tuple(render_type_name(c) for c in g.constraints),
            reference_type_constraint=g.reference_type_constraint,
            value_type_constraint=g.value_type_constraint,
            default_constructor_constraint=g.default_constructor_constraint,
            variance=g.variance,
        )
        for g in sorted(raw_params, key=lambda g: g.position)
    )


def is_accessor_method(member: RawMember) -> bool:
    return (
        member.kind is MemberKind.METHOD
        and member.is_special_name
        and member.name.startswith(_ACCESSOR_PREFIXES)
    )


def is_operator_method(member: RawMember) -> bool:
    return (
        member.is_special_name
        and member.is_static
        and (member.name.startswith("op_") or member.name in ("True", "False"))
    )


def describe_member(member: RawMember) -> AnyMember:
    """Convert one raw member into the descriptor for its kind."""
    owner = f"{member.declaring_type}.{member.name}"
    common = {
        "name": member.name,
        "type_name": render_type_name(member.type),
        "accessibility": member.accessibility,
        "declaring_type": member.declaring_type,
        "order": member.token,
        "is_static": member.is_static,
        "is_virtual": member.is_virtual and not member.is_final,
        "is_abstract": member.is_abstract,
        "is_sealed": member.is_final and member.is_virtual,
        "is_override": is_override(member),
        "attributes": extract_attributes(member.attributes, owner),
        "docs": describe_docs(member.docs),
    }

    if member.kind is MemberKind.METHOD:
        params = describe_parameters(member.parameters, owner)
        generic_names = tuple(
            g.name for g in sorted(member.generic_parameters, key=lambda g: g.position)
        )
        return MethodDescriptor(
            kind=MemberKind.METHOD,
            signature=method_signature(member, params, generic_names),
            parameters=params,
            generic_parameters=generic_names,
            is_operator=is_operator_method(member),
            is_extension=member.is_extension,
            **common,
        )
    if member.kind is MemberKind.PROPERTY:
        indexer = describe_parameters(member.parameters, owner)
        return PropertyDescriptor(
            kind=MemberKind.PROPERTY,
            signature=property_signature(member, indexer),
            can_read=member.can_read,
            can_write=member.can_write,
            is_indexer=bool(indexer),
            indexer_parameters=indexer,
            getter_accessibility=member.getter_accessibility,
            setter_accessibility=member.setter_accessibility,
            **common,
        )
    if member.kind is MemberKind.FIELD:
        is_const = member.is_literal and not member.is_init_only
        return FieldDescriptor(
            kind=MemberKind.FIELD,
            signature=field_signature(member),
            is_const=is_const,
            is_readonly=member.is_init_only,
            is_volatile=member.is_volatile,
            constant_value=member.constant_value if is_const else None,
            **common,
        )
    if member.kind is MemberKind.EVENT:
        return EventDescriptor(
            kind=MemberKind.EVENT,
            signature=event_signature(member),
            add_accessibility=member.add_accessibility,
            remove_accessibility=member.remove_accessibility,
            **common,
        )
    params = describe_parameters(member.parameters, owner)
    return ConstructorDescriptor(
        kind=MemberKind.CONSTRUCTOR,
        signature=constructor_signature(member, params),
        parameters=params,
        is_static_initializer=member.is_static,
        **{**common, "type_name": "void"},
    )


# =============================================================================
# Normalizer
# =============================================================================


class MetadataNormalizer:
    """Builds descriptors for the types and members of an opened module."""

    def __init__(self, provider: IntrospectionProvider) -> None:
        self._provider = provider

    def find(
        self, handle: ModuleHandle, type_name: str, *, case_sensitive: bool = True
    ) -> Found[RawType] | NotFound | Invalid:
        types = self._provider.enumerate_types(handle)
        return find_type(types, type_name, case_sensitive=case_sensitive)

    def describe_type(self, handle: ModuleHandle, raw: RawType) -> TypeDescriptor:
        return self._describe_type(handle.name, raw, frozenset())

    def _describe_type(
        self, module_name: str, raw: RawType, seen: frozenset[str]
    ) -> TypeDescriptor:
        seen = seen | {raw.full_name}
        nested = tuple(
            self._describe_type(module_name, n, seen)
            for n in sorted(raw.nested_types, key=lambda n: (n.token, n.full_name))
            if n.full_name not in seen
        )
        return TypeDescriptor(
            full_name=raw.full_name,
            name=raw.name,
            namespace=raw.namespace,
            kind=raw.kind,
            accessibility=raw.accessibility,
            module=module_name,
            order=raw.token,
            is_abstract=raw.is_abstract,
            is_sealed=raw.is_sealed,
            is_static=raw.is_static,
            is_generic=raw.is_generic_definition or bool(raw.generic_parameters),
            is_nested=raw.is_nested,
            declaring_type=raw.declaring_type,
            base_type=render_full_name(raw.base_type),
            interfaces=tuple(render_full_name(i) or "" for i in raw.interfaces),
            attributes=extract_attributes(raw.attributes, raw.full_name),
            generic_parameters=describe_generic_parameters(raw.generic_parameters),
            nested_types=nested,
            docs=describe_docs(raw.docs),
        )

    def describe_members(
        self,
        handle: ModuleHandle,
        raw: RawType,
        flags: IncludeFlags,
        kinds: Iterable[MemberKind] | None = None,
    ) -> list[AnyMember]:
        wanted = frozenset(kinds) if kinds is not None else frozenset(MemberKind)
        result: list[AnyMember] = []
        for member in self._provider.enumerate_members(handle, raw, flags):
            if member.kind not in wanted or is_accessor_method(member):
                continue
            result.append(describe_member(member))
        return result

    def normalize(
        self,
        handle: ModuleHandle,
        type_name: str,
        *,
        case_sensitive: bool = True,
    ) -> Found[TypeDescriptor] | NotFound | Invalid:
        """Resolve *type_name* and describe it.

        Member include flags are applied separately by describe_members.
        """
        found = self.find(handle, type_name, case_sensitive=case_sensitive)
        if not isinstance(found, Found):
            return found
        return Found(self.describe_type(handle, found.value))

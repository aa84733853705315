"""Source-style signature rendering, one routine per member kind.

Modifier keywords are mutually exclusive and chosen in precedence order:
abstract, virtual (not an override, not final), override, sealed.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from typelens.inspect.descriptors import ParameterDescriptor
from typelens.inspect.naming import render_type_name, strip_arity
from typelens.provider.models import Accessibility, RawMember


def is_override(member: RawMember) -> bool:
    """True when the member's base definition lives on another type."""
    base = member.base_declaring_type
    return base is not None and base != member.declaring_type


def modifier_keyword(member: RawMember) -> str | None:
    if member.is_abstract:
        return "abstract"
    override = is_override(member)
    if member.is_virtual and not member.is_final and not override:
        return "virtual"
    if override:
        return "override"
    if member.is_final and member.is_virtual:
        return "sealed"
    return None


def render_literal(value: Any) -> str | None:
    """Render a default or constant value the way it appears in source."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def format_parameter(param: ParameterDescriptor) -> str:
    parts: list[str] = []
    type_name = param.type_name
    if param.is_out:
        parts.append("out")
    elif param.is_in:
        parts.append("in")
    elif param.is_ref:
        parts.append("ref")
    if (param.is_out or param.is_in or param.is_ref) and type_name.endswith("&"):
        type_name = type_name[:-1]
    if param.is_params:
        parts.append("params")
    parts.append(type_name)
    parts.append(param.name)
    text = " ".join(parts)
    if param.is_optional and param.default_value is not None:
        text += f" = {param.default_value}"
    return text


def _join_parameters(params: Sequence[ParameterDescriptor]) -> str:
    return ", ".join(format_parameter(p) for p in params)


def _prefix(
    accessibility: Accessibility,
    *,
    is_static: bool,
    modifier: str | None,
) -> list[str]:
    parts = [accessibility.value]
    if is_static:
        parts.append("static")
    if modifier:
        parts.append(modifier)
    return parts


def method_signature(
    member: RawMember,
    params: Sequence[ParameterDescriptor],
    generic_names: Sequence[str],
) -> str:
    parts = _prefix(
        member.accessibility, is_static=member.is_static, modifier=modifier_keyword(member)
    )
    name = member.name
    if generic_names:
        name += f"<{', '.join(generic_names)}>"
    parts.append(render_type_name(member.type))
    parts.append(f"{name}({_join_parameters(params)})")
    return " ".join(parts)


def property_signature(member: RawMember, indexer_params: Sequence[ParameterDescriptor]) -> str:
    parts = _prefix(
        member.accessibility, is_static=member.is_static, modifier=modifier_keyword(member)
    )
    parts.append(render_type_name(member.type))
    if indexer_params:
        parts.append(f"this[{_join_parameters(indexer_params)}]")
    else:
        parts.append(member.name)
    accessors = ""
    if member.can_read:
        accessors += "get; "
    if member.can_write:
        accessors += "set; "
    parts.append(f"{{ {accessors}}}")
    return " ".join(parts)


def field_signature(member: RawMember) -> str:
    is_const = member.is_literal and not member.is_init_only
    # const implies static
    parts = _prefix(
        member.accessibility, is_static=member.is_static and not is_const, modifier=None
    )
    if is_const:
        parts.append("const")
    elif member.is_init_only:
        parts.append("readonly")
    if member.is_volatile:
        parts.append("volatile")
    parts.append(render_type_name(member.type))
    parts.append(member.name)
    return " ".join(parts)


def event_signature(member: RawMember) -> str:
    parts = _prefix(
        member.accessibility, is_static=member.is_static, modifier=modifier_keyword(member)
    )
    parts.append("event")
    parts.append(render_type_name(member.type))
    parts.append(member.name)
    return " ".join(parts)


def constructor_signature(member: RawMember, params: Sequence[ParameterDescriptor]) -> str:
    parts = _prefix(member.accessibility, is_static=member.is_static, modifier=None)
    owner = strip_arity(member.declaring_type.rsplit(".", 1)[-1].rsplit("+", 1)[-1])
    parts.append(f"{owner}({_join_parameters(params)})")
    return " ".join(parts)

"""Friendly type-name rendering.

Every type reference in a descriptor goes through render_type_name, so
names read the way a developer writes them in source::

    System.Int32                          -> int
    System.String[]                       -> string[]
    System.Int32[,]                       -> int[,]
    System.Int32&                         -> int&
    System.Collections.Generic.List`1<System.String> -> List<string>
"""

from __future__ import annotations

from typelens.provider.models import RawTypeRef, RefKind

PRIMITIVE_ALIASES: dict[str, str] = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Char": "char",
    "System.Decimal": "decimal",
    "System.Double": "double",
    "System.Single": "float",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Object": "object",
    "System.String": "string",
    "System.Void": "void",
}


def strip_arity(name: str) -> str:
    """Drop the generic arity suffix: ``List`1`` -> ``List``."""
    tick = name.find("`")
    return name if tick < 0 else name[:tick]


def render_type_name(ref: RawTypeRef | None) -> str:
    if ref is None:
        return "void"
    if ref.kind is RefKind.BYREF:
        return f"{render_type_name(ref.element)}&"
    if ref.kind is RefKind.POINTER:
        return f"{render_type_name(ref.element)}*"
    if ref.kind is RefKind.ARRAY:
        return f"{render_type_name(ref.element)}[{',' * (ref.rank - 1)}]"
    if ref.kind is RefKind.GENERIC_PARAMETER:
        return ref.full_name
    if ref.type_arguments:
        args = ", ".join(render_type_name(a) for a in ref.type_arguments)
        return f"{strip_arity(ref.name)}<{args}>"
    alias = PRIMITIVE_ALIASES.get(ref.full_name)
    if alias:
        return alias
    return strip_arity(ref.name)


def render_full_name(ref: RawTypeRef | None) -> str | None:
    """Qualified name of a reference, or None for no reference."""
    if ref is None:
        return None
    if ref.kind is RefKind.BYREF:
        return f"{render_full_name(ref.element)}&"
    if ref.kind is RefKind.POINTER:
        return f"{render_full_name(ref.element)}*"
    if ref.kind is RefKind.ARRAY:
        return f"{render_full_name(ref.element)}[{',' * (ref.rank - 1)}]"
    if ref.type_arguments:
        args = ", ".join(render_full_name(a) or "" for a in ref.type_arguments)
        return f"{ref.full_name}<{args}>"
    return ref.full_name

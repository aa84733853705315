"""Introspection providers and the raw facts they produce."""

from typelens.provider.base import IntrospectionProvider, ModuleHandle, ModuleStamp, open_module
from typelens.provider.manifest import ManifestError, ManifestProvider, load_manifest
from typelens.provider.memory import InMemoryProvider
from typelens.provider.models import (
    Accessibility,
    IncludeFlags,
    MemberKind,
    RawAttribute,
    RawDocs,
    RawGenericParameter,
    RawMember,
    RawModule,
    RawParameter,
    RawParamDoc,
    RawType,
    RawTypeRef,
    TypeKind,
    Variance,
)

__all__ = [
    "Accessibility",
    "IncludeFlags",
    "InMemoryProvider",
    "IntrospectionProvider",
    "ManifestError",
    "ManifestProvider",
    "MemberKind",
    "ModuleHandle",
    "ModuleStamp",
    "RawAttribute",
    "RawDocs",
    "RawGenericParameter",
    "RawMember",
    "RawModule",
    "RawParameter",
    "RawParamDoc",
    "RawType",
    "RawTypeRef",
    "TypeKind",
    "Variance",
    "load_manifest",
    "open_module",
]

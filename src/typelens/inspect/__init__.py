"""Metadata normalization and the filter/sort pipeline."""

from typelens.inspect.descriptors import (
    AnyMember,
    AttributeDescriptor,
    ConstructorDescriptor,
    DocsDescriptor,
    EventDescriptor,
    FieldDescriptor,
    GenericParameterDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
)
from typelens.inspect.normalizer import MetadataNormalizer, find_type
from typelens.inspect.options import FilterOptions, SortKey, SortOrder
from typelens.inspect.pipeline import filter_items, sort_items

__all__ = [
    "AnyMember",
    "AttributeDescriptor",
    "ConstructorDescriptor",
    "DocsDescriptor",
    "EventDescriptor",
    "FieldDescriptor",
    "FilterOptions",
    "GenericParameterDescriptor",
    "MemberDescriptor",
    "MetadataNormalizer",
    "MethodDescriptor",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "SortKey",
    "SortOrder",
    "TypeDescriptor",
    "filter_items",
    "find_type",
    "sort_items",
]

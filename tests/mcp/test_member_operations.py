"""Tests for mcp/operations/members.py module.

Covers paging, token binding, caching and option resolution through the
public operation functions, the same way the MCP tools call them.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import pytest

from typelens.config.runtime import RuntimeOptions, RuntimeOptionsStore
from typelens.mcp.context import AppContext
from typelens.mcp.envelope import render
from typelens.mcp.operations import (
    get_member_docs,
    list_all_members,
    list_members,
    lookup_member,
)
from typelens.mcp.pagination import ContinuationToken
from typelens.mcp.response_cache import InMemoryResponseCache
from typelens.provider.base import ModuleHandle
from typelens.provider.memory import InMemoryProvider
from typelens.provider.models import IncludeFlags, RawMember, RawModule, RawType

SORTED_METHODS = [
    "public void Close()",
    "public void Dispose()",
    "public bool Open()",
    "public override void Render()",
    "public void Resize(int width, int height)",
    "public void Resize(double scale = 1.5)",
    "public bool TryGet<T>(string key, out T value)",
]


def _data(envelope: dict[str, Any]) -> dict[str, Any]:
    assert envelope["kind"] != "error", envelope
    return envelope["data"]  # type: ignore[no-any-return]


def _sigs(data: dict[str, Any]) -> list[str]:
    return [item["signature"] for item in data["items"]]


def methods(ctx: AppContext, path: str, **options: Any) -> dict[str, Any]:
    return list_members(ctx, "method", path, "Widget", options or None)


class TestListMembers:
    """Per-kind listings."""

    def test_envelope(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = methods(app_ctx, module_path)

        assert list(envelope) == ["kind", "version", "data"]
        assert envelope["kind"] == "member.methods"
        data = envelope["data"]
        assert data["type_name"] == "Acme.Widgets.Widget"
        assert _sigs(data) == SORTED_METHODS
        assert "counts" not in data
        assert data["pagination"]["has_more"] is False

    def test_attribute_filter_within_one_page(
        self, app_ctx: AppContext, module_path: str
    ) -> None:
        data = _data(
            methods(app_ctx, module_path, max_items=3, has_attribute_contains="Deprecated")
        )

        assert data["total"] == 2
        assert data["count"] == 2
        assert data["next_token"] is None
        assert _sigs(data) == ["public void Close()", "public void Resize(double scale = 1.5)"]

    def test_pages_of_three(self, app_ctx: AppContext, module_path: str) -> None:
        first = _data(methods(app_ctx, module_path, max_items=3))
        second = _data(
            methods(app_ctx, module_path, max_items=3, continuation_token=first["next_token"])
        )
        third = _data(
            methods(app_ctx, module_path, max_items=3, continuation_token=second["next_token"])
        )

        assert [p["count"] for p in (first, second, third)] == [3, 3, 1]
        assert all(p["total"] == 7 for p in (first, second, third))
        assert third["next_token"] is None
        assert _sigs(first) + _sigs(second) + _sigs(third) == SORTED_METHODS

    def test_skip(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(methods(app_ctx, module_path, skip=5))

        assert _sigs(data) == SORTED_METHODS[5:]
        assert data["offset"] == 5

    def test_token_bound_to_query(self, app_ctx: AppContext, module_path: str) -> None:
        first = _data(methods(app_ctx, module_path, max_items=3))

        envelope = methods(
            app_ctx,
            module_path,
            max_items=3,
            name_contains="e",
            continuation_token=first["next_token"],
        )

        assert envelope["kind"] == "error"
        assert envelope["code"] == "InvalidContinuationToken"

    def test_token_bound_to_kind(self, app_ctx: AppContext, module_path: str) -> None:
        first = _data(methods(app_ctx, module_path, max_items=3))

        envelope = list_members(
            app_ctx,
            "property",
            module_path,
            "Widget",
            {"max_items": 3, "continuation_token": first["next_token"]},
        )

        assert envelope["code"] == "InvalidContinuationToken"

    def test_forged_salt_rejected(self, app_ctx: AppContext, module_path: str) -> None:
        token = ContinuationToken(3, "0000000000000000").encode()

        envelope = methods(app_ctx, module_path, max_items=3, continuation_token=token)

        assert envelope["code"] == "InvalidContinuationToken"

    def test_garbage_token_rejected(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = methods(app_ctx, module_path, continuation_token="%%%")

        assert envelope["code"] == "InvalidContinuationToken"

    def test_empty_token_means_first_page(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(methods(app_ctx, module_path, continuation_token=""))

        assert data["offset"] == 0

    def test_inherited(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(methods(app_ctx, module_path, include_inherited=True, name_contains="Desc"))

        assert data["total"] == 1
        assert data["items"][0]["declaring_type"] == "Acme.Widgets.Component"

    def test_non_public(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(methods(app_ctx, module_path, include_non_public=True))

        assert data["total"] == 8
        assert "private void Reset()" in _sigs(data)

    def test_static_only(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(
            list_members(app_ctx, "field", module_path, "Widget", {"include_instance": False})
        )

        assert [i["name"] for i in data["items"]] == ["Empty", "MaxSize"]

    def test_constructors_sorted_by_signature(
        self, app_ctx: AppContext, module_path: str
    ) -> None:
        data = _data(list_members(app_ctx, "constructor", module_path, "Widget"))

        assert _sigs(data) == ["public Widget()", "public Widget(string name)"]

    def test_events(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(list_members(app_ctx, "event", module_path, "Widget"))

        assert data["items"][0]["handler_type"] == "EventHandler"

    def test_properties_skip_nothing_but_accessors(
        self, app_ctx: AppContext, module_path: str
    ) -> None:
        data = _data(list_members(app_ctx, "property", module_path, "Widget"))

        assert [i["name"] for i in data["items"]] == ["Item", "Size"]

    def test_unknown_type(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = list_members(app_ctx, "method", module_path, "Gadget")

        assert envelope["code"] == "TypeNotFound"

    def test_unsupported_sort(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = methods(app_ctx, module_path, sort_by="namespace")

        assert envelope["code"] == "InvalidArgument"


class TestListAllMembers:
    """member.all"""

    def test_counts(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(list_all_members(app_ctx, module_path, "Widget"))

        assert data["counts"] == {
            "method": 7,
            "property": 2,
            "field": 2,
            "event": 1,
            "constructor": 2,
        }
        assert data["total"] == 14

    def test_counts_follow_filters(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(list_all_members(app_ctx, module_path, "Widget", {"name_contains": "Size"}))

        assert data["counts"]["method"] == 0
        assert data["counts"]["property"] == 1
        assert data["counts"]["field"] == 1

    def test_sort_by_kind(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(list_all_members(app_ctx, module_path, "Widget", {"sort_by": "kind"}))
        kinds = [i["kind"] for i in data["items"]]

        assert kinds == sorted(kinds)
        assert kinds[0] == "constructor"


class TestLookupMember:
    """member.lookup"""

    def test_overloads(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(lookup_member(app_ctx, module_path, "Widget", "Resize"))

        assert data["count"] == 2
        assert _sigs(data) == [
            "public void Resize(double scale = 1.5)",
            "public void Resize(int width, int height)",
        ]

    def test_case_insensitive(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(
            lookup_member(app_ctx, module_path, "widget", "resize", {"case_sensitive": False})
        )

        assert data["count"] == 2
        assert data["type_name"] == "Acme.Widgets.Widget"

    def test_constructors_by_metadata_name(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(lookup_member(app_ctx, module_path, "Widget", ".ctor"))

        assert data["count"] == 2

    def test_not_found(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = lookup_member(app_ctx, module_path, "Widget", "Nope")

        assert envelope["code"] == "MemberNotFound"

    def test_respects_include_flags(self, app_ctx: AppContext, module_path: str) -> None:
        hidden = lookup_member(app_ctx, module_path, "Widget", "Reset")
        shown = lookup_member(
            app_ctx, module_path, "Widget", "Reset", {"include_non_public": True}
        )

        assert hidden["code"] == "MemberNotFound"
        assert _data(shown)["count"] == 1

    def test_ignores_paging_fields(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(
            lookup_member(
                app_ctx,
                module_path,
                "Widget",
                "Resize",
                {"max_items": 1, "continuation_token": "garbage"},
            )
        )

        assert data["count"] == 2

    def test_empty_member_name(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = lookup_member(app_ctx, module_path, "Widget", "")

        assert envelope["code"] == "InvalidArgument"
        assert envelope["details"]["argument"] == "member_name"


class TestMemberDocs:
    """member.docs"""

    def test_one_item_per_overload(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(get_member_docs(app_ctx, module_path, "Widget", "Resize"))

        assert data["count"] == 2
        assert data["documented"] == 1
        by_sig = {item["signature"]: item["docs"] for item in data["items"]}
        assert by_sig["public void Resize(double scale = 1.5)"] is None
        assert by_sig["public void Resize(int width, int height)"] == {
            "summary": "Resizes the widget.",
            "remarks": None,
            "returns": None,
            "params": [
                {"name": "width", "text": "New width."},
                {"name": "height", "text": "New height."},
            ],
        }

    def test_summary_shorthand(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(get_member_docs(app_ctx, module_path, "Widget", "Open"))

        (item,) = data["items"]
        assert item["kind"] == "method"
        assert item["declaring_type"] == "Acme.Widgets.Widget"
        assert item["docs"]["summary"] == "Opens the widget."

    def test_listings_omit_docs(self, app_ctx: AppContext, module_path: str) -> None:
        data = _data(lookup_member(app_ctx, module_path, "Widget", "Open"))

        assert "docs" not in data["items"][0]

    def test_not_found(self, app_ctx: AppContext, module_path: str) -> None:
        envelope = get_member_docs(app_ctx, module_path, "Widget", "Nope")

        assert envelope["code"] == "MemberNotFound"

    def test_cached_apart_from_lookup(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        lookup_member(app_ctx, module_path, "Widget", "Open")
        envelope = get_member_docs(app_ctx, module_path, "Widget", "Open")

        assert envelope["kind"] == "member.docs"
        assert provider.open_count == 2


class TestCaching:
    """Response cache behaviour seen through the provider's open counter."""

    def test_identical_calls_hit_cache(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        first = methods(app_ctx, module_path)
        second = methods(app_ctx, module_path)

        assert first == second
        assert provider.open_count == 1

    def test_different_pages_are_cached_separately(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        methods(app_ctx, module_path, max_items=3)
        methods(app_ctx, module_path, max_items=3, skip=3)

        assert provider.open_count == 2

    def test_ttl_expiry(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str, clock: Any
    ) -> None:
        methods(app_ctx, module_path)
        clock.advance(61)
        methods(app_ctx, module_path)

        assert provider.open_count == 2

    def test_no_cache(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        methods(app_ctx, module_path)
        list_members(app_ctx, "method", module_path, "Widget", no_cache=True)
        methods(app_ctx, module_path)

        assert provider.open_count == 2

    def test_module_change_invalidates(
        self,
        app_ctx: AppContext,
        provider: InMemoryProvider,
        module_path: str,
        sample_module: RawModule,
    ) -> None:
        first = _data(methods(app_ctx, module_path, max_items=3))
        trimmed = sample_module.model_copy(update={"types": sample_module.types[:1]})
        provider.replace(module_path, trimmed)

        assert methods(app_ctx, module_path)["code"] == "TypeNotFound"
        stale = methods(app_ctx, module_path, max_items=3, continuation_token=first["next_token"])
        assert stale["code"] == "InvalidContinuationToken"

    def test_errors_not_cached(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        list_members(app_ctx, "method", module_path, "Gadget")
        list_members(app_ctx, "method", module_path, "Gadget")

        assert provider.open_count == 2

    def test_handles_always_closed(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        methods(app_ctx, module_path)
        list_members(app_ctx, "method", module_path, "Gadget")
        lookup_member(app_ctx, module_path, "Widget", "Nope")

        assert provider.open_handles == 0


class ReversedProvider(InMemoryProvider):
    """Enumerates types and members back to front."""

    def enumerate_types(self, handle: ModuleHandle) -> Sequence[RawType]:
        return list(reversed(super().enumerate_types(handle)))

    def enumerate_members(
        self, handle: ModuleHandle, raw_type: RawType, flags: IncludeFlags
    ) -> Sequence[RawMember]:
        return list(reversed(super().enumerate_members(handle, raw_type, flags)))


def _walk(ctx: AppContext, path: str, kind: str, max_items: int) -> list[dict[str, Any]]:
    pages = []
    token = None
    while True:
        options = {"max_items": max_items, "continuation_token": token}
        page = _data(list_members(ctx, kind, path, "Widget", options, no_cache=True))
        pages.append(page)
        token = page["next_token"]
        if token is None:
            return pages


class TestDeterminism:
    """Identical queries over identical metadata produce identical output."""

    def test_uncached_calls_are_byte_identical(
        self, app_ctx: AppContext, provider: InMemoryProvider, module_path: str
    ) -> None:
        first = list_members(app_ctx, "method", module_path, "Widget", no_cache=True)
        second = list_members(app_ctx, "method", module_path, "Widget", no_cache=True)

        assert provider.open_count == 2
        assert render(first) == render(second)

    @pytest.mark.parametrize("kind", ["method", "property", "field", "constructor"])
    def test_enumeration_order_does_not_matter(
        self,
        app_ctx: AppContext,
        clock: Any,
        sample_module: RawModule,
        module_path: str,
        kind: str,
    ) -> None:
        reversed_ctx = AppContext(
            provider=ReversedProvider({module_path: sample_module}),
            options=RuntimeOptionsStore(RuntimeOptions(cache_ttl_seconds=60)),
            cache=InMemoryResponseCache(clock=clock),
        )

        expected = _walk(app_ctx, module_path, kind, 2)
        actual = _walk(reversed_ctx, module_path, kind, 2)

        assert [p["next_token"] for p in actual] == [p["next_token"] for p in expected]
        assert json.dumps(actual) == json.dumps(expected)


class TestRuntimeDefaults:
    """Runtime options feed default resolution and the cache key."""

    def test_default_page_size(self, app_ctx: AppContext, module_path: str) -> None:
        assert _data(methods(app_ctx, module_path))["count"] == 7

        app_ctx.options.update(default_page_size=2)

        assert _data(methods(app_ctx, module_path))["count"] == 2

    def test_per_kind_override(self, app_ctx: AppContext, module_path: str) -> None:
        app_ctx.options.update(page_size_overrides={"member.methods": 4})

        assert _data(methods(app_ctx, module_path))["count"] == 4
        fields = _data(list_members(app_ctx, "field", module_path, "Widget"))
        assert fields["count"] == 2

    def test_explicit_max_items_wins(self, app_ctx: AppContext, module_path: str) -> None:
        app_ctx.options.update(default_page_size=2)

        assert _data(methods(app_ctx, module_path, max_items=5))["count"] == 5

    def test_non_public_default(self, app_ctx: AppContext, module_path: str) -> None:
        app_ctx.options.update(include_non_public_by_default=True)

        assert _data(methods(app_ctx, module_path))["total"] == 8
        assert _data(methods(app_ctx, module_path, include_non_public=False))["total"] == 7


class TestSizeGovernance:
    """Pages shrink to the character target instead of growing."""

    @pytest.fixture
    def bulky(self, provider: InMemoryProvider) -> str:
        module = RawModule.model_validate(
            {
                "name": "Bulky",
                "types": [
                    {
                        "full_name": "Bulky.Thing",
                        "members": [
                            {
                                "kind": "method",
                                "name": f"M{i:03d}",
                                "attributes": [
                                    {
                                        "type_name": "Bulky.NoteAttribute",
                                        "constructor_arguments": ["n" * 2000],
                                    }
                                ],
                            }
                            for i in range(100)
                        ],
                    }
                ],
            }
        )
        provider.replace("bulky", module)
        return "bulky"

    def test_page_reduced_and_resumable(self, app_ctx: AppContext, bulky: str) -> None:
        seen: list[str] = []
        token = None
        pages = 0
        while True:
            envelope = list_members(
                app_ctx,
                "method",
                bulky,
                "Thing",
                {"max_items": 100, "continuation_token": token},
            )
            data = _data(envelope)
            pages += 1
            assert data["count"] < 100 or data["next_token"] is None
            seen.extend(i["name"] for i in data["items"])
            token = data["next_token"]
            if token is None:
                break

        assert pages > 1
        assert seen == [f"M{i:03d}" for i in range(100)]

    def test_first_page_flags_reduction(self, app_ctx: AppContext, bulky: str) -> None:
        data = _data(list_members(app_ctx, "method", bulky, "Thing", {"max_items": 100}))

        assert data["reduced"]
        assert data["pagination"]["pagination_advised"]
        assert data["pagination"]["recommended_page_size"] < 100

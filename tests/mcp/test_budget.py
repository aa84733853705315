"""Tests for mcp/budget.py module."""

from __future__ import annotations

import pytest

from typelens.core.errors import ErrorKind, TypeLensError
from typelens.mcp.budget import (
    AdaptivePageBuilder,
    enforce_ceiling,
    measure_chars,
    pagination_advice,
)


class TestMeasureChars:
    def test_compact_json(self) -> None:
        assert measure_chars({"a": 1}) == len('{"a":1}')

    def test_non_ascii_counts_characters(self) -> None:
        assert measure_chars("é") == 3


class TestAdaptivePageBuilder:
    """Size-aware accumulation."""

    def test_accepts_until_target(self) -> None:
        item = {"v": "x" * 10}  # 18 chars
        builder = AdaptivePageBuilder(target=40)

        assert builder.try_add(item)
        assert builder.try_add(item)
        assert not builder.try_add(item)
        assert builder.count == 2
        assert builder.used_chars == 37
        assert builder.reduced

    def test_first_item_always_accepted(self) -> None:
        builder = AdaptivePageBuilder(target=5)

        assert builder.try_add({"v": "x" * 100})
        assert builder.count == 1
        assert not builder.reduced

    def test_not_reduced_when_everything_fits(self) -> None:
        builder = AdaptivePageBuilder()
        for i in range(5):
            builder.try_add({"i": i})

        assert builder.count == 5
        assert not builder.reduced


class TestEnforceCeiling:
    def test_passes_through(self) -> None:
        assert enforce_ceiling("abc", maximum=3) == "abc"

    def test_fails_closed(self) -> None:
        with pytest.raises(TypeLensError) as exc_info:
            enforce_ceiling("abcd", maximum=3)

        assert exc_info.value.code == ErrorKind.RESPONSE_TOO_LARGE
        assert exc_info.value.details == {"actual": 4, "maximum": 3}


class TestPaginationAdvice:
    def test_small_result(self) -> None:
        advice = pagination_advice(total=10, count=10, current_page_chars=1000, has_more=False)

        assert advice["estimated_total_chars"] == 1000
        assert not advice["pagination_advised"]
        assert advice["recommended_page_size"] == 10

    def test_large_result_recommends_smaller_pages(self) -> None:
        advice = pagination_advice(total=1000, count=100, current_page_chars=40_000, has_more=True)

        assert advice["estimated_total_chars"] == 400_000
        assert advice["pagination_advised"]
        assert advice["recommended_page_size"] == 50

    def test_recommendation_floor(self) -> None:
        advice = pagination_advice(total=1000, count=12, current_page_chars=12_000, has_more=True)

        assert advice["recommended_page_size"] == 10

    def test_empty_page(self) -> None:
        advice = pagination_advice(total=0, count=0, current_page_chars=0, has_more=False)

        assert advice["estimated_total_chars"] == 0

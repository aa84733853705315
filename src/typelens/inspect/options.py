"""Query options shared by every listing operation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from typelens.config.constants import MAX_PAGE_SIZE
from typelens.provider.models import IncludeFlags


class SortKey(StrEnum):
    NAME = "name"
    FULL_NAME = "full_name"
    NAMESPACE = "namespace"
    KIND = "kind"
    ACCESSIBILITY = "accessibility"
    SIGNATURE = "signature"
    DECLARATION = "declaration"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


MEMBER_SORT_KEYS = frozenset(
    {SortKey.NAME, SortKey.KIND, SortKey.ACCESSIBILITY, SortKey.SIGNATURE, SortKey.DECLARATION}
)
TYPE_SORT_KEYS = frozenset(
    {
        SortKey.NAME,
        SortKey.FULL_NAME,
        SortKey.NAMESPACE,
        SortKey.KIND,
        SortKey.ACCESSIBILITY,
        SortKey.DECLARATION,
    }
)


class FilterOptions(BaseModel):
    """Filtering, ordering and paging for a listing.

    ``include_non_public=None`` defers to the runtime default. ``skip`` and
    ``continuation_token`` both position the page; a token wins when both
    are given.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    include_public: bool = True
    include_non_public: bool | None = None
    include_static: bool = True
    include_instance: bool = True
    include_inherited: bool = False
    declared_only: bool = True
    case_sensitive: bool = True
    name_contains: str | None = None
    has_attribute_contains: str | None = None
    sort_by: SortKey = SortKey.NAME
    sort_order: SortOrder = SortOrder.ASC
    skip: int | None = Field(default=None, ge=0)
    max_items: int | None = Field(default=None, ge=1, le=MAX_PAGE_SIZE)
    continuation_token: str | None = None

    def include_flags(self, non_public_default: bool) -> IncludeFlags:
        non_public = self.include_non_public
        return IncludeFlags(
            public=self.include_public,
            non_public=non_public_default if non_public is None else non_public,
            static=self.include_static,
            instance=self.include_instance,
            inherited=self.include_inherited,
            declared_only=self.declared_only,
        )

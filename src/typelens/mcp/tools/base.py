"""Parameter types shared by the tool handlers.

Listing tools take the FilterOptions fields as flat parameters so every
MCP client sees a plain schema. ``None`` means "use the default".
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field

from typelens.config.constants import MAX_PAGE_SIZE

ModulePath = Annotated[
    str, Field(description="Module manifest path (absolute, or relative to a search root)")
]
TypeName = Annotated[
    str,
    Field(description="Full or simple type name; nested types as Outer.Inner or Outer+Inner"),
]
CaseSensitive = Annotated[bool, Field(description="Match names case-sensitively")]
NoCache = Annotated[bool, Field(description="Bypass the response cache for this call")]

IncludePublic = Annotated[bool | None, Field(description="Include public entries")]
IncludeNonPublic = Annotated[
    bool | None, Field(description="Include non-public entries (default: runtime option)")
]
IncludeStatic = Annotated[bool | None, Field(description="Include static members")]
IncludeInstance = Annotated[bool | None, Field(description="Include instance members")]
IncludeInherited = Annotated[bool | None, Field(description="Include inherited members")]
DeclaredOnly = Annotated[
    bool | None, Field(description="Only members declared on the type itself")
]
NameContains = Annotated[str | None, Field(description="Substring the name must contain")]
HasAttributeContains = Annotated[
    str | None, Field(description="Substring of an attribute type name the entry must carry")
]
SortBy = Annotated[
    Literal["name", "full_name", "namespace", "kind", "accessibility", "signature", "declaration"]
    | None,
    Field(description="Sort key (full_name/namespace for types, signature for members)"),
]
SortOrderParam = Annotated[Literal["asc", "desc"] | None, Field(description="Sort direction")]
Skip = Annotated[int | None, Field(ge=0, description="Items to skip (ignored with a token)")]
MaxItems = Annotated[
    int | None, Field(ge=1, le=MAX_PAGE_SIZE, description="Page size (default: runtime option)")
]
ContinuationTokenParam = Annotated[
    str | None, Field(description="next_token from the previous page of the same query")
]


def filter_options(**fields: Any) -> dict[str, Any]:
    """FilterOptions mapping with unset (None) fields dropped."""
    return {k: v for k, v in fields.items() if v is not None}

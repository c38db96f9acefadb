"""
Search schemas for API responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from hub3.core.services.search import SearchResult


class ScrollPagerResponse(BaseModel):
    """Paging state; scroll_id is the token for the next page."""
    model_config = ConfigDict(from_attributes=True)

    cursor: int
    total: int
    rows: int
    scroll_id: str = ""


class BreadCrumbResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display: str
    href: str
    field: str = ""
    value: str = ""
    is_last: bool


class QueryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    terms: str = ""
    bread_crumbs: List[BreadCrumbResponse] = []


class FacetLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    url: str
    is_selected: bool
    value: str
    count: int
    display_string: str


class QueryFacetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    field: str
    total: int
    other_docs: int
    is_selected: bool
    links: List[FacetLinkResponse] = []


class SearchResponse(BaseModel):
    """Search response with results and navigation."""
    pager: ScrollPagerResponse
    query: QueryResponse
    facets: List[QueryFacetResponse] = []
    items: List[Dict[str, Any]] = []
    peek: Optional[Dict[str, int]] = None
    fill_tree: bool = False

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            pager=ScrollPagerResponse.model_validate(result.pager),
            query=QueryResponse.model_validate(result.query),
            facets=[QueryFacetResponse.model_validate(f) for f in result.facets],
            items=result.items,
            peek=result.peek or None,
            fill_tree=result.fill_tree,
        )


class EchoResponse(BaseModel):
    """Introspection of a compiled search request."""
    echo: str
    value: Any = None

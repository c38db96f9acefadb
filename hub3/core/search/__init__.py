"""
Search core - faceted query compiler and cursor protocol.

Provides:
- QueryFilter grammar (parse_query_filter, QueryFilter.as_string)
- SearchRequest model and URL parameter parsing (new_search_request)
- QueryCompiler: main query and post filter
- AggregationCompiler / AggregationDecoder: facets
- FacetURIBuilder, BreadCrumbBuilder: navigation links
- Cursor codec (encode_cursor, decode_cursor, next_scroll_id)
"""

from hub3.core.search.config import SearchConfig
from hub3.core.search.filters import ContextQueryFilter, QueryFilter, parse_query_filter
from hub3.core.search.request import (
    FacetBoolType,
    FacetField,
    ItemFormatType,
    ResponseFormatType,
    SearchRequest,
    TreeQuery,
    new_search_request,
)
from hub3.core.search.compiler import QueryCompiler
from hub3.core.search.facets import FacetLink, FacetURIBuilder, QueryFacet
from hub3.core.search.aggregations import AggregationCompiler, AggregationDecoder
from hub3.core.search.breadcrumbs import BreadCrumb, BreadCrumbBuilder, Query, new_user_query
from hub3.core.search.cursor import ScrollPager, decode_cursor, encode_cursor, next_scroll_id

__all__ = [
    "SearchConfig",
    # Filters
    "ContextQueryFilter",
    "QueryFilter",
    "parse_query_filter",
    # Request
    "FacetBoolType",
    "FacetField",
    "ItemFormatType",
    "ResponseFormatType",
    "SearchRequest",
    "TreeQuery",
    "new_search_request",
    # Compilers
    "QueryCompiler",
    "AggregationCompiler",
    "AggregationDecoder",
    # Navigation
    "FacetLink",
    "FacetURIBuilder",
    "QueryFacet",
    "BreadCrumb",
    "BreadCrumbBuilder",
    "Query",
    "new_user_query",
    # Cursor
    "ScrollPager",
    "decode_cursor",
    "encode_cursor",
    "next_scroll_id",
]

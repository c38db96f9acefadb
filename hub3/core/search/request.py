"""
Search request model and URL parameter parsing.

The SearchRequest holds all state of one search: free text, filters, facets,
paging, sorting, collapsing, output formats and tree navigation. It is built
from URL parameters, or decoded from a cursor token when the client is paging.
"""

import json
import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hub3.core.errors import ParseError
from hub3.core.search.config import SearchConfig
from hub3.core.search.filters import QueryFilter, parse_query_filter

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_SIZE = 16
MAX_RESPONSE_SIZE = 1000
PEEK_FACET_SIZE = 100

CURSOR_PARAMS = ("scrollID", "qs")


class ResponseFormatType(str, Enum):
    JSON = "json"
    PROTOBUF = "protobuf"
    LDJSON = "jsonld"
    BULKACTION = "bulkaction"


class ItemFormatType(str, Enum):
    SUMMARY = "summary"
    FRAGMENTGRAPH = "fragmentGraph"
    GROUPED = "grouped"
    JSONLD = "jsonld"
    FLAT = "flat"
    TREE = "tree"


class FacetBoolType(str, Enum):
    """
    How other active filters restrict a facet's counts.

    AND: every other field's filters apply, the facet's own filters do not.
    OR: no filters apply; counts reflect the unfiltered candidate set.
    """
    AND = "and"
    OR = "or"


class FacetField(BaseModel):
    """A requested facet."""

    model_config = ConfigDict(populate_by_name=True)

    field: str = ""
    name: str = ""
    size: int = 0
    by_name: bool = Field(False, alias="byName")
    by_id: bool = Field(False, alias="byId")
    asc: bool = False


class TreeQuery(BaseModel):
    """Navigation inside an archival hierarchy."""

    model_config = ConfigDict(populate_by_name=True)

    leaf: str = ""
    parent: str = ""
    child_count: str = Field("", alias="childCount")
    type: str = ""
    label: str = ""
    depth: List[str] = Field(default_factory=list)
    fill_tree: bool = Field(False, alias="fillTree")


class SearchRequest(BaseModel):
    """
    Complete state of a search.

    Also the wire schema of the cursor token, see hub3.core.search.cursor.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    query_filter: List[QueryFilter] = Field(default_factory=list, alias="queryFilter")
    facet_field: List[FacetField] = Field(default_factory=list, alias="facetField")
    facet_bool_type: FacetBoolType = Field(FacetBoolType.AND, alias="facetBoolType")
    response_size: int = Field(DEFAULT_RESPONSE_SIZE, alias="responseSize", ge=1, le=MAX_RESPONSE_SIZE)
    start: int = 0
    sort_by: str = Field("", alias="sortBy")
    sort_asc: bool = Field(False, alias="sortAsc")
    random_seed: str = Field("", alias="randomSeed")
    collapse_on: str = Field("", alias="collapseOn")
    collapse_sort: str = Field("", alias="collapseSort")
    collapse_size: int = Field(0, alias="collapseSize")
    peek: str = ""
    response_format: ResponseFormatType = Field(ResponseFormatType.JSON, alias="responseFormatType")
    item_format: ItemFormatType = Field(ItemFormatType.SUMMARY, alias="itemFormat")
    tree: Optional[TreeQuery] = None
    search_after: List[Any] = Field(default_factory=list, alias="searchAfter")
    paging: bool = False

    def add_query_filter(self, filter_string: str, exclude: bool = False) -> QueryFilter:
        """Parse a filter string and append it to the request."""
        qf = parse_query_filter(filter_string, exclude=exclude)
        self.query_filter.append(qf)
        return qf


def new_facet_field(raw: str, default_size: int) -> FacetField:
    """
    Parse a facet.field parameter.

    Either a bare field name or a JSON object such as
    {"field": "dc_subject", "size": 10, "byName": true, "asc": true}.
    """
    if not raw.startswith("{"):
        return FacetField(field=raw, name=raw, size=default_size)
    try:
        data = json.loads(raw)
        ff = FacetField.model_validate({"size": default_size, **data})
    except (ValueError, TypeError, ValidationError) as e:
        raise ParseError(
            f"Unable to unmarshal facetfield: {raw}",
            detail={"facet.field": raw},
            cause=e,
        )
    if not ff.name:
        ff.name = ff.field
    return ff


def _first(values: Sequence[str]) -> str:
    return values[0] if values else ""


def _to_int(param: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        logger.info(f"unable to convert {raw!r} to int for {param}")
        raise ParseError(
            f"unable to convert {raw!r} to int for {param}",
            detail={param: raw},
            cause=e,
        )


def new_search_request(params: Mapping[str, Sequence[str]], config: SearchConfig) -> SearchRequest:
    """
    Build a SearchRequest from URL parameters.

    Args:
        params: parameter name to list of values (as from urllib.parse.parse_qs)
        config: search configuration, supplies the default facet size

    Raises:
        ParseError: corrupt cursor token, malformed filter, facet or number
    """
    from hub3.core.search.cursor import decode_cursor

    for name in CURSOR_PARAMS:
        token = _first(params.get(name, []))
        if token:
            return decode_cursor(token)

    sr = SearchRequest()
    tree: Optional[TreeQuery] = None

    def tree_query() -> TreeQuery:
        nonlocal tree
        if tree is None:
            tree = TreeQuery()
            sr.tree = tree
        return tree

    for param, values in params.items():
        value = _first(values)
        if param in ("q", "query"):
            sr.query = value
        elif param in ("qf", "qf[]"):
            for qf in values:
                sr.add_query_filter(qf)
        elif param in ("qf.exclude", "qf.exclude[]"):
            for qf in values:
                sr.add_query_filter(qf, exclude=True)
        elif param == "facet.field":
            for ff in values:
                sr.facet_field.append(new_facet_field(ff, config.facet_size))
        elif param == "facetBoolType":
            if value:
                sr.facet_bool_type = FacetBoolType.OR if value.lower() == "or" else FacetBoolType.AND
        elif param == "format":
            sr.response_format = {
                "protobuf": ResponseFormatType.PROTOBUF,
                "jsonld": ResponseFormatType.LDJSON,
                "bulkaction": ResponseFormatType.BULKACTION,
            }.get(value, ResponseFormatType.JSON)
        elif param == "rows":
            rows = _to_int(param, value)
            if rows < 1:
                raise ParseError(f"rows must be at least 1, got {rows}", detail={param: value})
            sr.response_size = min(rows, MAX_RESPONSE_SIZE)
        elif param == "itemFormat":
            try:
                sr.item_format = ItemFormatType(value)
            except ValueError:
                sr.item_format = ItemFormatType.SUMMARY
        elif param == "sortBy":
            sr.sort_by = value
        elif param == "sortAsc":
            if value == "true":
                sr.sort_asc = True
        elif param == "sortOrder":
            if value == "asc":
                sr.sort_asc = True
        elif param == "collapseOn":
            sr.collapse_on = value
        elif param == "collapseSort":
            sr.collapse_sort = value
        elif param == "collapseSize":
            sr.collapse_size = _to_int(param, value)
        elif param == "peek":
            sr.peek = value
        elif param == "byLeaf":
            t = tree_query()
            t.leaf = value
            t.fill_tree = _first(params.get("fillTree", [])).lower() == "true"
        elif param == "byDepth":
            tree_query().depth = list(values)
        elif param == "byChildCount":
            tree_query().child_count = value
        elif param == "byParent":
            tree_query().parent = value
        elif param == "byType":
            tree_query().type = value
        elif param == "byLabel":
            tree_query().label = value

    # tree views return whole branches, not paged result lists
    if sr.tree is not None and sr.response_size != 1:
        sr.response_size = MAX_RESPONSE_SIZE

    return sr

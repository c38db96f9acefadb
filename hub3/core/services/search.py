"""
Search service - executes search requests against Elasticsearch.

Provides:
- Store request assembly (query, post filter, facets, sort, paging, collapse)
- Execution with a per-call timeout
- Decoding into facets, breadcrumbs, pager and items
- Echo: introspection of the compiled request
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from hub3.core.search.aggregations import AggregationCompiler, AggregationDecoder
from hub3.core.search.breadcrumbs import Query, new_user_query
from hub3.core.search.compiler import RANDOM_SORT, QueryCompiler
from hub3.core.search.config import HUB_ID_KEY, RESOURCE_ENTRIES_PATH, SearchConfig
from hub3.core.search.cursor import ScrollPager, next_scroll_id
from hub3.core.search.facets import FacetURIBuilder, QueryFacet
from hub3.core.search.request import PEEK_FACET_SIZE, FacetField, SearchRequest

logger = logging.getLogger(__name__)

DEFAULT_COLLAPSE_SIZE = 5

ECHO_OPTIONS = sorted([
    "es", "aggs", "searchRequest", "options", "searchService", "searchResponse", "request",
    "nextScrollID", "searchAfter",
])

# search body keys that the Python client takes under a different name
_CLIENT_KWARGS = {"from": "from_", "_source": "source"}


@dataclass
class SearchResult:
    """One page of search results."""
    pager: ScrollPager
    query: Query
    total: int = 0
    facets: List[QueryFacet] = field(default_factory=list)
    items: List[Dict[str, Any]] = field(default_factory=list)
    peek: Dict[str, int] = field(default_factory=dict)
    fill_tree: bool = False


class SearchService:
    """
    Faceted search over fragment graph documents.

    Usage:
        service = SearchService(Elasticsearch(url), config)
        sr = new_search_request(params, config)
        result = service.search(sr)

    The request is updated in place while searching (random seed, next page
    start, search_after); result.pager.scroll_id encodes the next page.
    """

    def __init__(self, client: Any, config: SearchConfig, request_timeout: Optional[float] = None):
        self.client = client
        self.config = config
        self.request_timeout = request_timeout
        self.compiler = QueryCompiler(config)
        self.aggregations = AggregationCompiler(self.compiler)
        self.decoder = AggregationDecoder()

    def sort(self, sr: SearchRequest) -> List[Dict[str, Any]]:
        """Sort clauses, always ending with the hubID tie-break."""
        order = "asc" if sr.sort_asc else "desc"
        if not sr.sort_by or sr.sort_by.startswith(RANDOM_SORT):
            field_sort = {"_score": {"order": "desc"}}
        elif sr.sort_by.startswith("tree."):
            field_sort = {sr.sort_by: {"order": "asc"}}
        else:
            field_sort = {
                f"{RESOURCE_ENTRIES_PATH}.@value.keyword": {
                    "order": order,
                    "nested": {
                        "path": RESOURCE_ENTRIES_PATH,
                        "filter": {"term": {f"{RESOURCE_ENTRIES_PATH}.searchLabel": sr.sort_by}},
                    },
                }
            }
        return [field_sort, {HUB_ID_KEY: {"order": "asc"}}]

    def build_search(self, sr: SearchRequest) -> Tuple[Dict[str, Any], Optional[FacetURIBuilder]]:
        """
        Assemble the search body.

        Returns the body and the FacetURIBuilder needed to decode the facets;
        the builder is None when no facets are requested from the store
        (peek and paging requests).

        Raises:
            NamespaceResolutionError: a filter's TypeClass cannot be resolved
        """
        query = self.compiler.compile(sr)
        body: Dict[str, Any] = {
            "query": query,
            "size": sr.response_size,
            "sort": self.sort(sr),
            "track_total_hits": True,
        }

        if sr.search_after and not sr.collapse_on:
            body["search_after"] = sr.search_after
        elif sr.start:
            body["from"] = sr.start

        if sr.collapse_on:
            inner_hits: Dict[str, Any] = {
                "name": "collapse",
                "size": sr.collapse_size or DEFAULT_COLLAPSE_SIZE,
            }
            if sr.collapse_sort:
                inner_hits["sort"] = [{sr.collapse_sort: {"order": "asc"}}]
            body["collapse"] = {
                "field": sr.collapse_on,
                "inner_hits": inner_hits,
                "max_concurrent_group_searches": 4,
            }
            body["_source"] = False

        fub = FacetURIBuilder(sr.query, sr.query_filter)

        if sr.peek:
            facet = FacetField(field=sr.peek, name=sr.peek, size=PEEK_FACET_SIZE)
            body["size"] = 0
            body["aggs"] = {
                sr.peek: self.aggregations.facet_aggregation(facet, sr.facet_bool_type, fub),
            }
            return body, None

        if sr.tree is not None:
            body["_source"] = {"includes": ["tree"]}

        body["post_filter"] = self.compiler.post_filter(sr)

        if sr.paging:
            return body, None

        aggs = self.aggregations.build(sr, fub)
        if aggs:
            body["aggs"] = aggs
        return body, fub

    def search(self, sr: SearchRequest, timeout: Optional[float] = None) -> SearchResult:
        """
        Execute the search and decode one page of results.

        Store errors are raised unchanged.

        Raises:
            NamespaceResolutionError: a filter's TypeClass cannot be resolved
            EncodingError: the next page cursor cannot be encoded
        """
        body, fub = self.build_search(sr)
        kwargs = {_CLIENT_KWARGS.get(k, k): v for k, v in body.items()}

        client = self.client
        request_timeout = timeout if timeout is not None else self.request_timeout
        if request_timeout is not None:
            client = client.options(request_timeout=request_timeout)

        logger.debug(f"Searching {self.config.index_name}: {body}")
        response = client.search(index=self.config.index_name, **kwargs)
        response = getattr(response, "body", response)

        hits = response.get("hits", {})
        total = _total_hits(hits)

        if sr.peek:
            return SearchResult(
                pager=ScrollPager(total=total),
                query=Query(terms=sr.query),
                total=total,
                peek=self._decode_peek(sr.peek, response.get("aggregations") or {}),
            )

        documents = hits.get("hits", [])
        if documents and not sr.collapse_on:
            sr.search_after = list(documents[-1].get("sort", []))

        pager = next_scroll_id(sr, total)
        query, _ = new_user_query(sr)

        facets: List[QueryFacet] = []
        if fub is not None:
            facets = self.decoder.decode(
                response.get("aggregations"),
                fub,
                total,
                order=[f.field for f in sr.facet_field],
            )

        return SearchResult(
            pager=pager,
            query=query,
            total=total,
            facets=facets,
            items=[_item(hit) for hit in documents],
            fill_tree=self.compiler.fills_tree(sr),
        )

    def _decode_peek(self, name: str, aggregations: Dict[str, Any]) -> Dict[str, int]:
        inner = aggregations.get(name, {}).get("filter", {}).get("inner", {})
        buckets = inner.get("value", {}).get("buckets", [])
        return {str(b["key"]): b.get("doc_count", 0) for b in buckets}

    def echo(self, sr: SearchRequest, echo_type: str) -> Any:
        """
        Introspection of how a request is compiled.

        Raises:
            ValueError: unknown echo type
        """
        if echo_type == "es":
            return self.compiler.compile(sr)
        if echo_type == "aggs":
            fub = FacetURIBuilder(sr.query, sr.query_filter)
            return self.aggregations.build(sr, fub)
        if echo_type == "searchRequest":
            return sr.model_dump(by_alias=True, mode="json")
        if echo_type == "options":
            return ECHO_OPTIONS
        if echo_type in ECHO_OPTIONS:
            return None
        raise ValueError(f"unknown echoType: {echo_type}")


def _total_hits(hits: Dict[str, Any]) -> int:
    total = hits.get("total", 0)
    if isinstance(total, dict):
        return total.get("value", 0)
    return total or 0


def _item(hit: Dict[str, Any]) -> Dict[str, Any]:
    item: Dict[str, Any] = {"id": hit.get("_id")}
    source = hit.get("_source")
    if source:
        item.update(source)
    inner = hit.get("inner_hits", {}).get("collapse")
    if inner:
        item["collapse"] = [
            {"id": h.get("_id"), **(h.get("_source") or {})}
            for h in inner.get("hits", {}).get("hits", [])
        ]
    return item

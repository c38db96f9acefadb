"""
Facet aggregations - compile requested facets and decode their results.

Each facet is a chain of four aggregations:

    <field>   filter  (other active filters, see FacetURIBuilder)
      filter  nested  (resources.entries)
        inner filter  (resources.entries.searchLabel == field)
          value terms (@value.keyword or @id)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from hub3.core.search import dsl
from hub3.core.search.compiler import QueryCompiler
from hub3.core.search.config import RESOURCE_ENTRIES_PATH
from hub3.core.search.facets import FacetLink, FacetURIBuilder, QueryFacet
from hub3.core.search.request import FacetBoolType, FacetField, SearchRequest

logger = logging.getLogger(__name__)


class AggregationCompiler:
    """Builds the aggregations for the facets of a request."""

    def __init__(self, compiler: QueryCompiler, path: str = RESOURCE_ENTRIES_PATH):
        self.compiler = compiler
        self.path = path

    def build(self, sr: SearchRequest, fub: FacetURIBuilder) -> Dict[str, dsl.Query]:
        """Aggregations keyed by facet field name."""
        return {
            facet.field: self.facet_aggregation(facet, sr.facet_bool_type, fub)
            for facet in sr.facet_field
        }

    def facet_aggregation(
        self,
        facet: FacetField,
        bool_type: FacetBoolType,
        fub: FacetURIBuilder,
    ) -> dsl.Query:
        """
        Aggregation for a single facet.

        Raises:
            NamespaceResolutionError: a sibling filter's TypeClass cannot be resolved
        """
        entry_key = "@id" if facet.by_id else "@value.keyword"
        order_key = "_key" if facet.by_name else "_count"

        terms = {
            "terms": {
                "field": f"{self.path}.{entry_key}",
                "size": facet.size,
                "order": {order_key: "asc" if facet.asc else "desc"},
            }
        }
        label_filter = {
            "filter": dsl.term(f"{self.path}.searchLabel", facet.field),
            "aggs": {"value": terms},
        }
        entries = {
            "nested": {"path": self.path},
            "aggs": {"inner": label_filter},
        }
        facet_filters = fub.create_facet_filter_query(facet.field, bool_type, self.compiler)
        return {
            "filter": facet_filters,
            "aggs": {"filter": entries},
        }


class AggregationDecoder:
    """Turns the aggregations of a search response into QueryFacets."""

    def decode(
        self,
        aggregations: Optional[Mapping[str, Any]],
        fub: FacetURIBuilder,
        total: int,
        order: Sequence[str] = (),
    ) -> List[QueryFacet]:
        """
        Decode facets in the requested order; unknown names follow.

        Facets whose result lacks part of the expected nesting are skipped.
        """
        if not aggregations or total == 0:
            return []

        names = [name for name in order if name in aggregations]
        names += [name for name in aggregations if name not in names]

        facets = []
        for name in names:
            facet = self.decode_facet(name, aggregations[name], fub)
            if facet is not None:
                facets.append(facet)
        return facets

    def decode_facet(
        self,
        name: str,
        result: Mapping[str, Any],
        fub: FacetURIBuilder,
    ) -> Optional[QueryFacet]:
        inner = _child(_child(result, "filter"), "inner")
        value = _child(inner, "value")
        if not value:
            logger.debug(f"skipping facet {name}: incomplete aggregation result")
            return None

        qf = QueryFacet(
            name=name,
            field=name,
            total=inner.get("doc_count", 0),
            other_docs=value.get("sum_other_doc_count", 0),
        )
        for bucket in value.get("buckets", []):
            key = str(bucket["key"])
            count = bucket.get("doc_count", 0)
            url, is_selected = fub.create_facet_filter_uri(qf.field, key)
            if is_selected:
                qf.is_selected = True
            qf.links.append(FacetLink(
                url=url,
                is_selected=is_selected,
                value=key,
                count=count,
                display_string=f"{key} ({count})",
            ))
        return qf


def _child(node: Any, key: str) -> Mapping[str, Any]:
    """node[key] when both are mappings, else an empty mapping."""
    if not isinstance(node, Mapping):
        return {}
    child = node.get(key)
    return child if isinstance(child, Mapping) else {}

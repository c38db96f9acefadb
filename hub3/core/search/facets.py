"""
Facet links - toggle URLs and selection state for facet values.

A FacetURIBuilder is created per request from the request's free text and
filters. It answers, for every facet bucket, which query string toggles the
value on or off and whether the value is currently selected.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from hub3.core.search import dsl
from hub3.core.search.compiler import QueryCompiler
from hub3.core.search.filters import QueryFilter
from hub3.core.search.request import FacetBoolType


@dataclass
class FacetLink:
    """One facet value."""
    url: str
    is_selected: bool
    value: str
    count: int
    display_string: str


@dataclass
class QueryFacet:
    """A facet with its values."""
    name: str
    field: str
    total: int = 0
    other_docs: int = 0
    is_selected: bool = False
    links: List[FacetLink] = field(default_factory=list)


class FacetURIBuilder:
    """
    Tracks the applied filters of a request by field and value.

    Not thread-safe; build one per request.
    """

    def __init__(self, query: str = "", filters: Iterable[QueryFilter] = ()):
        self.query = query
        # field -> (value, exclude) -> filter
        self.filters: Dict[str, Dict[Tuple[str, bool], QueryFilter]] = {}
        for qf in filters:
            self.add_filter(qf)

    def add_filter(self, qf: QueryFilter) -> None:
        self.filters.setdefault(qf.search_label, {})[(qf.value, qf.exclude)] = qf

    def has_query_filter(self, field_name: str, value: str, exclude: bool = False) -> bool:
        return (value, exclude) in self.filters.get(field_name, {})

    def create_facet_filter_uri(self, field_name: str, value: str) -> Tuple[str, bool]:
        """
        Query string that toggles field:value, and whether it is selected now.

        A selected value is left out of the query string (toggle off); an
        unselected value is appended (toggle on). Exclusions are kept as
        qf.exclude parameters and never count as selected.
        """
        params = []
        selected = False
        if self.query:
            params.append(f"q={self.query}")
        for f, values in self.filters.items():
            for v, exclude in values:
                if exclude:
                    params.append(f"qf.exclude={f}:{v}")
                    continue
                if f == field_name and v == value:
                    selected = True
                    continue
                params.append(f"qf={f}:{v}")
        if not selected:
            params.append(f"qf={field_name}:{value}")
        return "&".join(params), selected

    def create_facet_filter_query(
        self,
        field_name: str,
        bool_type: FacetBoolType,
        compiler: QueryCompiler,
    ) -> dsl.Query:
        """
        Filter restricting the counts of the facet on field_name.

        In AND mode the filters of every other field apply and the facet's
        own filters are ignored, so selecting a value never hides the other
        values of the same field. In OR mode no filters apply.

        Raises:
            NamespaceResolutionError: a filter's TypeClass cannot be resolved
        """
        if bool_type == FacetBoolType.OR:
            return dsl.match_all()
        q = dsl.BoolQuery()
        for f, values in self.filters.items():
            if f == field_name:
                continue
            for qf in values.values():
                clause = compiler.filter_clause(qf)
                if qf.exclude:
                    q.must_not.append(clause)
                else:
                    q.must.append(clause)
        if q.is_empty():
            return dsl.match_all()
        return q.to_dict()

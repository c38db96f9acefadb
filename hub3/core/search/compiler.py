"""
Query compiler - SearchRequest to Elasticsearch query.

Fragment graph documents carry their statements as nested resources:

    resources              (nested)
      types                URIs of the resource's classes
      entries              (nested) searchLabel, @value, @id
      context              (nested) SearchLabel, SubjectClass of ancestors

The compiler produces the main query (document type, tenant, free text,
random ordering and tree navigation) and the post filter built from the
request's query filters.
"""

import logging
import random
import string
from typing import Optional

from hub3.core.search import dsl
from hub3.core.search.config import (
    DOC_TYPE_KEY,
    FRAGMENT_GRAPH_DOC_TYPE,
    FULL_TEXT_FIELD,
    SearchConfig,
)
from hub3.core.search.filters import QueryFilter
from hub3.core.search.request import SearchRequest

logger = logging.getLogger(__name__)

SPEC_LABELS = frozenset({"spec", "delving_spec", "delving_spec.raw", "meta.spec"})
SPEC_QUERY_PREFIX = "meta.spec:"
RANDOM_SORT = "random"
SEED_LENGTH = 10

_SEED_ALPHABET = string.ascii_letters + string.digits


def random_seed(n: int = SEED_LENGTH) -> str:
    """Random alphanumeric string of length n."""
    return "".join(random.choices(_SEED_ALPHABET, k=n))


class QueryCompiler:
    """
    Compiles search requests for one deployment.

    Usage:
        compiler = QueryCompiler(config)
        query = compiler.compile(sr)
        post_filter = compiler.post_filter(sr)
    """

    def __init__(self, config: SearchConfig):
        self.config = config

    def compile(self, sr: SearchRequest) -> dsl.Query:
        """
        Build the main query.

        May update the request: a random sort records its seed. Everything
        else is read only, so a decoded cursor compiles to the same query.
        """
        query = dsl.BoolQuery()
        query.must.append(dsl.term(DOC_TYPE_KEY, FRAGMENT_GRAPH_DOC_TYPE))
        query.must.append(dsl.term(self.config.org_id_key, self.config.org_id))

        if sr.query:
            self._apply_free_text(query, sr.query)

        if sr.sort_by.startswith(RANDOM_SORT):
            seed = self.resolve_seed(sr)
            return dsl.random_score(query.to_dict(), seed)

        if sr.tree is not None and sr.tree.fill_tree:
            query.must.append(self._fill_tree_query(sr.tree.leaf))
        elif sr.tree is not None:
            self._apply_tree_filters(query, sr)

        return query.to_dict()

    def resolve_seed(self, sr: SearchRequest) -> str:
        """
        Return the random seed for the request, creating one on first use.

        The seed is kept in sr.random_seed and mirrored in sort_by as
        "random_<seed>" so that every page of a scroll uses the same order.
        """
        _, _, seed = sr.sort_by.partition("_")
        if not seed:
            seed = sr.random_seed or random_seed()
        sr.random_seed = seed
        sr.sort_by = f"{RANDOM_SORT}_{seed}"
        return seed

    def _apply_free_text(self, query: dsl.BoolQuery, text: str) -> None:
        raw = text.replace("delving_spec:", SPEC_QUERY_PREFIX)
        if SPEC_QUERY_PREFIX in raw:
            remaining = []
            for part in raw.split(" "):
                if part.startswith(SPEC_QUERY_PREFIX):
                    spec = part[len(SPEC_QUERY_PREFIX):]
                    query.must.append(dsl.term(self.config.spec_key, spec))
                    continue
                remaining.append(part)
            raw = " ".join(remaining).strip()

        if raw:
            query.must.append(
                dsl.query_string(raw, FULL_TEXT_FIELD, self.config.minimum_should_match)
            )

    def fills_tree(self, sr: SearchRequest) -> bool:
        """Whether the response holds whole branches: fill mode, or more than one depth."""
        if sr.tree is None:
            return False
        return sr.tree.fill_tree or len(sr.tree.depth) > 1

    def _fill_tree_query(self, leaf: str) -> dsl.Query:
        tree_query = dsl.BoolQuery()
        tree_query.should.append(dsl.match("tree.depth", 1))
        path: Optional[str] = None
        for segment in leaf.split("~"):
            path = segment if path is None else f"{path}~{segment}"
            tree_query.should.append(dsl.term("tree.leaf", path))
        return tree_query.to_dict()

    def _apply_tree_filters(self, query: dsl.BoolQuery, sr: SearchRequest) -> None:
        tree = sr.tree
        if tree.leaf:
            query.must.append(dsl.term("tree.leaf", tree.leaf))
        if tree.parent:
            query.must.append(dsl.term("tree.parent", tree.parent))
        if tree.child_count:
            query.must.append(dsl.match("tree.childCount", tree.child_count))
        if tree.label:
            query.must.append(
                dsl.match("tree.label", tree.label, self.config.minimum_should_match)
            )

        if len(tree.depth) == 1:
            query.must.append(dsl.match("tree.depth", tree.depth[0]))
        elif len(tree.depth) > 1:
            depths = dsl.BoolQuery()
            for depth in tree.depth:
                depths.should.append(dsl.match("tree.depth", depth))
            query.must.append(depths.to_dict())

        if tree.type:
            query.must.append(dsl.term("tree.type", tree.type))

    def filter_query(self, qf: QueryFilter) -> dsl.Query:
        """
        Translate a QueryFilter into a nested resource query.

        Only the nearest ancestor context (level2) is matched; level1 is
        carried in the request but not queried.

        Raises:
            NamespaceResolutionError: a TypeClass shorthand cannot be resolved
        """
        entries = dsl.BoolQuery(must=[
            dsl.term("resources.entries.searchLabel", qf.search_label),
            dsl.term("resources.entries.@value.keyword", qf.value),
        ])
        resource = dsl.BoolQuery(must=[dsl.nested("resources.entries", entries.to_dict())])

        if qf.type_class:
            uri = self.config.namespaces.type_class_as_uri(qf.type_class)
            resource.must.append(dsl.term("resources.types", uri))

        if qf.level2 is not None:
            context = dsl.BoolQuery()
            if qf.level2.type_class:
                uri = self.config.namespaces.type_class_as_uri(qf.level2.type_class)
                context.must.append(dsl.term("resources.context.SubjectClass", uri))
            context.must.append(dsl.term("resources.context.SearchLabel", qf.level2.search_label))
            resource.must.append(dsl.nested("resources.context", context.to_dict()))

        return dsl.nested("resources", resource.to_dict())

    def filter_clause(self, qf: QueryFilter) -> dsl.Query:
        """Query for a filter; dataset (spec) labels match the spec field directly."""
        if qf.search_label in SPEC_LABELS:
            return dsl.term(self.config.spec_key, qf.value)
        return self.filter_query(qf)

    def post_filter(self, sr: SearchRequest) -> dsl.Query:
        """
        Combine all query filters into the post filter.

        Applied after aggregations, so facet counts are not narrowed by it.
        """
        post_filter = dsl.BoolQuery()
        for qf in sr.query_filter:
            clause = self.filter_clause(qf)
            if qf.exclude:
                post_filter.must_not.append(clause)
            else:
                post_filter.must.append(clause)
        return post_filter.to_dict()

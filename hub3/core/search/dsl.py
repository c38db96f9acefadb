"""
Elasticsearch query DSL helpers.

Small builders that return the plain dict form the Elasticsearch client
accepts. Only the clauses the compiler uses are covered.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Query = Dict[str, Any]


def term(field_name: str, value: Any) -> Query:
    return {"term": {field_name: value}}


def match(field_name: str, value: Any, minimum_should_match: Optional[str] = None) -> Query:
    if minimum_should_match is None:
        return {"match": {field_name: value}}
    return {"match": {field_name: {"query": value, "minimum_should_match": minimum_should_match}}}


def query_string(text: str, default_field: str, minimum_should_match: str) -> Query:
    return {
        "query_string": {
            "query": text,
            "default_field": default_field,
            "minimum_should_match": minimum_should_match,
        }
    }


def nested(path: str, query: Query) -> Query:
    return {"nested": {"path": path, "query": query}}


def match_all() -> Query:
    return {"match_all": {}}


def random_score(query: Query, seed: str, seed_field: str = "_seq_no") -> Query:
    """Wrap a query so documents are scored in a seeded random order."""
    return {
        "function_score": {
            "query": query,
            "functions": [{"random_score": {"seed": seed, "field": seed_field}}],
        }
    }


@dataclass
class BoolQuery:
    """
    Boolean combination of clauses.

    Example:
        q = BoolQuery()
        q.must.append(term("meta.docType", "FragmentGraph"))
        q.should.append(match("tree.depth", 1))
        body = q.to_dict()
    """

    must: List[Query] = field(default_factory=list)
    should: List[Query] = field(default_factory=list)
    must_not: List[Query] = field(default_factory=list)
    minimum_should_match: Optional[int] = None

    def is_empty(self) -> bool:
        return not (self.must or self.should or self.must_not)

    def to_dict(self) -> Query:
        clauses: Dict[str, Any] = {}
        if self.must:
            clauses["must"] = [_as_dict(q) for q in self.must]
        if self.should:
            clauses["should"] = [_as_dict(q) for q in self.should]
        if self.must_not:
            clauses["must_not"] = [_as_dict(q) for q in self.must_not]
        if self.minimum_should_match is not None:
            clauses["minimum_should_match"] = self.minimum_should_match
        return {"bool": clauses}


def _as_dict(q: Any) -> Query:
    if isinstance(q, BoolQuery):
        return q.to_dict()
    return q

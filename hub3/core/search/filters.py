"""
Query filter model and the compact filter grammar.

A filter string selects documents whose nested resource entry has a given
search label and value, optionally restricted by the resource's type class
and by up to two ancestor contexts:

    [T1]L1[T2]L2[T]Label:Value

"[]" is shorthand for "[a]" and "a" is the type class wildcard.

Examples:
    spec:demo                       -> label "spec", value "demo"
    [rdf_type]title:Horizon         -> type class "rdf_type", label "title"
    [edm_Place]place[]name:Utrecht  -> level2 "place" (edm_Place), label "name"
"""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from hub3.core.errors import ParseError

WILDCARD_TYPE_CLASS = "a"

_TOKEN_SPLIT = re.compile(r"[\[\]]")


class ContextQueryFilter(BaseModel):
    """Ancestor context of a query filter."""

    model_config = ConfigDict(populate_by_name=True)

    search_label: str = Field("", alias="searchLabel")
    type_class: str = Field("", alias="typeClass")


class QueryFilter(BaseModel):
    """
    A single field:value restriction.

    level2 is the nearer ancestor context, level1 the further one; level1
    is only set together with level2.
    """

    model_config = ConfigDict(populate_by_name=True)

    search_label: str = Field("", alias="searchLabel")
    type_class: str = Field("", alias="typeClass")
    value: str = ""
    level1: Optional[ContextQueryFilter] = None
    level2: Optional[ContextQueryFilter] = None
    exclude: bool = False

    def as_string(self) -> str:
        """Serialize to the compact filter grammar (inverse of parse_query_filter)."""
        level1 = ""
        if self.level1 is not None:
            level1 = f"[{self.level1.type_class}]{self.level1.search_label}"
        level2 = ""
        if self.level2 is not None:
            level2 = f"[{self.level2.type_class}]{self.level2.search_label}"
        return f"{level1}{level2}[{self.type_class}]{self.search_label}:{self.value}"


def _type_class(token: str) -> str:
    if token == WILDCARD_TYPE_CLASS:
        return ""
    return token


def _context(label: str, type_class: str = "") -> ContextQueryFilter:
    return ContextQueryFilter(search_label=label, type_class=_type_class(type_class))


def parse_query_filter(filter_string: str, exclude: bool = False) -> QueryFilter:
    """
    Parse a filter string into a QueryFilter.

    Raises:
        ParseError: no ":" separator, or the field part holds no tokens or
            more than six tokens
    """
    head, sep, value = filter_string.partition(":")
    if not sep:
        raise ParseError(
            f"no query field specified in: {filter_string}",
            detail={"filter": filter_string},
        )

    head = head.replace("[]", f"[{WILDCARD_TYPE_CLASS}]")
    tokens: List[str] = [t for t in _TOKEN_SPLIT.split(head) if t]

    qf = QueryFilter(value=value, exclude=exclude)
    count = len(tokens)
    if count == 1:
        qf.search_label = tokens[0]
    elif count == 2:
        qf.type_class = _type_class(tokens[0])
        qf.search_label = tokens[1]
    elif count == 3:
        qf.level2 = _context(tokens[0])
        qf.type_class = _type_class(tokens[1])
        qf.search_label = tokens[2]
    elif count == 4:
        qf.level2 = _context(tokens[1], tokens[0])
        qf.type_class = _type_class(tokens[2])
        qf.search_label = tokens[3]
    elif count == 5:
        qf.level1 = _context(tokens[0])
        qf.level2 = _context(tokens[2], tokens[1])
        qf.type_class = _type_class(tokens[3])
        qf.search_label = tokens[4]
    elif count == 6:
        qf.level1 = _context(tokens[1], tokens[0])
        qf.level2 = _context(tokens[3], tokens[2])
        qf.type_class = _type_class(tokens[4])
        qf.search_label = tokens[5]
    else:
        raise ParseError(
            f"unable to parse query filter {filter_string}: expected 1 to 6 field tokens, got {count}",
            detail={"filter": filter_string, "tokens": count},
        )

    return qf

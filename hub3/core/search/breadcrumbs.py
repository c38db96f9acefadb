"""
Breadcrumbs - the trail of applied query steps.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from hub3.core.search.filters import QueryFilter
from hub3.core.search.request import SearchRequest


@dataclass
class BreadCrumb:
    """One step of the trail. href holds the query string up to and including this step."""
    display: str = ""
    href: str = ""
    field: str = ""
    value: str = ""
    is_last: bool = True


@dataclass
class Query:
    """The user's query: free text plus the breadcrumb trail."""
    terms: str = ""
    bread_crumbs: List[BreadCrumb] = field(default_factory=list)


class BreadCrumbBuilder:
    """Appends crumbs in application order. Build one per request."""

    def __init__(self):
        self.href_path: List[str] = []
        self.crumbs: List[BreadCrumb] = []

    def append_bread_crumb(self, param: str, qf: QueryFilter) -> None:
        """
        Add a crumb for a free text query ("query") or a filter ("qf[]").

        Excluded filters are linked as qf.exclude[] so the href replays them.
        """
        bc = BreadCrumb()
        if param == "query":
            if qf.value:
                bc.display = qf.value
                bc.href = f"q={qf.value}"
                bc.value = qf.value
                self.href_path.append(bc.href)
        elif param == "qf[]":
            qfs = f"{qf.search_label}:{qf.value}"
            key = "qf.exclude[]" if qf.exclude else "qf[]"
            href = f"{key}={qfs}"
            bc.href = href
            if self.get_path():
                bc.href = f"{self.get_path()}&{href}"
            self.href_path.append(href)
            bc.display = qfs
            bc.field = qf.search_label
            bc.value = qf.value

        last = self.get_last()
        if last is not None:
            last.is_last = False
        self.crumbs.append(bc)

    def get_path(self) -> str:
        return "&".join(self.href_path)

    def get_last(self) -> Optional[BreadCrumb]:
        if not self.crumbs:
            return None
        return self.crumbs[-1]


def new_user_query(sr: SearchRequest) -> Tuple[Query, BreadCrumbBuilder]:
    """Build the Query with its breadcrumbs: free text first, then filters in order."""
    q = Query()
    bcb = BreadCrumbBuilder()
    if sr.query:
        q.terms = sr.query
        bcb.append_bread_crumb("query", QueryFilter(value=sr.query))
    for qf in sr.query_filter:
        bcb.append_bread_crumb("qf[]", qf)
    q.bread_crumbs = bcb.crumbs
    return q, bcb

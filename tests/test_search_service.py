"""
Test request assembly and execution in the search service.
"""

import pytest

from conftest import FakeElasticsearch, facet_result, search_response
from hub3.core.search.cursor import decode_cursor
from hub3.core.search.request import FacetField, SearchRequest, TreeQuery
from hub3.core.services.search import ECHO_OPTIONS, SearchService

TIE_BREAK = {"meta.hubID": {"order": "asc"}}


@pytest.fixture
def service(search_config, fake_es):
    return SearchService(fake_es, search_config, request_timeout=5.0)


def test_build_search_defaults(service):
    """Test the body of a plain search."""
    body, fub = service.build_search(SearchRequest())
    assert body["size"] == 16
    assert body["track_total_hits"] is True
    assert body["sort"] == [{"_score": {"order": "desc"}}, TIE_BREAK]
    assert body["post_filter"] == {"bool": {}}
    assert "aggs" not in body
    assert "from" not in body
    assert fub is not None


def test_build_search_field_sort(service):
    """Test sorting on a search label."""
    body, _ = service.build_search(SearchRequest(sort_by="dc_title", sort_asc=True))
    field_sort = body["sort"][0]["resources.entries.@value.keyword"]
    assert field_sort["order"] == "asc"
    assert field_sort["nested"]["filter"] == {"term": {"resources.entries.searchLabel": "dc_title"}}
    assert body["sort"][1] == TIE_BREAK


def test_build_search_tree_sort(service):
    body, _ = service.build_search(SearchRequest(sort_by="tree.sortKey"))
    assert body["sort"] == [{"tree.sortKey": {"order": "asc"}}, TIE_BREAK]


def test_build_search_facets(service):
    """Test that requested facets become aggregations."""
    sr = SearchRequest(facet_field=[FacetField(field="dc_subject", size=10)])
    sr.add_query_filter("dc_subject:painting")
    body, fub = service.build_search(sr)
    assert set(body["aggs"]) == {"dc_subject"}
    assert fub.has_query_filter("dc_subject", "painting")
    assert body["post_filter"]["bool"]["must"][0]["nested"]["path"] == "resources"


def test_build_search_paging(service):
    """Test that paging requests skip the aggregations."""
    sr = SearchRequest(start=16, paging=True, facet_field=[FacetField(field="dc_subject")])
    body, fub = service.build_search(sr)
    assert body["from"] == 16
    assert "aggs" not in body
    assert fub is None


def test_build_search_after(service):
    sr = SearchRequest(start=16, search_after=[0.5, "hub3_demo_2"])
    body, _ = service.build_search(sr)
    assert body["search_after"] == [0.5, "hub3_demo_2"]
    assert "from" not in body


def test_build_search_collapse(service):
    """Test field collapsing with inner hits."""
    sr = SearchRequest(collapse_on="meta.spec", collapse_sort="meta.hubID", search_after=[1])
    body, _ = service.build_search(sr)
    assert body["collapse"]["field"] == "meta.spec"
    assert body["collapse"]["inner_hits"]["size"] == 5
    assert body["collapse"]["inner_hits"]["sort"] == [{"meta.hubID": {"order": "asc"}}]
    assert body["_source"] is False
    assert "search_after" not in body


def test_build_search_peek(service):
    """Test that peek only asks for one facet."""
    body, fub = service.build_search(SearchRequest(peek="dc_subject"))
    assert body["size"] == 0
    assert set(body["aggs"]) == {"dc_subject"}
    terms = body["aggs"]["dc_subject"]["aggs"]["filter"]["aggs"]["inner"]["aggs"]["value"]["terms"]
    assert terms["size"] == 100
    assert "post_filter" not in body
    assert fub is None


def test_build_search_tree(service):
    body, _ = service.build_search(SearchRequest(tree=TreeQuery(leaf="A")))
    assert body["_source"] == {"includes": ["tree"]}


def test_search(service, fake_es):
    """Test a full search round with facets and pager."""
    fake_es.response = search_response(
        total=25,
        aggregations={"dc_subject": facet_result([{"key": "painting", "doc_count": 20}])},
    )
    sr = SearchRequest(query="rembrandt", facet_field=[FacetField(field="dc_subject", size=10)])

    result = service.search(sr)

    call = fake_es.last
    assert call["index"] == "hub3v2"
    assert call["size"] == 16
    assert "aggs" in call
    assert fake_es.options_calls == [{"request_timeout": 5.0}]

    assert result.total == 25
    assert [item["id"] for item in result.items] == ["hub3_demo_1", "hub3_demo_2"]
    assert result.items[0]["meta"]["hubID"] == "hub3_demo_1"
    assert result.query.terms == "rembrandt"
    assert result.facets[0].links[0].value == "painting"

    assert result.pager.cursor == 0
    assert result.pager.rows == 16
    assert result.pager.scroll_id

    next_sr = decode_cursor(result.pager.scroll_id)
    assert next_sr.start == 16
    assert next_sr.search_after == [0.5, "hub3_demo_2"]
    assert next_sr.paging is True


def test_search_next_page(service, fake_es):
    """Test that a decoded cursor searches after the last hit without facets."""
    sr = SearchRequest(facet_field=[FacetField(field="dc_subject")])
    first = service.search(sr)

    service.search(decode_cursor(first.pager.scroll_id))

    call = fake_es.last
    assert call["search_after"] == [0.5, "hub3_demo_2"]
    assert "aggs" not in call
    assert "from_" not in call


def test_search_from_offset(service, fake_es):
    """Test that the "from" key is passed as the client's from_ argument."""
    service.search(SearchRequest(start=5, collapse_on="meta.spec"))
    assert fake_es.last["from_"] == 5
    assert fake_es.last["source"] is False


def test_search_call_timeout(search_config):
    """Test that a per call timeout overrides the default."""
    fake_es = FakeElasticsearch()
    service = SearchService(fake_es, search_config)
    service.search(SearchRequest())
    assert fake_es.options_calls == []
    service.search(SearchRequest(), timeout=1.5)
    assert fake_es.options_calls == [{"request_timeout": 1.5}]


def test_search_peek(service, fake_es):
    fake_es.response = search_response(
        total=7,
        hits=[],
        aggregations={"dc_subject": facet_result([
            {"key": "painting", "doc_count": 5},
            {"key": "drawing", "doc_count": 2},
        ])},
    )
    result = service.search(SearchRequest(peek="dc_subject"))
    assert result.peek == {"painting": 5, "drawing": 2}
    assert result.total == 7
    assert result.pager.scroll_id == ""


def test_search_without_hits(service, fake_es):
    fake_es.response = search_response(total=0, hits=[])
    result = service.search(SearchRequest())
    assert result.total == 0
    assert result.items == []
    assert result.pager.scroll_id == ""


def test_echo(service):
    """Test the echo types."""
    sr = SearchRequest(query="rembrandt", facet_field=[FacetField(field="dc_subject")])
    assert service.echo(sr, "es") == service.compiler.compile(sr)
    assert set(service.echo(sr, "aggs")) == {"dc_subject"}
    assert service.echo(sr, "searchRequest")["responseSize"] == 16
    assert service.echo(sr, "options") == ECHO_OPTIONS
    assert service.echo(sr, "nextScrollID") is None

    with pytest.raises(ValueError):
        service.echo(sr, "bogus")


def test_search_multiple_depths_fills_tree(service):
    """Test that a multi depth tree search renders in fill mode without changing the request."""
    sr = SearchRequest(tree=TreeQuery(depth=["1", "2"]))
    result = service.search(sr)
    assert result.fill_tree is True
    assert sr.tree.fill_tree is False
    assert decode_cursor(result.pager.scroll_id).tree.fill_tree is False

"""
Test search API endpoints.
"""

from conftest import facet_result, search_response


def test_search(client, fake_es):
    """Test a search returns pager, query, facets and items."""
    fake_es.response = search_response(
        total=25,
        aggregations={"tree.type": facet_result([
            {"key": "series", "doc_count": 20},
            {"key": "fonds", "doc_count": 5},
        ])},
    )
    response = client.get(
        "/api/search",
        params={"q": "rembrandt", "qf[]": "tree.type:series", "facet.field": "tree.type"},
    )
    assert response.status_code == 200
    data = response.json()

    assert data["pager"]["total"] == 25
    assert data["pager"]["cursor"] == 0
    assert data["pager"]["rows"] == 16
    assert data["pager"]["scroll_id"]

    assert data["query"]["terms"] == "rembrandt"
    assert [bc["href"] for bc in data["query"]["bread_crumbs"]] == [
        "q=rembrandt",
        "q=rembrandt&qf[]=tree.type:series",
    ]

    facet = data["facets"][0]
    assert facet["name"] == "tree.type"
    assert facet["is_selected"] is True
    assert facet["links"][0]["is_selected"] is True
    assert facet["links"][1]["url"] == "q=rembrandt&qf=tree.type:series&qf=tree.type:fonds"

    assert len(data["items"]) == 2
    assert data["peek"] is None

    call = fake_es.last
    assert call["index"] == "hub3v2"
    assert call["query"]["bool"]["must"][1] == {"term": {"meta.orgID": "hub3"}}


def test_search_scroll(client, fake_es):
    """Test that the returned scrollID fetches the next page."""
    first = client.get("/api/search", params={"rows": "10"}).json()

    response = client.get("/api/search", params={"scrollID": first["pager"]["scroll_id"]})
    assert response.status_code == 200
    data = response.json()
    assert data["pager"]["cursor"] == 10
    assert data["facets"] == []
    assert fake_es.last["search_after"] == [0.5, "hub3_demo_2"]


def test_search_bad_filter(client, fake_es):
    """Test that a malformed filter is a client error."""
    response = client.get("/api/search", params={"qf[]": "noseparator"})
    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "parse_error"
    assert data["context"] == {"filter": "noseparator"}
    assert fake_es.calls == []


def test_search_bad_rows(client):
    response = client.get("/api/search", params={"rows": "many"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "parse_error"


def test_search_zero_rows(client, fake_es):
    response = client.get("/api/search", params={"rows": "0"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "parse_error"
    assert fake_es.calls == []


def test_search_bad_scroll_id(client):
    response = client.get("/api/search", params={"scrollID": "zz"})
    assert response.status_code == 400
    assert response.json()["detail"] == "invalid scrollID"


def test_search_unknown_namespace(client, fake_es):
    """Test that an unknown TypeClass prefix is rejected before searching."""
    response = client.get("/api/search", params={"qf[]": "[foo_bar]title:x"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "namespace_unresolved"
    assert fake_es.calls == []


def test_search_echo(client, fake_es):
    """Test echo returns the compiled query without searching."""
    response = client.get("/api/search", params={"q": "rembrandt", "echo": "es"})
    assert response.status_code == 200
    data = response.json()
    assert data["echo"] == "es"
    assert data["value"]["bool"]["must"][2]["query_string"]["query"] == "rembrandt"
    assert fake_es.calls == []


def test_search_echo_search_request(client):
    response = client.get("/api/search", params={"rows": "5", "echo": "searchRequest"})
    assert response.status_code == 200
    assert response.json()["value"]["responseSize"] == 5


def test_search_echo_unknown(client):
    response = client.get("/api/search", params={"echo": "bogus"})
    assert response.status_code == 400


def test_search_peek(client, fake_es):
    fake_es.response = search_response(
        total=3,
        hits=[],
        aggregations={"dc_subject": facet_result([{"key": "painting", "doc_count": 3}])},
    )
    response = client.get("/api/search", params={"peek": "dc_subject"})
    assert response.status_code == 200
    assert response.json()["peek"] == {"painting": 3}

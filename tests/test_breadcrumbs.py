"""
Test breadcrumb trails.
"""

from hub3.core.search.breadcrumbs import new_user_query
from hub3.core.search.request import SearchRequest


def test_breadcrumbs_in_order():
    """Test free text first, then filters, each crumb carrying the path so far."""
    sr = SearchRequest(query="rembrandt")
    sr.add_query_filter("dc_subject:painting")
    sr.add_query_filter("[rdf_type]dc_creator:Rembrandt")

    query, bcb = new_user_query(sr)

    assert query.terms == "rembrandt"
    first, second, third = query.bread_crumbs

    assert first.display == "rembrandt"
    assert first.href == "q=rembrandt"
    assert first.is_last is False

    assert second.display == "dc_subject:painting"
    assert second.href == "q=rembrandt&qf[]=dc_subject:painting"
    assert second.field == "dc_subject"
    assert second.value == "painting"
    assert second.is_last is False

    assert third.href == "q=rembrandt&qf[]=dc_subject:painting&qf[]=dc_creator:Rembrandt"
    assert third.is_last is True

    assert bcb.get_last() is third
    assert bcb.get_path() == "q=rembrandt&qf[]=dc_subject:painting&qf[]=dc_creator:Rembrandt"


def test_breadcrumbs_filters_only():
    sr = SearchRequest()
    sr.add_query_filter("spec:demo")
    query, _ = new_user_query(sr)
    assert query.terms == ""
    assert len(query.bread_crumbs) == 1
    assert query.bread_crumbs[0].href == "qf[]=spec:demo"
    assert query.bread_crumbs[0].is_last is True


def test_no_breadcrumbs():
    query, bcb = new_user_query(SearchRequest())
    assert query.bread_crumbs == []
    assert bcb.get_last() is None


def test_breadcrumbs_keep_exclusions():
    """Test that an excluded filter is linked as an exclusion."""
    sr = SearchRequest()
    sr.add_query_filter("spec:demo")
    sr.add_query_filter("dc_subject:painting", exclude=True)
    query, _ = new_user_query(sr)
    assert query.bread_crumbs[1].href == "qf[]=spec:demo&qf.exclude[]=dc_subject:painting"

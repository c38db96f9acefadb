"""
Pytest configuration and fixtures.
"""

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Set test environment - file based SQLite for tests
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ORG_ID"] = "hub3"
os.environ["INDEX_NAME"] = "hub3v2"

from hub3.core.config import get_settings
from hub3.core.models.base import Base
from hub3.core.database import get_db
from hub3.core.namespace import NamespaceRegistry
from hub3.core.search.config import SearchConfig
from hub3.api.dependencies import get_namespace_registry, get_search_client
from hub3.api.main import create_app

# Import all models to register them with Base.metadata
from hub3.core.models.namespace import NameSpace

# Test database setup - synchronous SQLite for tests
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def search_response(total=25, hits=None, aggregations=None):
    """A search response in the shape Elasticsearch returns it."""
    if hits is None:
        hits = [
            {"_id": "hub3_demo_1", "_source": {"meta": {"hubID": "hub3_demo_1"}}, "sort": [1.0, "hub3_demo_1"]},
            {"_id": "hub3_demo_2", "_source": {"meta": {"hubID": "hub3_demo_2"}}, "sort": [0.5, "hub3_demo_2"]},
        ]
    response = {
        "took": 3,
        "hits": {"total": {"value": total, "relation": "eq"}, "hits": hits},
    }
    if aggregations is not None:
        response["aggregations"] = aggregations
    return response


def facet_result(buckets, doc_count=None, other=0):
    """Aggregation result for one facet."""
    if doc_count is None:
        doc_count = sum(b["doc_count"] for b in buckets)
    return {
        "doc_count": doc_count,
        "filter": {
            "doc_count": doc_count,
            "inner": {
                "doc_count": doc_count,
                "value": {"sum_other_doc_count": other, "buckets": buckets},
            },
        },
    }


class FakeElasticsearch:
    """Records search calls and answers with a canned response."""

    def __init__(self, response=None):
        self.response = response if response is not None else search_response()
        self.calls = []
        self.options_calls = []

    def options(self, **kwargs):
        self.options_calls.append(kwargs)
        return self

    def search(self, **kwargs):
        self.calls.append(kwargs)
        return self.response

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def registry():
    """A fresh namespace registry with the default namespaces."""
    return NamespaceRegistry(get_settings().default_namespaces)


@pytest.fixture
def search_config(registry):
    """Search configuration for tenant hub3."""
    return SearchConfig(org_id="hub3", namespaces=registry)


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture(scope="session")
def db_engine():
    """Create test database engine."""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    # Clean up test database file
    if os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for each test."""
    connection = db_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session, registry, fake_es):
    """Create test client with database, registry and Elasticsearch overrides."""
    app = create_app()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_namespace_registry] = lambda: registry
    app.dependency_overrides[get_search_client] = lambda: fake_es

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()

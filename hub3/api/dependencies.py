"""
FastAPI dependencies.

Provides dependency injection for:
- Database sessions
- Configuration
- The shared namespace registry
- Elasticsearch client and search service
"""

from functools import lru_cache

from elasticsearch import Elasticsearch
from fastapi import Depends

from hub3.core.config import get_settings, Settings
from hub3.core.database import get_db  # noqa: F401
from hub3.core.namespace import NamespaceRegistry
from hub3.core.search.config import SearchConfig
from hub3.core.services.search import SearchService


def get_settings_dep() -> Settings:
    """Settings dependency."""
    return get_settings()


@lru_cache
def get_namespace_registry() -> NamespaceRegistry:
    """
    The process wide namespace registry.

    Starts with the default namespaces; the app lifespan loads the stored
    ones on top.
    """
    return NamespaceRegistry(get_settings().default_namespaces)


@lru_cache
def get_search_client() -> Elasticsearch:
    """Shared Elasticsearch client (thread-safe, pooled connections)."""
    return Elasticsearch(get_settings().elasticsearch_url)


def get_search_config(
    settings: Settings = Depends(get_settings_dep),
    registry: NamespaceRegistry = Depends(get_namespace_registry),
) -> SearchConfig:
    return SearchConfig.from_settings(settings, registry)


def get_search_service(
    client: Elasticsearch = Depends(get_search_client),
    config: SearchConfig = Depends(get_search_config),
    settings: Settings = Depends(get_settings_dep),
) -> SearchService:
    """A search service for the current request."""
    return SearchService(client, config, request_timeout=settings.request_timeout)

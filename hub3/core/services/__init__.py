"""
Services module - shared business logic.

Provides:
- NamespaceService: namespace persistence
- SearchService: faceted search against Elasticsearch
"""

from hub3.core.services.namespace import NamespaceService
from hub3.core.services.search import SearchService, SearchResult

__all__ = [
    "NamespaceService",
    "SearchService",
    "SearchResult",
]

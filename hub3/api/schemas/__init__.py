"""
API schemas - Pydantic models for request/response validation.
"""

from hub3.api.schemas.common import ErrorResponse, MessageResponse
from hub3.api.schemas.namespace import NamespaceResponse, NamespaceUpdate
from hub3.api.schemas.search import (
    BreadCrumbResponse,
    EchoResponse,
    FacetLinkResponse,
    QueryFacetResponse,
    QueryResponse,
    ScrollPagerResponse,
    SearchResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    # Namespace
    "NamespaceResponse",
    "NamespaceUpdate",
    # Search
    "BreadCrumbResponse",
    "EchoResponse",
    "FacetLinkResponse",
    "QueryFacetResponse",
    "QueryResponse",
    "ScrollPagerResponse",
    "SearchResponse",
]

"""
Search error types.

All request problems are raised before the document store is called:
- ParseError: malformed filter string, bad parameter or corrupt cursor token
- NamespaceResolutionError: unknown or malformed TypeClass prefix
- EncodingError: the search request could not be serialized to a cursor

Errors from the Elasticsearch client are not wrapped; they reach the caller
as raised by the client.
"""

from typing import Any, Dict, Optional


class SearchError(Exception):
    """Base class for all search errors."""

    default_code = "search_error"

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = self.default_code
        self.detail: Dict[str, Any] = detail or {}
        if cause is not None:
            self.__cause__ = cause


class ParseError(SearchError):
    """Raised when client input cannot be parsed."""

    default_code = "parse_error"


class NamespaceResolutionError(SearchError):
    """Raised when a TypeClass shorthand cannot be resolved to a URI."""

    default_code = "namespace_unresolved"


class EncodingError(SearchError):
    """Raised when a search request cannot be encoded as a cursor token."""

    default_code = "encoding_error"

"""
API routes.
"""

from hub3.api.routes import health, namespaces, search

__all__ = ["health", "namespaces", "search"]

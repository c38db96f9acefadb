"""
API module - FastAPI application.

Provides REST API for:
- Faceted search with cursor based paging
- Namespace registry management
"""

from hub3.api.main import create_app, app

__all__ = ["create_app", "app"]

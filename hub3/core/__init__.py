"""
Core module - search functionality independent of the HTTP layer.

Provides:
- Configuration management
- Database connection and session handling (namespace registry)
- Search compiler, facets and cursor protocol
- Services
"""

from hub3.core.config import Settings, get_settings
from hub3.core.database import get_db, init_db, engine

__all__ = [
    "Settings",
    "get_settings",
    "get_db",
    "init_db",
    "engine",
]

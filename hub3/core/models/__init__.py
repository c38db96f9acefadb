"""
Core models - database models for the search service.
"""

from hub3.core.models.base import Base, TimestampMixin
from hub3.core.models.namespace import NameSpace

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Models
    "NameSpace",
]

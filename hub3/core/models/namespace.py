"""
NameSpace model - a prefix to base URI mapping.

TypeClass shorthands in query filters (e.g. "edm_ProvidedCHO") are resolved
through these rows.
"""

from sqlalchemy import Column, Integer, String, Text

from hub3.core.models.base import Base, TimestampMixin


class NameSpace(Base, TimestampMixin):
    """Persisted namespace prefix."""

    __tablename__ = "namespaces"

    id = Column(Integer, primary_key=True, autoincrement=True)

    prefix = Column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Short prefix used in TypeClass shorthands",
    )
    base = Column(
        Text,
        nullable=False,
        comment="Base URI the prefix expands to",
    )

    def __repr__(self):
        return f"<NameSpace {self.prefix}={self.base}>"

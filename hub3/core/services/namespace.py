"""
Namespace service - persistence of namespace prefixes.

Usage:
    with get_db_session() as db:
        NamespaceService(db).load(registry)
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hub3.core.models.namespace import NameSpace
from hub3.core.namespace import Namespace, NamespaceRegistry

logger = logging.getLogger(__name__)


class NamespaceService:
    """
    Database persistence for namespaces.

    Every write is mirrored into the registry passed to the service so that
    running requests see the change immediately.
    """

    def __init__(self, db: Session, registry: Optional[NamespaceRegistry] = None):
        self.db = db
        self.registry = registry

    def list_namespaces(self) -> List[Namespace]:
        rows = self.db.scalars(select(NameSpace).order_by(NameSpace.prefix)).all()
        return [Namespace(prefix=row.prefix, base=row.base) for row in rows]

    def add(self, prefix: str, base: str) -> Namespace:
        """Create or update a namespace."""
        row = self.db.scalar(select(NameSpace).where(NameSpace.prefix == prefix))
        if row is None:
            row = NameSpace(prefix=prefix, base=base)
            self.db.add(row)
        else:
            row.base = base
        self.db.commit()

        ns = Namespace(prefix=prefix, base=base)
        if self.registry is not None:
            self.registry.set(ns)
        logger.info(f"Stored namespace {prefix} -> {base}")
        return ns

    def remove(self, prefix: str) -> bool:
        """Delete a namespace. Returns False if it did not exist."""
        row = self.db.scalar(select(NameSpace).where(NameSpace.prefix == prefix))
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()

        if self.registry is not None:
            self.registry.delete(prefix)
        logger.info(f"Removed namespace {prefix}")
        return True

    def seed(self, namespaces: Dict[str, str]) -> int:
        """Insert namespaces whose prefix is not stored yet. Returns the number added."""
        existing = {ns.prefix for ns in self.list_namespaces()}
        added = 0
        for prefix, base in namespaces.items():
            if prefix in existing:
                continue
            self.db.add(NameSpace(prefix=prefix, base=base))
            added += 1
        if added:
            self.db.commit()
        return added

    def load(self, registry: NamespaceRegistry) -> int:
        """Copy all stored namespaces into the registry."""
        namespaces = self.list_namespaces()
        for ns in namespaces:
            registry.set(ns)
        logger.info(f"Loaded {len(namespaces)} namespaces into registry")
        return len(namespaces)

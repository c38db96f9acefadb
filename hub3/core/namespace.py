"""
Namespace registry - prefix to base URI lookups.

The registry is shared by all requests; TypeClass shorthands in query
filters are resolved through it.

Usage:
    registry = NamespaceRegistry({"dc": "http://purl.org/dc/elements/1.1/"})
    registry.type_class_as_uri("dc_title")  # http://purl.org/dc/elements/1.1/title
"""

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from hub3.core.errors import NamespaceResolutionError


@dataclass(frozen=True)
class Namespace:
    """A prefix and the base URI it expands to."""
    prefix: str
    base: str


class NamespaceRegistry:
    """
    Read-mostly namespace lookup table.

    Lookups happen on every filter with a TypeClass; updates only come from
    the admin routes and the CLI. A single re-entrant lock keeps the two
    indexes (by prefix and by base) consistent.
    """

    def __init__(self, namespaces: Optional[Dict[str, str]] = None):
        self._lock = threading.RLock()
        self._by_prefix: Dict[str, Namespace] = {}
        self._by_base: Dict[str, Namespace] = {}
        for prefix, base in (namespaces or {}).items():
            self.set(Namespace(prefix=prefix, base=base))

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_prefix)

    def set(self, ns: Namespace) -> None:
        """Add or replace the namespace for ns.prefix."""
        with self._lock:
            self._remove(ns.prefix)
            self._by_prefix[ns.prefix] = ns
            self._by_base[ns.base] = ns

    def delete(self, prefix: str) -> bool:
        """Remove a namespace. Returns False if the prefix was unknown."""
        with self._lock:
            return self._remove(prefix)

    def _remove(self, prefix: str) -> bool:
        old = self._by_prefix.pop(prefix, None)
        if old is None:
            return False
        if self._by_base.get(old.base) is old:
            del self._by_base[old.base]
        return True

    def get_with_prefix(self, prefix: str) -> Optional[Namespace]:
        with self._lock:
            return self._by_prefix.get(prefix)

    def get_with_base(self, base: str) -> Optional[Namespace]:
        with self._lock:
            return self._by_base.get(base)

    def get_base_uri(self, prefix: str) -> Optional[str]:
        ns = self.get_with_prefix(prefix)
        return ns.base if ns else None

    def all(self) -> List[Namespace]:
        """All namespaces sorted by prefix."""
        with self._lock:
            return sorted(self._by_prefix.values(), key=lambda ns: ns.prefix)

    def type_class_as_uri(self, type_class: str) -> str:
        """
        Resolve a "prefix_label" shorthand to a fully qualified URI.

        Raises:
            NamespaceResolutionError: shorthand has no "_" or prefix is unknown
        """
        prefix, sep, label = type_class.partition("_")
        if not sep:
            raise NamespaceResolutionError(
                f"TypeClass is defined in the wrong shorthand; got {type_class}",
                detail={"type_class": type_class},
            )
        base = self.get_base_uri(prefix)
        if base is None:
            raise NamespaceResolutionError(
                f"namespace for prefix {prefix} is unknown",
                detail={"type_class": type_class, "prefix": prefix},
            )
        if base.endswith("#") or base.endswith("/"):
            return f"{base}{label}"
        return f"{base}/{label}"

"""
Search configuration passed explicitly into the compilers.
"""

from dataclasses import dataclass, field

from hub3.core.config import Settings
from hub3.core.namespace import NamespaceRegistry

FRAGMENT_GRAPH_DOC_TYPE = "FragmentGraph"
DOC_TYPE_KEY = "meta.docType"
HUB_ID_KEY = "meta.hubID"
FULL_TEXT_FIELD = "full_text"
RESOURCE_ENTRIES_PATH = "resources.entries"


@dataclass(frozen=True)
class SearchConfig:
    """
    Everything the query compiler needs to know about the deployment.

    Attributes:
        org_id: Tenant identifier every query is scoped to
        org_id_key: Document field holding the tenant identifier
        spec_key: Document field holding the dataset (spec) identifier
        index_name: Elasticsearch index to search
        facet_size: Default number of buckets per facet
        minimum_should_match: Elasticsearch minimum_should_match expression
        namespaces: Registry used to resolve TypeClass shorthands
    """
    org_id: str
    org_id_key: str = "meta.orgID"
    spec_key: str = "meta.spec"
    index_name: str = "hub3v2"
    facet_size: int = 50
    minimum_should_match: str = "2<70%"
    namespaces: NamespaceRegistry = field(default_factory=NamespaceRegistry)

    @classmethod
    def from_settings(cls, settings: Settings, namespaces: NamespaceRegistry) -> "SearchConfig":
        return cls(
            org_id=settings.org_id,
            org_id_key=settings.org_id_key,
            spec_key=settings.spec_key,
            index_name=settings.index_name,
            facet_size=settings.facet_size,
            minimum_should_match=settings.minimum_should_match,
            namespaces=namespaces,
        )

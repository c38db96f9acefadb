"""
hub3 search - faceted metadata search for archival and heritage collections.

Provides:
- Compact filter grammar and search request model
- Elasticsearch query and aggregation compiler
- Facet, breadcrumb and cursor (scrollID) reconstruction
- FastAPI service and CLI
"""

__version__ = "0.1.0"

"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hub3 import __version__
from hub3.api.dependencies import get_db, get_namespace_registry, get_settings_dep
from hub3.core.config import Settings
from hub3.core.models.namespace import NameSpace
from hub3.core.namespace import NamespaceRegistry

router = APIRouter()


@router.get("/health")
def health_check():
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    registry: NamespaceRegistry = Depends(get_namespace_registry),
    settings: Settings = Depends(get_settings_dep),
):
    """
    Namespace store and registry state.

    Elasticsearch is not contacted; a slow cluster should not fail this check.
    """
    try:
        stored = db.scalar(select(func.count(NameSpace.id)))
        database = "healthy"
    except Exception as e:
        stored = None
        database = f"unhealthy: {e}"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "database": database,
        "stored_namespaces": stored,
        "namespaces": len(registry),
        "index_name": settings.index_name,
        "org_id": settings.org_id,
    }


@router.get("/")
def root():
    """Service description."""
    return {
        "name": "hub3 search API",
        "version": __version__,
        "search": "/api/search",
        "namespaces": "/api/namespaces",
        "docs": "/docs",
    }

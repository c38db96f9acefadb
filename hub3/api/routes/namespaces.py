"""
Namespace API routes.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hub3.api.dependencies import get_db, get_namespace_registry
from hub3.api.schemas.common import MessageResponse
from hub3.api.schemas.namespace import NamespaceResponse, NamespaceUpdate
from hub3.core.namespace import NamespaceRegistry
from hub3.core.services.namespace import NamespaceService

router = APIRouter()


@router.get("", response_model=List[NamespaceResponse])
def list_namespaces(registry: NamespaceRegistry = Depends(get_namespace_registry)):
    """List the namespaces used to resolve TypeClass shorthands."""
    return [NamespaceResponse.model_validate(ns) for ns in registry.all()]


@router.get("/{prefix}", response_model=NamespaceResponse)
def get_namespace(prefix: str, registry: NamespaceRegistry = Depends(get_namespace_registry)):
    ns = registry.get_with_prefix(prefix)
    if ns is None:
        raise HTTPException(status_code=404, detail=f"Namespace {prefix} not found")
    return NamespaceResponse.model_validate(ns)


@router.put("/{prefix}", response_model=NamespaceResponse)
def put_namespace(
    prefix: str,
    body: NamespaceUpdate,
    db: Session = Depends(get_db),
    registry: NamespaceRegistry = Depends(get_namespace_registry),
):
    """Create or update a namespace."""
    if "_" in prefix:
        raise HTTPException(status_code=400, detail="Namespace prefix may not contain '_'")
    ns = NamespaceService(db, registry).add(prefix, body.base)
    return NamespaceResponse.model_validate(ns)


@router.delete("/{prefix}", response_model=MessageResponse)
def delete_namespace(
    prefix: str,
    db: Session = Depends(get_db),
    registry: NamespaceRegistry = Depends(get_namespace_registry),
):
    """Delete a namespace."""
    if not NamespaceService(db, registry).remove(prefix):
        raise HTTPException(status_code=404, detail=f"Namespace {prefix} not found")
    return MessageResponse(message=f"Namespace {prefix} deleted")

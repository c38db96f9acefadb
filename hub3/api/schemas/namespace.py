"""
Namespace schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class NamespaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    prefix: str
    base: str


class NamespaceUpdate(BaseModel):
    """Body for creating or updating a namespace."""
    base: str = Field(..., min_length=1, description="Base URI the prefix expands to")

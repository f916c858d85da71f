"""
Pydantic schemas for stores.
"""
from pydantic import BaseModel, Field, ConfigDict


class StoreDefinition(BaseModel):
    """Hierarchical store definition consumed by the tree encoder."""
    name: str = Field(..., min_length=1, max_length=255)
    children: list["StoreDefinition"] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


StoreDefinition.model_rebuild()

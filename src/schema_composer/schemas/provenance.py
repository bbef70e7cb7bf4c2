"""Serialized form of a source's provenance record."""

from typing import List, Literal

from pydantic import BaseModel, Field


class ElementMappingModel(BaseModel):
    """One original element and the unified element it became.

    Features are identified as ``Class.feature``.
    """

    source: str = Field(..., description="Element of the source schema")
    target: str = Field(..., description="Element of the unified schema")


class ProvenanceModel(BaseModel):
    """Coverage of one source's schema by the unified schema."""

    source: str = Field(..., description="Source name")
    target: str = Field(..., description="Unified schema name")
    classes: List[ElementMappingModel] = Field(default_factory=list)
    attributes: List[ElementMappingModel] = Field(default_factory=list)
    references: List[ElementMappingModel] = Field(default_factory=list)

    def mappings(self, kind: Literal["classes", "attributes", "references"]) -> dict[str, str]:
        """Mappings of one kind as a source -> target dict."""
        return {m.source: m.target for m in getattr(self, kind)}

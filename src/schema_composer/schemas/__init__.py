"""Pydantic models for the files Schema Composer writes."""

from schema_composer.schemas.provenance import ElementMappingModel, ProvenanceModel
from schema_composer.schemas.unified import (
    AttributeModel,
    ClassModel,
    ReferenceModel,
    SourceSchemaModel,
    UnifiedSchemaModel,
)

__all__ = [
    "AttributeModel",
    "ClassModel",
    "ElementMappingModel",
    "ProvenanceModel",
    "ReferenceModel",
    "SourceSchemaModel",
    "UnifiedSchemaModel",
]

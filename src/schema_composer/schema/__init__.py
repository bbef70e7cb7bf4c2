"""Schema model, sources and discovery for Schema Composer.

Schemas describe the shape of JSON document collections as classes with
attributes and references. Each source gets its own schema, discovered from
its documents when it does not bring one.
"""

from schema_composer.schema.model import (
    PRIMITIVE_TYPES,
    STRING,
    UNBOUNDED,
    PerSourceSchema,
    SchemaAttribute,
    SchemaClass,
    SchemaFeature,
    SchemaReference,
    UnifiedSchema,
)
from schema_composer.schema.source import Source, SourceSet, load_source
from schema_composer.schema.discovery import class_name_for_key, discover_schema

__all__ = [
    # Model
    "PRIMITIVE_TYPES",
    "STRING",
    "UNBOUNDED",
    "PerSourceSchema",
    "SchemaAttribute",
    "SchemaClass",
    "SchemaFeature",
    "SchemaReference",
    "UnifiedSchema",
    # Sources
    "Source",
    "SourceSet",
    "load_source",
    # Discovery
    "class_name_for_key",
    "discover_schema",
]

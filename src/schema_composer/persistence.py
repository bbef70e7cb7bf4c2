"""Persistence sinks for unified schemas and provenance records.

Converts the in-memory model into the pydantic models of
``schema_composer.schemas`` and writes them as JSON or YAML. The format is
taken from the destination suffix (``.json``, ``.yaml``, ``.yml``) and falls
back to the configured default.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import BaseModel

from schema_composer.compose.provenance import ElementMapping, ProvenanceRecord
from schema_composer.config import OutputFormat
from schema_composer.file_utils import FileWriteError, write_file_atomic
from schema_composer.schema.model import (
    PerSourceSchema,
    SchemaAttribute,
    SchemaClass,
    SchemaReference,
    UnifiedSchema,
)
from schema_composer.schemas import (
    AttributeModel,
    ClassModel,
    ElementMappingModel,
    ProvenanceModel,
    ReferenceModel,
    SourceSchemaModel,
    UnifiedSchemaModel,
)


@dataclass
class SaveReport:
    """Outcome of writing one or more files. Failures are reported, not raised."""

    written: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


# --- Conversion ---


def class_to_model(schema_class: SchemaClass) -> ClassModel:
    features: list[AttributeModel | ReferenceModel] = []
    for feature in schema_class.features:
        if isinstance(feature, SchemaReference):
            target = feature.target_class
            features.append(
                ReferenceModel(
                    name=feature.name,
                    target=target.name if target is not None else str(feature.target),
                    lower_bound=feature.lower_bound,
                    upper_bound=feature.upper_bound,
                )
            )
        elif isinstance(feature, SchemaAttribute):
            features.append(
                AttributeModel(
                    name=feature.name,
                    type=feature.primitive_type,
                    lower_bound=feature.lower_bound,
                    upper_bound=feature.upper_bound,
                )
            )
    return ClassModel(name=schema_class.name, abstract=schema_class.is_abstract, features=features)


def unified_schema_to_model(
    schema: UnifiedSchema, sources: Optional[list[str]] = None
) -> UnifiedSchemaModel:
    return UnifiedSchemaModel(
        name=schema.name,
        ns_uri=schema.ns_uri,
        ns_prefix=schema.ns_prefix,
        classes=[class_to_model(c) for c in schema.classes],
        sources=sources,
    )


def source_schema_to_model(schema: PerSourceSchema) -> SourceSchemaModel:
    return SourceSchemaModel(name=schema.name, classes=[class_to_model(c) for c in schema.classes])


def _element_id(element, owner: SchemaClass | None) -> str:
    if isinstance(element, SchemaClass) or owner is None:
        return element.name
    return f"{owner.name}.{element.name}"


def _mapping_to_model(mapping: ElementMapping) -> ElementMappingModel:
    return ElementMappingModel(
        source=_element_id(mapping.source, mapping.owner),
        target=_element_id(mapping.target, mapping.target_owner),
    )


def provenance_to_model(record: ProvenanceRecord) -> ProvenanceModel:
    return ProvenanceModel(
        source=record.name,
        target=record.target_schema.name,
        classes=[_mapping_to_model(m) for m in record.of_kind("class")],
        attributes=[_mapping_to_model(m) for m in record.of_kind("attribute")],
        references=[_mapping_to_model(m) for m in record.of_kind("reference")],
    )


# --- Serialization ---


def resolve_format(path: Path, default: OutputFormat = "json") -> OutputFormat:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if suffix == ".json":
        return "json"
    return default


def dump_model(model: BaseModel, output_format: OutputFormat) -> str:
    data = model.model_dump(mode="json", exclude_none=True)
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_unified_schema(path: str | Path) -> UnifiedSchemaModel:
    """Read back a unified schema written by ``save_unified_schema``."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if resolve_format(path) == "yaml":
        return UnifiedSchemaModel.model_validate(yaml.safe_load(text))
    return UnifiedSchemaModel.model_validate_json(text)


def load_provenance(path: str | Path) -> ProvenanceModel:
    """Read back a provenance file written by ``save_provenance_record``."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if resolve_format(path) == "yaml":
        return ProvenanceModel.model_validate(yaml.safe_load(text))
    return ProvenanceModel.model_validate_json(text)


# --- Sinks ---


def save_unified_schema(
    schema: UnifiedSchema,
    path: str | Path,
    default_format: OutputFormat = "json",
    sources: Optional[list[str]] = None,
) -> Path:
    """Write a unified schema.

    Raises:
        FileWriteError: If the file cannot be written.
    """
    path = Path(path)
    output_format = resolve_format(path, default_format)
    write_file_atomic(path, dump_model(unified_schema_to_model(schema, sources), output_format))
    logger.info(f"Unified schema {schema.name} saved to {path}")
    return path


def save_provenance_record(
    record: ProvenanceRecord,
    path: str | Path,
    default_format: OutputFormat = "json",
) -> Path:
    """Write one source's provenance record.

    Raises:
        FileWriteError: If the file cannot be written.
    """
    path = Path(path)
    output_format = resolve_format(path, default_format)
    write_file_atomic(path, dump_model(provenance_to_model(record), output_format))
    logger.info(f"Provenance for source {record.name} saved to {path}")
    return path


__all__ = [
    "FileWriteError",
    "SaveReport",
    "dump_model",
    "load_provenance",
    "load_unified_schema",
    "provenance_to_model",
    "save_provenance_record",
    "save_unified_schema",
    "source_schema_to_model",
    "unified_schema_to_model",
]

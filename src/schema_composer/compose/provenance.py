"""Provenance tracking for schema composition.

For each source, records which element of the unified schema every element of
the source's schema was folded into. Records are lookup tables keyed by the
identity of the original element; unified elements never point back at the
elements they absorbed.

The reference resolver relies on class mappings to retarget references whose
target class was merged into a class registered under another name.
"""

from dataclasses import dataclass, field
from typing import Literal

from loguru import logger

from schema_composer.schema.model import (
    PerSourceSchema,
    SchemaAttribute,
    SchemaClass,
    SchemaFeature,
    SchemaReference,
    UnifiedSchema,
)

type MappingKind = Literal["class", "attribute", "reference"]


@dataclass(eq=False)
class ElementMapping:
    """One original element and the unified element it became."""

    kind: MappingKind
    source: SchemaClass | SchemaFeature
    target: SchemaClass | SchemaFeature
    owner: SchemaClass | None = None  # original class owning a mapped feature
    target_owner: SchemaClass | None = None  # unified class owning the target feature


@dataclass(eq=False)
class ProvenanceRecord:
    """Mappings from one source's schema into the unified schema."""

    name: str
    source_schema: PerSourceSchema
    target_schema: UnifiedSchema
    _by_source: dict[SchemaClass | SchemaFeature, ElementMapping] = field(
        default_factory=dict, repr=False
    )

    # --- Recording ---

    def _record(self, mapping: ElementMapping) -> ElementMapping:
        key = mapping.source
        if key in self._by_source:
            # Each original element maps exactly once; the latest decision wins
            logger.warning(
                f"Element {mapping.source.name} of source {self.name} mapped twice, "
                f"replacing {self._by_source[key].target.name} with {mapping.target.name}"
            )
        self._by_source[key] = mapping
        return mapping

    def map_class(self, original: SchemaClass, unified: SchemaClass) -> ElementMapping:
        return self._record(ElementMapping(kind="class", source=original, target=unified))

    def map_attribute(
        self,
        original: SchemaAttribute,
        unified: SchemaFeature,
        owner: SchemaClass | None = None,
        target_owner: SchemaClass | None = None,
    ) -> ElementMapping:
        return self._record(
            ElementMapping(
                kind="attribute",
                source=original,
                target=unified,
                owner=owner,
                target_owner=target_owner,
            )
        )

    def map_reference(
        self,
        original: SchemaReference,
        unified: SchemaFeature,
        owner: SchemaClass | None = None,
        target_owner: SchemaClass | None = None,
    ) -> ElementMapping:
        return self._record(
            ElementMapping(
                kind="reference",
                source=original,
                target=unified,
                owner=owner,
                target_owner=target_owner,
            )
        )

    # --- Lookup ---

    @property
    def mappings(self) -> list[ElementMapping]:
        """All mappings in recording order."""
        return list(self._by_source.values())

    def mapping_for(self, original: SchemaClass | SchemaFeature) -> ElementMapping | None:
        return self._by_source.get(original)

    def class_mapping_for(self, original: SchemaClass) -> SchemaClass | None:
        """The unified class an original class was folded into, if this record knows it."""
        mapping = self.mapping_for(original)
        if mapping is None or mapping.kind != "class":
            return None
        return mapping.target  # pyright: ignore[reportReturnType]

    def target_for(self, original: SchemaClass | SchemaFeature) -> SchemaClass | SchemaFeature | None:
        mapping = self.mapping_for(original)
        return mapping.target if mapping else None

    def of_kind(self, kind: MappingKind) -> list[ElementMapping]:
        return [m for m in self._by_source.values() if m.kind == kind]

    def unmapped_elements(self) -> list[SchemaClass | SchemaFeature]:
        """Elements of the source schema that have no mapping yet."""
        missing: list[SchemaClass | SchemaFeature] = []
        for schema_class in self.source_schema.classes:
            if self.mapping_for(schema_class) is None:
                missing.append(schema_class)
            missing.extend(f for f in schema_class.features if self.mapping_for(f) is None)
        return missing

    def __len__(self) -> int:
        return len(self._by_source)

"""Composition of per-source schemas into one unified schema.

The composer drives a single pass over every source, in order:

  1. Discover   -> sources without a schema get one from the discoverer
  2. Merge      -> each class is matched against the registry, then cloned
                   (new concept) or composed into its match
  3. Register   -> every registry entry becomes a class of the unified schema
  4. Resolve    -> deferred references are retargeted; the Unknown placeholder
                   joins the schema only when a reference needed it

Saving is separate from composing: the unified schema and the per-source
provenance records are written on demand.
"""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

from loguru import logger

from schema_composer.compose.context import CompositionContext
from schema_composer.compose.matcher import find_match
from schema_composer.compose.provenance import ProvenanceRecord
from schema_composer.compose.resolver import resolve_references
from schema_composer.compose.unifier import clone_class, compose_attributes, compose_references
from schema_composer.config import ComposerConfig, get_config
from schema_composer.errors import CompositionStateError, InvalidArgumentError
from schema_composer.file_utils import FileWriteError
from schema_composer.persistence import SaveReport, save_provenance_record, save_unified_schema
from schema_composer.schema.discovery import discover_schema
from schema_composer.schema.model import PerSourceSchema, UnifiedSchema
from schema_composer.schema.source import Source, SourceSet

# Given a source, returns the schema discovered from its documents
type DiscoverFn = Callable[[Source], PerSourceSchema]


class Composer:
    """Composes the schemas of every source of a source set.

    Args:
        source_set: The sources to compose, in composition order.
        config: Settings; defaults to the global configuration.
        discover: Discoverer used for sources arriving without a schema.

    Raises:
        InvalidArgumentError: If the source set is None or has no sources.
    """

    def __init__(
        self,
        source_set: Optional[SourceSet],
        config: Optional[ComposerConfig] = None,
        discover: DiscoverFn = discover_schema,
    ):
        if source_set is None:
            raise InvalidArgumentError("Source set cannot be None")
        if len(source_set.sources) == 0:
            raise InvalidArgumentError("At least 1 source is required to compose")

        self.source_set = source_set
        self.config = config or get_config()
        self.discover = discover
        self.context: Optional[CompositionContext] = None

    # --- Properties ---

    @property
    def provenance_records(self) -> list[ProvenanceRecord]:
        if self.context is None:
            return []
        return self.context.records

    @property
    def unified_schema(self) -> Optional[UnifiedSchema]:
        return self.source_set.composed_schema

    # --- Composition ---

    def _ensure_schemas(self) -> None:
        for source in self.source_set.sources:
            if source.schema is None:
                logger.debug(f"Source {source.name} has no schema, discovering it")
                source.schema = self.discover(source)

    def _new_unified_schema(self) -> UnifiedSchema:
        name = self.source_set.name
        return UnifiedSchema(
            name=name,
            ns_uri=f"{self.config.namespace_base_uri}{name}",
            ns_prefix=f"{self.config.namespace_prefix_stem}{name[:1]}",
        )

    def _new_context(self) -> CompositionContext:
        return CompositionContext(
            documents=self.source_set.raw_documents,
            class_matching_threshold=self.config.class_matching_threshold,
            root_class_suffix=self.config.root_class_suffix,
            unknown_class_name=self.config.unknown_class_name,
        )

    def _compose_source(
        self, source: Source, unified: UnifiedSchema, context: CompositionContext
    ) -> ProvenanceRecord:
        assert source.schema is not None
        record = ProvenanceRecord(name=source.name, source_schema=source.schema, target_schema=unified)

        for schema_class in source.schema.classes:
            match = find_match(
                schema_class,
                context.registry,
                threshold=context.class_matching_threshold,
                root_class_suffix=context.root_class_suffix,
            )

            # --- New concept ---
            # Trigger: nothing in the registry represents this class
            # Outcome: cloned and registered under its own name
            if match is None:
                logger.debug(f"{schema_class.name} class being duplicated")
                duplicated = context.register(clone_class(schema_class, record, context))
                context.clones[schema_class] = duplicated
                record.map_class(schema_class, duplicated)
                continue

            # --- Known concept ---
            # Trigger: a registered class matched by name or structure
            # Outcome: features folded into the match
            logger.debug(f"{schema_class.name} class being composed with {match.name}")
            record.map_class(schema_class, match)
            compose_attributes(match, schema_class, record, context)
            compose_references(match, schema_class, record, context)

        return record

    def compose(self) -> SourceSet:
        """Compose every source into a unified schema.

        Each call runs a fresh composition. The result is attached to the
        source set as its composed schema.

        Returns:
            The source set, with ``composed_schema`` set.
        """
        self._ensure_schemas()

        unified = self._new_unified_schema()
        context = self._new_context()
        self.context = context

        for source in self.source_set.sources:
            logger.debug(f"Analyzing source {source.name}")
            context.records.append(self._compose_source(source, unified, context))

        unified.classes.extend(context.registry.values())

        context.unknown_used = resolve_references(
            context.deferred_references,
            context.registry,
            context.records,
            context.unknown,
            clones=context.clones,
        )
        if context.unknown_used:
            # Keep class names unique even if a source declares its own Unknown
            if context.unknown.name in context.registry:
                context.register(context.unknown)
            unified.classes.append(context.unknown)

        self.source_set.composed_schema = unified
        logger.info(
            f"Composed {len(self.source_set.sources)} source(s) into {len(unified.classes)} "
            f"class(es) for {unified.name}"
            + (f", {context.unknown.name} placeholder used" if context.unknown_used else "")
        )
        return self.source_set

    # --- Saving ---

    def save(self, result_path: str | Path) -> SaveReport:
        """Write the composed schema.

        Write failures are logged and reported, never raised: the composition
        already in memory stays usable.

        Raises:
            CompositionStateError: If ``compose`` has not run.
        """
        schema = self.unified_schema
        if schema is None:
            raise CompositionStateError("Nothing to save, compose the sources first")

        path = Path(result_path)
        report = SaveReport()
        try:
            save_unified_schema(
                schema,
                path,
                default_format=self.config.output_format,
                sources=[s.name for s in self.source_set.sources],
            )
            report.written.append(path)
        except FileWriteError as e:
            logger.error(f"Could not save unified schema {schema.name}: {e}")
            report.failed[path] = str(e)
        return report

    def compose_to(self, result_path: str | Path) -> SourceSet:
        """Compose, then write the composed schema to ``result_path``."""
        source_set = self.compose()
        self.save(result_path)
        return source_set

    def save_provenance(self, result_paths: Sequence[str | Path]) -> SaveReport:
        """Write one provenance file per source, in source order.

        Files are written independently: a failure is reported and the
        remaining files are still written.

        Raises:
            CompositionStateError: If ``compose`` has not run.
            InvalidArgumentError: If the number of paths differs from the number
                of sources. Nothing is written in that case.
        """
        if self.context is None:
            raise CompositionStateError("No provenance to save, compose the sources first")

        records = self.context.records
        if len(result_paths) != len(records):
            raise InvalidArgumentError(
                f"The number of paths ({len(result_paths)}) must match "
                f"the number of provenance records ({len(records)})"
            )

        report = SaveReport()
        for record, result_path in zip(records, result_paths):
            path = Path(result_path)
            try:
                save_provenance_record(record, path, default_format=self.config.output_format)
                report.written.append(path)
            except FileWriteError as e:
                logger.error(f"Could not save provenance for source {record.name}: {e}")
                report.failed[path] = str(e)
        return report


def compose_sources(
    name: str,
    sources: Sequence[Source],
    config: Optional[ComposerConfig] = None,
) -> UnifiedSchema:
    """Compose ``sources`` into a unified schema called ``name``."""
    source_set = SourceSet(name=name, sources=list(sources))
    composer = Composer(source_set, config=config)
    composer.compose()
    assert source_set.composed_schema is not None
    return source_set.composed_schema

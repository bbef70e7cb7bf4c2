"""Per-run state of a composition.

Everything a composition run mutates lives on a single CompositionContext:
the registry of unified classes, the sampled value cache, the references
waiting for resolution, and the provenance records. A context is used for
exactly one run and then discarded.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from schema_composer.compose.provenance import ProvenanceRecord
from schema_composer.config import (
    DEFAULT_CLASS_MATCHING_THRESHOLD,
    DEFAULT_ROOT_CLASS_SUFFIX,
    DEFAULT_UNKNOWN_CLASS_NAME,
)
from schema_composer.schema.model import SchemaAttribute, SchemaClass, SchemaReference

# Given a source name, returns the raw JSON documents sampled for that source
type DocumentsFn = Callable[[str], list[Any]]


def _no_documents(source_name: str) -> list[Any]:
    return []


@dataclass
class CompositionContext:
    """Registry, value cache and deferred references for one composition run."""

    documents: DocumentsFn = _no_documents
    class_matching_threshold: float = DEFAULT_CLASS_MATCHING_THRESHOLD
    root_class_suffix: str = DEFAULT_ROOT_CLASS_SUFFIX
    unknown_class_name: str = DEFAULT_UNKNOWN_CLASS_NAME

    # Insertion-ordered: match selection depends on registration order
    registry: dict[str, SchemaClass] = field(default_factory=dict)
    value_cache: dict[SchemaAttribute, set[str]] = field(default_factory=dict)
    deferred_references: list[SchemaReference] = field(default_factory=list)
    # Source class -> the unified class cloned from it, under its registered name
    clones: dict[SchemaClass, SchemaClass] = field(default_factory=dict)
    records: list[ProvenanceRecord] = field(default_factory=list)

    unknown: SchemaClass = field(init=False)
    unknown_used: bool = False

    def __post_init__(self):
        self.unknown = SchemaClass(name=self.unknown_class_name)

    def register(self, unified: SchemaClass) -> SchemaClass:
        """Add a new unified class under a name not yet taken in the registry.

        Registry names never collide: a second class with a taken name gets
        a numeric suffix (``OrderInput`` -> ``OrderInput2``).
        """
        name = unified.name
        suffix = 2
        while name in self.registry:
            name = f"{unified.name}{suffix}"
            suffix += 1
        unified.name = name
        self.registry[name] = unified
        return unified

    def defer(self, reference: SchemaReference) -> None:
        self.deferred_references.append(reference)

"""Schema composition engine.

Merges the schemas of several sources into one unified schema, keeping track
of where every original element ended up.
"""

from schema_composer.compose.context import CompositionContext
from schema_composer.compose.provenance import ElementMapping, ProvenanceRecord
from schema_composer.compose.matcher import find_match, match_ratio
from schema_composer.compose.sampling import sample_values
from schema_composer.compose.unifier import (
    clone_class,
    compose_attributes,
    compose_references,
)
from schema_composer.compose.resolver import resolve_references
from schema_composer.compose.composer import Composer, compose_sources

__all__ = [
    # Context
    "CompositionContext",
    # Provenance
    "ElementMapping",
    "ProvenanceRecord",
    # Matcher
    "find_match",
    "match_ratio",
    # Sampling
    "sample_values",
    # Unifier
    "clone_class",
    "compose_attributes",
    "compose_references",
    # Resolver
    "resolve_references",
    # Driver
    "Composer",
    "compose_sources",
]

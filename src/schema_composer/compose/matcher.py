"""Class similarity matching.

Decides whether a class coming from a source represents a concept already
present in the registry of unified classes. Rules apply in order:

  1. Root wrapper classes (name ends with "Input") never match, in either
     direction
  2. A registered class with the identical name matches
  3. The first registered class sharing more than `threshold` of its
     feature names with the candidate matches
"""

from collections.abc import Mapping

from loguru import logger

from schema_composer.config import (
    DEFAULT_CLASS_MATCHING_THRESHOLD,
    DEFAULT_ROOT_CLASS_SUFFIX,
)
from schema_composer.schema.model import SchemaClass


def match_ratio(registered: SchemaClass, candidate: SchemaClass) -> float | None:
    """Share of the registered class's features whose name the candidate also has.

    Attributes and references are compared by name only. Returns None when the
    registered class has no features, since the ratio is undefined.
    """
    total = len(registered.features)
    if total == 0:
        return None
    candidate_names = set(candidate.feature_names)
    matching = sum(1 for f in registered.features if f.name in candidate_names)
    return matching / total


def find_match(
    candidate: SchemaClass,
    registry: Mapping[str, SchemaClass],
    threshold: float = DEFAULT_CLASS_MATCHING_THRESHOLD,
    root_class_suffix: str = DEFAULT_ROOT_CLASS_SUFFIX,
) -> SchemaClass | None:
    """Find the unified class representing the same concept as ``candidate``.

    Args:
        candidate: A class from a source schema.
        registry: Unified classes registered so far, in registration order.
        threshold: Ratio that must be strictly exceeded for a structural match.
        root_class_suffix: Name suffix marking root wrapper classes.

    Returns:
        The matching unified class, or None if the candidate is a new concept.
    """
    logger.debug(f"Looking for classes similar to {candidate.name}")

    # --- Root wrappers ---
    # Trigger: the class wraps a source's top-level documents
    # Outcome: always a new class, even when structurally close to another root
    if candidate.name.endswith(root_class_suffix):
        logger.debug(f"{candidate.name} is a root wrapper class, never matched")
        return None

    # --- Exact name ---
    registered = registry.get(candidate.name)
    if registered is not None:
        logger.debug(f"Found class with matching name {candidate.name}")
        return registered

    # --- Structural similarity ---
    for registered in registry.values():
        if registered.name.endswith(root_class_suffix):
            continue
        ratio = match_ratio(registered, candidate)
        if ratio is None:
            logger.trace(f"Class {registered.name} has no features, skipped")
            continue
        if ratio > threshold:
            logger.debug(f"Found similar class {registered.name} with ratio {ratio:.2f}")
            return registered
        logger.trace(f"Class {registered.name} not similar, ratio {ratio:.2f}")

    logger.debug(f"No class similar to {candidate.name}")
    return None

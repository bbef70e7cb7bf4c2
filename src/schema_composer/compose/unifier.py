"""Attribute and reference unification.

Folds the features of a source class into the unified schema. Two cases:

  Case                     -> Outcome
  -----------------------------------------------
  no matching class        -> clone_class: new unified class, every feature copied
  matching class E         -> compose_attributes / compose_references into E

Every reference created here still targets a class of its source schema; it
is deferred and retargeted by the resolver once every source is registered.
"""

from loguru import logger

from schema_composer.compose.context import CompositionContext
from schema_composer.compose.provenance import ProvenanceRecord
from schema_composer.compose.sampling import sample_values, values_intersect
from schema_composer.schema.model import (
    STRING,
    SchemaAttribute,
    SchemaClass,
    SchemaReference,
    duplicate_attribute,
    duplicate_reference,
)


def _sample(
    attribute: SchemaAttribute, owner_name: str, record: ProvenanceRecord, context: CompositionContext
) -> set[str]:
    # Unnamed attributes of hand-built schemas have no JSON key to sample
    if not attribute.name:
        return set()
    return sample_values(attribute.name, owner_name, record.name, context.documents(record.name))


# --- Case A: new class ---


def clone_class(
    other: SchemaClass,
    record: ProvenanceRecord,
    context: CompositionContext,
) -> SchemaClass:
    """Duplicate a source class and all of its features into a new unified class.

    Duplicated attributes are value-sampled and cached so later sources can
    detect same-concept attributes under different names. The clone is not
    registered here.
    """
    new_class = SchemaClass(name=other.name, is_abstract=other.is_abstract)

    for feature in other.features:
        if isinstance(feature, SchemaReference):
            logger.trace(f"Duplicating {feature.name} reference")
            duplicated = new_class.add_feature(duplicate_reference(feature))
            record.map_reference(feature, duplicated, owner=other, target_owner=new_class)
            context.defer(duplicated)
        else:
            logger.trace(f"Duplicating {feature.name} attribute")
            duplicated = new_class.add_feature(duplicate_attribute(feature))
            record.map_attribute(feature, duplicated, owner=other, target_owner=new_class)
            context.value_cache[duplicated] = _sample(duplicated, new_class.name, record, context)

    return new_class


# --- Case B: merge into an existing class ---


def find_similar_attribute(
    existing: SchemaClass,
    other_class: SchemaClass,
    attribute: SchemaAttribute,
    record: ProvenanceRecord,
    context: CompositionContext,
) -> SchemaAttribute | None:
    """Find an attribute of ``existing`` sharing sampled values with ``attribute``.

    Only attributes of the existing class that have cached values take part,
    checked in declaration order.
    """
    values = _sample(attribute, other_class.name, record, context)
    if not values:
        return None

    for candidate in existing.attributes:
        cached = context.value_cache.get(candidate)
        if cached and values_intersect(cached, values):
            return candidate
    return None


def compose_attributes(
    existing: SchemaClass,
    other: SchemaClass,
    record: ProvenanceRecord,
    context: CompositionContext,
) -> None:
    """Merge the attributes of ``other`` into the unified class ``existing``.

    Same-named attributes are widened to string, even when both declare the
    same type. Differently named attributes sharing values are aliased.
    Anything else is duplicated onto ``existing``.
    """
    for attribute in other.attributes:
        existing_feature = existing.get_feature(attribute.name)

        # --- Same name ---
        # Trigger: the unified class already has a feature with this name
        # Outcome: attribute widened to string, original linked to it
        if existing_feature is not None:
            if isinstance(existing_feature, SchemaAttribute):
                existing_feature.primitive_type = STRING
                logger.trace(f"Attribute {existing_feature.name} refined to string")
            record.map_attribute(attribute, existing_feature, owner=other, target_owner=existing)
            continue

        # --- Same values ---
        similar = find_similar_attribute(existing, other, attribute, record, context)
        if similar is not None:
            logger.debug(f"Attribute similar to {attribute.name} found: {similar.name}")
            record.map_attribute(attribute, similar, owner=other, target_owner=existing)
            continue

        # --- New attribute ---
        duplicated = existing.add_feature(duplicate_attribute(attribute))
        logger.trace(f"Attribute {duplicated.name} added to {existing.name}")
        record.map_attribute(attribute, duplicated, owner=other, target_owner=existing)


def compose_references(
    existing: SchemaClass,
    other: SchemaClass,
    record: ProvenanceRecord,
    context: CompositionContext,
) -> None:
    """Merge the references of ``other`` into the unified class ``existing``.

    A same-named feature already on ``existing`` wins and is left as is; the
    original reference is linked to it. New references are duplicated and
    deferred for resolution.
    """
    for reference in other.references:
        existing_feature = existing.get_feature(reference.name)
        if existing_feature is not None:
            record.map_reference(reference, existing_feature, owner=other, target_owner=existing)
            continue

        duplicated = existing.add_feature(duplicate_reference(reference))
        logger.trace(f"Reference {duplicated.name} added to {existing.name}")
        record.map_reference(reference, duplicated, owner=other, target_owner=existing)
        context.defer(duplicated)

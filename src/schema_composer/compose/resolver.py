"""Reference resolution for the unified schema.

After every source is registered, each deferred reference still targets a
class of its source schema. Resolution retargets it, in order:
  1. Registry    -> the class cloned from the target, else a unified class
                    registered under the target's name
  2. Provenance  -> the class the target was merged into (first source wins)
  3. Unknown     -> the shared placeholder class

Unresolved references are not errors: they surface as data, pointing at the
placeholder, so the unified schema is always complete.
"""

from collections.abc import Mapping, Sequence

from loguru import logger

from schema_composer.compose.provenance import ProvenanceRecord
from schema_composer.schema.model import SchemaClass, SchemaReference


def resolve_target(
    target: SchemaClass,
    registry: Mapping[str, SchemaClass],
    records: Sequence[ProvenanceRecord],
    clones: Mapping[SchemaClass, SchemaClass] | None = None,
) -> SchemaClass | None:
    """Find the unified class for a source class, or None when nothing knows it.

    A class registered under a suffixed name (``OrderInput2``) is only found
    through ``clones``; the name lookup would return its namesake.
    """
    if clones is not None and target in clones:
        return clones[target]

    registered = registry.get(target.name)
    if registered is not None:
        return registered

    for record in records:
        mapped = record.class_mapping_for(target)
        if mapped is not None:
            return mapped

    return None


def resolve_references(
    references: Sequence[SchemaReference],
    registry: Mapping[str, SchemaClass],
    records: Sequence[ProvenanceRecord],
    unknown: SchemaClass,
    clones: Mapping[SchemaClass, SchemaClass] | None = None,
) -> bool:
    """Retarget every reference to a unified class or to ``unknown``.

    Args:
        references: Deferred references collected while merging.
        registry: Final registry of unified classes.
        records: Provenance records in source order.
        unknown: Placeholder class for targets nothing could resolve.
        clones: Source classes mapped to the unified classes cloned from them.

    Returns:
        True if at least one reference was pointed at ``unknown``.
    """
    unknown_used = False

    for reference in references:
        target = reference.target_class
        if target is None:
            # Primitive-typed reference, nothing to resolve
            continue

        resolved = resolve_target(target, registry, records, clones)
        if resolved is None:
            reference.target = unknown
            unknown_used = True
            logger.debug(f"Reference {reference.name} with unknown type")
        else:
            reference.target = resolved
            logger.trace(f"Reference {reference.name} re-assigned to {resolved.name}")

    return unknown_used

"""Value sampling for attribute identity detection.

Two attributes with different names may still describe the same concept when
they hold the same values in the documents. Sampling collects the string
values an attribute takes in its source's raw documents:

  - Root class (class name == source name): keys of each top-level object
  - Other classes: keys of the nested objects whose key, singularized and
    capitalized, equals the class name ("authors" -> "Author")

Only one level of nesting is looked at. Deeper objects are not descended into.
"""

from typing import Any

from loguru import logger

from schema_composer.errors import InvalidArgumentError
from schema_composer.schema.discovery import class_name_for_key, top_level_objects


def _string_values(obj: dict, key: str) -> list[str]:
    value = obj.get(key)
    return [value] if isinstance(value, str) else []


def sample_values(
    attribute_name: str,
    owner_name: str,
    source_name: str,
    documents: list[Any],
) -> set[str]:
    """Collect the string values an attribute takes in a source's documents.

    Args:
        attribute_name: Name of the attribute (a JSON key).
        owner_name: Name of the class owning the attribute.
        source_name: Name of the source the documents belong to.
        documents: The source's raw documents. Empty means no values.

    Returns:
        The set of string values found. Numbers, booleans, null, arrays and
        objects are ignored.

    Raises:
        InvalidArgumentError: If the attribute or source name is missing or empty.
    """
    if not attribute_name:
        raise InvalidArgumentError("Attribute name cannot be empty")
    if not source_name:
        raise InvalidArgumentError("Source name cannot be empty")

    values: set[str] = set()
    elements = top_level_objects(documents)

    if owner_name == source_name:
        for element in elements:
            values.update(_string_values(element, attribute_name))
    else:
        for element in elements:
            for key, value in element.items():
                if not key or not isinstance(value, dict):
                    continue
                if class_name_for_key(key) == owner_name:
                    values.update(_string_values(value, attribute_name))

    logger.trace(
        f"Sampled {len(values)} value(s) for {owner_name}.{attribute_name} in {source_name}"
    )
    return values


def values_intersect(first: set[str], second: set[str]) -> bool:
    """Two attributes are the same concept when they share at least one value."""
    return not first.isdisjoint(second)

"""Schema discovery from raw JSON documents.

Builds the per-source schema that composition starts from. Every top-level
object of a source is an instance of a root class named after the source;
nested objects become classes of their own, named after the key that holds
them:

  JSON value                 -> Schema Element
  -----------------------------------------------
  "key": "text" | 1 | true   -> attribute key (string | integer | boolean)
  "key": [1, 2]              -> multi-valued attribute key
  "key": {...}               -> reference key to class Key
  "keys": [{...}, {...}]     -> multi-valued reference keys to class Key

Cardinality comes from frequency: a feature present in every instance of its
class is required (lower bound 1), otherwise optional (lower bound 0).
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from schema_composer.schema.model import (
    BOOLEAN,
    INTEGER,
    NUMBER,
    STRING,
    UNBOUNDED,
    PerSourceSchema,
    SchemaAttribute,
    SchemaClass,
    SchemaReference,
)

if TYPE_CHECKING:
    from schema_composer.schema.source import Source


# --- Naming convention ---


def class_name_for_key(key: str) -> str:
    """Derive a class name from a JSON key.

    Strips one trailing pluralizing ``s`` and capitalizes the first letter:
    ``"authors"`` -> ``"Author"``, ``"address"`` -> ``"Addres"``.
    """
    name = key[:-1] if key.endswith("s") else key
    return name[:1].upper() + name[1:]


def literal_type(value: Any) -> str:
    """Map a JSON literal to a primitive type name. Null maps to string."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, float):
        return NUMBER
    return STRING


def _merge_types(types: set[str]) -> str:
    if len(types) == 1:
        return next(iter(types))
    if types == {INTEGER, NUMBER}:
        return NUMBER
    return STRING


def top_level_objects(documents: list[Any]) -> list[dict]:
    """Every top-level JSON object, plus every object inside a top-level array."""
    elements: list[dict] = []
    for document in documents:
        if isinstance(document, dict):
            elements.append(document)
        elif isinstance(document, list):
            elements.extend(item for item in document if isinstance(item, dict))
    return elements


# --- Accumulation ---


@dataclass
class _FeatureStats:
    """What was observed for one key across the instances of a class."""

    name: str
    is_reference: bool = False
    is_many: bool = False
    types: set[str] = field(default_factory=set)
    target: str | None = None


@dataclass
class _ClassStats:
    name: str
    instances: int = 0
    features: dict[str, _FeatureStats] = field(default_factory=dict)  # insertion-ordered
    presence: Counter[str] = field(default_factory=Counter)


class _Discovery:
    def __init__(self):
        self.classes: dict[str, _ClassStats] = {}

    def visit(self, obj: dict, class_name: str) -> None:
        stats = self.classes.setdefault(class_name, _ClassStats(name=class_name))
        stats.instances += 1

        for key, value in obj.items():
            if not key:
                logger.debug(f"Skipping empty key in an instance of {class_name}")
                continue

            feature = stats.features.setdefault(key, _FeatureStats(name=key))
            stats.presence[key] += 1

            # --- Nested object ---
            # Trigger: the value is an object
            # Outcome: single-valued reference, nested object visited as its own class
            if isinstance(value, dict):
                feature.is_reference = True
                feature.target = class_name_for_key(key)
                self.visit(value, feature.target)
                continue

            # --- Arrays ---
            # Trigger: the value is a list
            # Outcome: objects inside make it a multi-valued reference, literals a
            # multi-valued attribute
            if isinstance(value, list):
                feature.is_many = True
                nested = [item for item in value if isinstance(item, dict)]
                if nested:
                    feature.is_reference = True
                    feature.target = class_name_for_key(key)
                    for item in nested:
                        self.visit(item, feature.target)
                else:
                    feature.types.update(literal_type(v) for v in value if v is not None)
                continue

            if value is not None:
                feature.types.add(literal_type(value))

    def build(self, schema_name: str) -> PerSourceSchema:
        classes = {name: SchemaClass(name=name) for name in self.classes}

        for name, stats in self.classes.items():
            schema_class = classes[name]
            for key, feature in stats.features.items():
                lower = 1 if stats.presence[key] == stats.instances else 0
                upper = UNBOUNDED if feature.is_many else 1

                # A key seen both as literal and as object is kept as a reference
                if feature.is_reference:
                    schema_class.add_feature(
                        SchemaReference(
                            name=key,
                            target=classes[feature.target],
                            lower_bound=lower,
                            upper_bound=upper,
                        )
                    )
                else:
                    schema_class.add_feature(
                        SchemaAttribute(
                            name=key,
                            primitive_type=_merge_types(feature.types or {STRING}),
                            lower_bound=lower,
                            upper_bound=upper,
                        )
                    )

        return PerSourceSchema(name=schema_name, classes=list(classes.values()))


# --- Main entry point ---


def discover_schema(source: "Source") -> PerSourceSchema:
    """Discover the schema of a source from its raw documents.

    Args:
        source: The source to analyze. Its ``schema`` attribute is not modified;
            use ``Source.discover`` to store the result.

    Returns:
        A PerSourceSchema whose first class is the root class named after the
        source. A source without documents yields a root class with no features.
    """
    discovery = _Discovery()
    discovery.classes[source.name] = _ClassStats(name=source.name)

    for element in top_level_objects(source.raw_documents):
        discovery.visit(element, source.name)

    schema = discovery.build(source.name)
    logger.debug(
        f"Discovered {len(schema.classes)} class(es) for source {source.name}: "
        f"{[c.name for c in schema.classes]}"
    )
    return schema

"""Schema data model for Schema Composer.

A schema is a set of class definitions describing the shape of a JSON
document collection. Classes own an ordered list of features; a feature is
either an attribute (a typed literal slot) or a reference to another class.

  Schema Element       -> Describes
  -----------------------------------------------
  SchemaClass          -> an object kind found in the documents
  SchemaAttribute      -> a key holding literal values
  SchemaReference      -> a key holding nested objects

Elements compare by identity, not by value. Two sources may declare classes
that look identical, and provenance tables need to tell them apart.
"""

from dataclasses import dataclass, field


# --- Primitive types ---
# Anything used as a reference target that is not a SchemaClass is a
# primitive type name from this set.

STRING = "string"
INTEGER = "integer"
NUMBER = "number"
BOOLEAN = "boolean"

PRIMITIVE_TYPES = frozenset({STRING, INTEGER, NUMBER, BOOLEAN})

UNBOUNDED = -1


# --- Data Model ---


@dataclass(eq=False)
class SchemaAttribute:
    """A feature holding literal values."""

    name: str
    primitive_type: str = STRING
    lower_bound: int = 0
    upper_bound: int = 1  # UNBOUNDED for multi-valued attributes

    @property
    def is_many(self) -> bool:
        return self.upper_bound == UNBOUNDED


@dataclass(eq=False)
class SchemaReference:
    """A feature pointing at another class.

    The target is mutable: composition retargets references from classes of
    the input schemas to classes of the unified schema.
    """

    name: str
    target: "SchemaClass | str"  # str only for primitive-typed references
    lower_bound: int = 0
    upper_bound: int = 1

    @property
    def is_many(self) -> bool:
        return self.upper_bound == UNBOUNDED

    @property
    def target_class(self) -> "SchemaClass | None":
        """The target when it is a class, None for primitive-typed references."""
        return self.target if isinstance(self.target, SchemaClass) else None


type SchemaFeature = SchemaAttribute | SchemaReference


@dataclass(eq=False)
class SchemaClass:
    """A class-like definition: a named, ordered collection of features."""

    name: str
    is_abstract: bool = False
    features: list[SchemaFeature] = field(default_factory=list)

    @property
    def attributes(self) -> list[SchemaAttribute]:
        return [f for f in self.features if isinstance(f, SchemaAttribute)]

    @property
    def references(self) -> list[SchemaReference]:
        return [f for f in self.features if isinstance(f, SchemaReference)]

    @property
    def feature_names(self) -> list[str]:
        return [f.name for f in self.features]

    def get_feature(self, name: str) -> SchemaFeature | None:
        """Return the first feature called ``name``, if any."""
        for feature in self.features:
            if feature.name == name:
                return feature
        return None

    def add_feature(self, feature: SchemaFeature) -> SchemaFeature:
        self.features.append(feature)
        return feature

    def __repr__(self) -> str:
        # Features may reference this class back; keep repr non-recursive
        return f"SchemaClass(name={self.name!r}, features={self.feature_names!r})"


@dataclass(eq=False)
class PerSourceSchema:
    """The schema discovered for a single source."""

    name: str
    classes: list[SchemaClass] = field(default_factory=list)

    def get_class(self, name: str) -> SchemaClass | None:
        for schema_class in self.classes:
            if schema_class.name == name:
                return schema_class
        return None


@dataclass(eq=False)
class UnifiedSchema:
    """The composed schema produced from every source of a source set."""

    name: str
    ns_uri: str
    ns_prefix: str
    classes: list[SchemaClass] = field(default_factory=list)

    @property
    def class_names(self) -> list[str]:
        return [c.name for c in self.classes]

    def get_class(self, name: str) -> SchemaClass | None:
        for schema_class in self.classes:
            if schema_class.name == name:
                return schema_class
        return None


# --- Duplication helpers ---


def duplicate_attribute(attribute: SchemaAttribute) -> SchemaAttribute:
    """Copy name, type and bounds into a fresh attribute."""
    return SchemaAttribute(
        name=attribute.name,
        primitive_type=attribute.primitive_type,
        lower_bound=attribute.lower_bound,
        upper_bound=attribute.upper_bound,
    )


def duplicate_reference(reference: SchemaReference) -> SchemaReference:
    """Copy name, target and bounds into a fresh reference.

    The copy still targets the original class; the resolver retargets it.
    """
    return SchemaReference(
        name=reference.name,
        target=reference.target,
        lower_bound=reference.lower_bound,
        upper_bound=reference.upper_bound,
    )

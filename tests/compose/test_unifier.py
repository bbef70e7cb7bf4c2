"""Tests for schema_composer.compose.unifier -- attribute and reference unification."""

from schema_composer.compose.context import CompositionContext
from schema_composer.compose.provenance import ProvenanceRecord
from schema_composer.compose.unifier import (
    clone_class,
    compose_attributes,
    compose_references,
    find_similar_attribute,
)
from schema_composer.schema.model import (
    BOOLEAN,
    INTEGER,
    STRING,
    UNBOUNDED,
    PerSourceSchema,
    SchemaAttribute,
    SchemaClass,
    SchemaReference,
    UnifiedSchema,
)


# --- Helpers ---


def _record(name: str, *classes: SchemaClass) -> ProvenanceRecord:
    return ProvenanceRecord(
        name=name,
        source_schema=PerSourceSchema(name=name, classes=list(classes)),
        target_schema=UnifiedSchema(name="composed", ns_uri="urn:composed", ns_prefix="c"),
    )


def _context(documents: dict[str, list] | None = None) -> CompositionContext:
    documents = documents or {}
    return CompositionContext(documents=lambda name: documents.get(name, []))


# --- Case A: clone ---


class TestCloneClass:
    def test_clone_copies_name_abstractness_and_features(self):
        author = SchemaClass(name="Author")
        book = SchemaClass(
            name="Book",
            is_abstract=True,
            features=[
                SchemaAttribute(name="title", primitive_type=STRING, lower_bound=1, upper_bound=1),
                SchemaAttribute(name="tags", primitive_type=STRING, upper_bound=UNBOUNDED),
                SchemaReference(name="authors", target=author, upper_bound=UNBOUNDED),
            ],
        )
        record = _record("books", book, author)
        context = _context()

        clone = clone_class(book, record, context)

        assert clone is not book
        assert clone.name == "Book"
        assert clone.is_abstract is True
        assert clone.feature_names == ["title", "tags", "authors"]
        assert clone.features[0].lower_bound == 1
        assert clone.features[1].upper_bound == UNBOUNDED
        # Target is settled later by the resolver
        assert clone.features[2].target is author

    def test_clone_records_provenance_for_every_feature(self):
        book = SchemaClass(
            name="Book",
            features=[SchemaAttribute(name="title"), SchemaReference(name="next", target="string")],
        )
        record = _record("books", book)
        clone = clone_class(book, record, _context())

        assert record.target_for(book.features[0]) is clone.features[0]
        assert record.target_for(book.features[1]) is clone.features[1]

    def test_clone_defers_references(self):
        book = SchemaClass(name="Book", features=[SchemaReference(name="next", target="string")])
        context = _context()
        clone = clone_class(book, _record("books", book), context)
        assert context.deferred_references == [clone.features[0]]

    def test_clone_caches_sampled_attribute_values(self):
        people = SchemaClass(name="people", features=[SchemaAttribute(name="name")])
        context = _context({"people": [{"name": "Ada"}, {"name": "Grace"}]})

        clone = clone_class(people, _record("people", people), context)

        assert context.value_cache[clone.features[0]] == {"Ada", "Grace"}

    def test_clone_does_not_register(self):
        context = _context()
        clone_class(SchemaClass(name="Book"), _record("books"), context)
        assert context.registry == {}


# --- Case B: attributes ---


class TestComposeAttributes:
    def test_new_attribute_duplicated(self):
        existing = SchemaClass(name="Person", features=[SchemaAttribute(name="name")])
        other = SchemaClass(name="Person", features=[SchemaAttribute(name="email", lower_bound=1)])
        record = _record("crm", other)

        compose_attributes(existing, other, record, _context())

        assert existing.feature_names == ["name", "email"]
        assert existing.features[1] is not other.features[0]
        assert existing.features[1].lower_bound == 1
        assert record.target_for(other.features[0]) is existing.features[1]

    def test_same_name_widened_to_string(self):
        existing = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=INTEGER)]
        )
        other = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=BOOLEAN)]
        )
        record = _record("crm", other)

        compose_attributes(existing, other, record, _context())

        assert existing.feature_names == ["age"]
        assert existing.features[0].primitive_type == STRING
        assert record.target_for(other.features[0]) is existing.features[0]

    def test_same_name_and_type_still_widened(self):
        existing = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=INTEGER)]
        )
        other = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=INTEGER)]
        )
        compose_attributes(existing, other, _record("crm", other), _context())
        assert existing.features[0].primitive_type == STRING

    def test_original_attribute_not_modified(self):
        existing = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=INTEGER)]
        )
        other = SchemaClass(
            name="Person", features=[SchemaAttribute(name="age", primitive_type=INTEGER)]
        )
        compose_attributes(existing, other, _record("crm", other), _context())
        assert other.features[0].primitive_type == INTEGER

    def test_same_name_reference_not_widened(self):
        target = SchemaClass(name="Company")
        existing = SchemaClass(
            name="Person", features=[SchemaReference(name="employer", target=target)]
        )
        other = SchemaClass(name="Person", features=[SchemaAttribute(name="employer")])
        record = _record("crm", other)

        compose_attributes(existing, other, record, _context())

        assert existing.features[0].target is target
        assert record.target_for(other.features[0]) is existing.features[0]

    def test_alias_by_shared_values(self):
        full_name = SchemaAttribute(name="fullName")
        existing = SchemaClass(name="people", features=[full_name])
        other = SchemaClass(name="staff", features=[SchemaAttribute(name="name")])
        context = _context({"staff": [{"name": "Ada"}]})
        context.value_cache[full_name] = {"Ada", "Grace"}
        record = _record("staff", other)

        compose_attributes(existing, other, record, context)

        assert existing.feature_names == ["fullName"]
        assert record.target_for(other.features[0]) is full_name

    def test_no_alias_without_shared_values(self):
        full_name = SchemaAttribute(name="fullName")
        existing = SchemaClass(name="people", features=[full_name])
        other = SchemaClass(name="staff", features=[SchemaAttribute(name="name")])
        context = _context({"staff": [{"name": "Linus"}]})
        context.value_cache[full_name] = {"Ada"}

        compose_attributes(existing, other, _record("staff", other), context)

        assert existing.feature_names == ["fullName", "name"]

    def test_references_ignored(self):
        existing = SchemaClass(name="Person")
        other = SchemaClass(name="Person", features=[SchemaReference(name="boss", target="string")])
        compose_attributes(existing, other, _record("crm", other), _context())
        assert existing.features == []


class TestFindSimilarAttribute:
    def test_only_attributes_of_existing_class_considered(self):
        elsewhere = SchemaAttribute(name="label")
        existing = SchemaClass(name="people", features=[SchemaAttribute(name="fullName")])
        other = SchemaClass(name="staff", features=[SchemaAttribute(name="name")])
        context = _context({"staff": [{"name": "Ada"}]})
        context.value_cache[elsewhere] = {"Ada"}

        found = find_similar_attribute(
            existing, other, other.features[0], _record("staff", other), context
        )
        assert found is None

    def test_first_matching_attribute_in_declaration_order(self):
        first = SchemaAttribute(name="first")
        second = SchemaAttribute(name="second")
        existing = SchemaClass(name="people", features=[first, second])
        other = SchemaClass(name="staff", features=[SchemaAttribute(name="name")])
        context = _context({"staff": [{"name": "Ada"}]})
        context.value_cache[second] = {"Ada"}
        context.value_cache[first] = {"Ada"}

        found = find_similar_attribute(
            existing, other, other.features[0], _record("staff", other), context
        )
        assert found is first


# --- Case B: references ---


class TestComposeReferences:
    def test_new_reference_duplicated_and_deferred(self):
        company = SchemaClass(name="Company")
        existing = SchemaClass(name="Person")
        other = SchemaClass(name="Person", features=[SchemaReference(name="employer", target=company)])
        record = _record("crm", other, company)
        context = _context()

        compose_references(existing, other, record, context)

        assert existing.feature_names == ["employer"]
        duplicated = existing.features[0]
        assert duplicated is not other.features[0]
        assert duplicated.target is company
        assert context.deferred_references == [duplicated]
        assert record.target_for(other.features[0]) is duplicated

    def test_existing_reference_wins(self):
        old_target = SchemaClass(name="Company")
        new_target = SchemaClass(name="Organization")
        kept = SchemaReference(name="employer", target=old_target, upper_bound=1)
        existing = SchemaClass(name="Person", features=[kept])
        other = SchemaClass(
            name="Person",
            features=[SchemaReference(name="employer", target=new_target, upper_bound=UNBOUNDED)],
        )
        record = _record("crm", other)
        context = _context()

        compose_references(existing, other, record, context)

        assert existing.features == [kept]
        assert kept.target is old_target
        assert kept.upper_bound == 1
        assert context.deferred_references == []
        assert record.target_for(other.features[0]) is kept

from hypergres.discovery import DiscoveryOptions, schema
from hypergres.discovery.schema import column_type, is_enum_constraint, is_read_only, is_required
from hypergres.models import Column


def test_read_only_and_enum():
    columns = [
        Column(name="id", type="integer", nullable=False, default="nextval('test_id_seq'::regclass)", is_primary_key=True),
        Column(name="name", type="text", nullable=False),
        Column(
            name="rating",
            type="text",
            nullable=True,
            constraints=("(rating = ANY (ARRAY['good'::text, 'average'::text, 'bad'::text]))",),
        ),
    ]

    document = schema("test", columns, DiscoveryOptions(strict_numbers=True))

    assert document["$schema"] == "http://json-schema.org/draft-04/schema#"
    assert document["title"] == "test"
    assert document["type"] == "object"
    assert document["properties"]["id"] == {"type": "number", "readOnly": True}
    assert document["properties"]["name"] == {"type": "string"}
    assert document["properties"]["rating"] == {"type": "string", "enum": ["good", "average", "bad"]}
    assert document["required"] == ["name"]


def test_enum_from_plain_literals():
    column = Column(
        name="quality",
        type="text",
        nullable=False,
        constraints=("(quality = ANY (ARRAY['good'::text, 'average'::text, 'bad'::text]))",),
    )

    assert is_enum_constraint(column) == {"enum": ["good", "average", "bad"]}


def test_enum_union_of_constraints_without_duplicates():
    column = Column(
        name="quality",
        type="text",
        nullable=True,
        constraints=(
            "(quality = ANY (ARRAY['good'::text, 'bad'::text]))",
            None,
            "(quality = ANY (ARRAY['bad'::text, 'ugly'::text]))",
        ),
    )

    assert is_enum_constraint(column) == {"enum": ["good", "bad", "ugly"]}


def test_other_constraints_are_not_enums():
    column = Column(name="age", type="integer", nullable=True, constraints=("(age > 0)",))

    assert is_enum_constraint(column) == {}


def test_numbers_are_strings_unless_strict():
    integer = Column(name="id", type="bigint", nullable=False)
    decimal = Column(name="price", type="numeric", nullable=False)

    assert column_type(integer) == {"oneOf": [{"type": "number"}, {"type": "string", "pattern": r"^\d+$"}]}
    assert column_type(decimal) == {"oneOf": [{"type": "number"}, {"type": "string", "pattern": r"^\d+(\.\d+)?$"}]}
    assert column_type(integer, DiscoveryOptions(strict_numbers=True)) == {"type": "number"}
    assert column_type(decimal, DiscoveryOptions(strict_numbers=True)) == {"type": "number"}


def test_base_types():
    assert column_type(Column("a", "boolean", True)) == {"type": "boolean"}
    assert column_type(Column("a", "jsonb", True)) == {"type": "object"}
    assert column_type(Column("a", "timestamp with time zone", True)) == {"type": "string", "format": "date-time"}
    assert column_type(Column("a", "tsvector", True)) == {}


def test_interval_documents_do_not_share_state():
    first = column_type(Column("a", "interval", True))
    first["properties"]["days"]["type"] = "string"

    second = column_type(Column("b", "interval", True))

    assert second["properties"]["days"] == {"type": "number"}
    assert second["additionalProperties"] is False


def test_read_only_requires_sequence_primary_key():
    assert is_read_only(Column("id", "integer", False, "nextval('s')", is_primary_key=False)) == {}
    assert is_read_only(Column("id", "integer", True, "nextval('s')", is_primary_key=True)) == {}
    assert is_read_only(Column("id", "integer", False, "42", is_primary_key=True)) == {}
    assert is_read_only(Column("id", "integer", False, "nextval('s')", is_primary_key=True)) == {"readOnly": True}


def test_read_only_and_required_are_independent():
    generated = Column("id", "integer", False, "nextval('s')", is_primary_key=True)
    natural = Column("code", "text", False, None, is_primary_key=True)

    assert is_read_only(generated) and not is_required(generated)
    assert not is_read_only(natural) and is_required(natural)


def test_required_skips_nullable_and_defaults():
    columns = [
        Column("a", "text", False),
        Column("b", "text", True),
        Column("c", "text", False, "'x'::text"),
    ]

    assert schema("t", columns)["required"] == ["a"]


def test_enum_without_spaces_between_literals():
    column = Column(
        name="rating",
        type="text",
        nullable=True,
        constraints=("(rating = ANY (ARRAY['good'::text,'average'::text,'bad'::text]))",),
    )

    assert is_enum_constraint(column) == {"enum": ["good", "average", "bad"]}
    assert is_enum_constraint(column) == is_enum_constraint(column)


def test_enum_literal_with_quote_and_comma():
    column = Column(
        name="label",
        type="text",
        nullable=True,
        constraints=("(label = ANY (ARRAY['it''s'::text, 'a, b'::text]))",),
    )

    assert is_enum_constraint(column) == {"enum": ["it's", "a, b"]}


def test_in_list_phrasing_is_not_an_enum():
    column = Column(name="rating", type="text", nullable=True, constraints=("rating IN ('good', 'bad')",))

    assert is_enum_constraint(column) == {}

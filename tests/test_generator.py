import pytest

from oasroute.dummy_value import dummy_value
from oasroute.generator import (
    FieldDef,
    TypeDefinition,
    collect_imports,
    extract_fields,
    is_named_type,
    process_schema_type,
)


@pytest.mark.parametrize(
    ("ty", "expected"),
    [
        ("Pet", True),
        ("pet", False),
        ("Vec<Pet>", False),
        ("serde_json::Value", False),
        ("", False),
        ("i32", False),
        ("String", True),
    ],
)
def test_is_named_type(ty, expected):
    assert is_named_type(ty) is expected


def test_extract_scalar_properties():
    schema = {
        "type": "object",
        "required": ["name"],
        "properties": {
            "name": {"type": "string"},
            "age": {"type": "integer"},
            "weight": {"type": "number"},
            "alive": {"type": "boolean"},
        },
    }
    fields = extract_fields(schema)
    by_name = {f.name: f for f in fields}
    assert by_name["name"].ty == "String"
    assert by_name["age"].ty == "i32"
    assert by_name["weight"].ty == "f64"
    assert by_name["alive"].ty == "bool"
    assert by_name["name"].optional is False
    assert all(by_name[n].optional for n in ("age", "weight", "alive"))
    assert all(f.value == dummy_value(f.ty) for f in fields)


def test_fields_are_ordered_by_name():
    schema = {"properties": {"zeta": {"type": "string"}, "alpha": {"type": "string"}}}
    names = [f.name for f in extract_fields(schema)]
    assert names == sorted(names)
    assert set(names) == {"zeta", "alpha"}


def test_array_of_refs_gives_items_field():
    schema = {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
    assert extract_fields(schema) == [
        FieldDef(name="items", ty="Vec<Pet>", optional=False, value="vec![]")
    ]


def test_array_of_inline_objects_uses_item_fields():
    items = {"type": "object", "properties": {"id": {"type": "string"}}}
    assert extract_fields({"type": "array", "items": items}) == extract_fields(items)


def test_array_without_items_reads_properties():
    schema = {"type": "array", "properties": {"id": {"type": "integer"}}}
    fields = extract_fields(schema)
    assert [(f.name, f.ty) for f in fields] == [("id", "i32")]


def test_property_refs_and_fallbacks():
    schema = {
        "properties": {
            "owner": {"$ref": "#/components/schemas/Owner"},
            "other": {"$ref": "other.yaml#/Thing"},
            "meta": {"type": "object"},
            "untyped": {},
            "tags": {"type": "array", "items": {"type": "string"}},
            "pets": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
            "list": {"type": "array"},
        }
    }
    by_name = {f.name: f for f in extract_fields(schema)}
    assert by_name["owner"].ty == "Owner"
    assert by_name["other"].ty == "serde_json::Value"
    assert by_name["meta"].ty == "serde_json::Value"
    assert by_name["untyped"].ty == "serde_json::Value"
    assert by_name["tags"].ty == "Vec<Value>"
    assert by_name["tags"].value == "vec![]"
    assert by_name["pets"].ty == "Vec<Pet>"
    assert by_name["pets"].value == "Default::default()"
    assert by_name["list"].ty == "Vec<Value>"


@pytest.mark.parametrize("schema", [None, "text", [], {}, {"type": "object"}])
def test_extract_fields_of_empty_or_invalid_schema(schema):
    assert extract_fields(schema) == []


def test_process_schema_type_records_ref():
    types = {}
    process_schema_type({"$ref": "#/components/schemas/Pet"}, types)
    assert list(types) == ["Pet"]
    assert types["Pet"].name == "Pet"
    assert types["Pet"].fields == []


def test_process_schema_type_keeps_existing_entry():
    existing = TypeDefinition(
        name="Pet", fields=[FieldDef("id", "String", False, dummy_value("String"))]
    )
    types = {"Pet": existing}
    process_schema_type({"$ref": "#/components/schemas/Pet"}, types)
    assert types["Pet"] is existing


@pytest.mark.parametrize(
    "schema",
    [{"type": "object"}, {"$ref": "other.yaml#/Pet"}, {"$ref": 3}, None],
)
def test_process_schema_type_ignores_non_refs(schema):
    types = {}
    process_schema_type(schema, types)
    assert types == {}


def test_collect_imports():
    fields = [
        FieldDef("pets", "Vec<Pet>", False, "vec![]"),
        FieldDef("owner", "Owner", True, "Default::default()"),
        FieldDef("again", "Pet", True, "Default::default()"),
        FieldDef("name", "String", False, dummy_value("String")),
        FieldDef("count", "i32", False, dummy_value("i32")),
        FieldDef("meta", "serde_json::Value", True, "Default::default()"),
    ]
    assert collect_imports(fields) == ["Owner", "Pet", "String"]


def test_collect_imports_of_extracted_fields_is_sorted_and_unique():
    schema = {
        "properties": {
            "b": {"$ref": "#/components/schemas/Zebra"},
            "a": {"type": "array", "items": {"$ref": "#/components/schemas/Ant"}},
            "c": {"$ref": "#/components/schemas/Ant"},
        }
    }
    imports = collect_imports(extract_fields(schema))
    assert imports == sorted(set(imports))
    assert imports == ["Ant", "Zebra"]
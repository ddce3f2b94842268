"""Extraction of field and type descriptions from JSON schemas for code stubs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, MutableMapping

from .dummy_value import DEFAULT_EXPRESSION, dummy_value
from .spec import SCHEMA_REF_PREFIX

VALUE_TYPE = "serde_json::Value"
VALUE_LIST_TYPE = "Vec<Value>"

_SCALAR_TYPES: dict[str, str] = {
    "string": "String",
    "integer": "i32",
    "number": "f64",
    "boolean": "bool",
}


@dataclass
class FieldDef:
    """One field of a generated request or response structure."""

    name: str
    ty: str
    optional: bool
    value: str


@dataclass
class TypeDefinition:
    """A named type collected from the spec's component schemas."""

    name: str
    fields: list[FieldDef] = field(default_factory=list)


@dataclass
class RegistryEntry:
    """A handler that the generated registry registers."""

    name: str


def _schema_ref_name(schema: Any) -> str | None:
    """Return the component name a ``$ref`` points at, if it is a schema ref."""
    if not isinstance(schema, Mapping):
        return None
    ref = schema.get("$ref")
    if isinstance(ref, str) and ref.startswith(SCHEMA_REF_PREFIX):
        return ref[len(SCHEMA_REF_PREFIX):]
    return None


def _vec_inner(ty: str) -> str | None:
    if ty.startswith("Vec<") and ty.endswith(">") and len(ty) >= len("Vec<>"):
        return ty[len("Vec<"):-1]
    return None


def is_named_type(ty: str) -> bool:
    """Tell whether ``ty`` names a user-defined type that needs importing."""
    return (
        bool(ty)
        and "A" <= ty[0] <= "Z"
        and not ty.startswith("Vec<")
        and "serde_json" not in ty
    )


def _property_type(prop: Any) -> str:
    if not isinstance(prop, Mapping):
        return VALUE_TYPE
    ref = prop.get("$ref")
    if isinstance(ref, str):
        name = _schema_ref_name(prop)
        return name if name is not None else VALUE_TYPE

    kind = prop.get("type")
    if not isinstance(kind, str):
        return VALUE_TYPE
    if kind in _SCALAR_TYPES:
        return _SCALAR_TYPES[kind]
    if kind == "array":
        item_name = _schema_ref_name(prop.get("items"))
        return f"Vec<{item_name}>" if item_name is not None else VALUE_LIST_TYPE
    return VALUE_TYPE


def extract_fields(schema: Any) -> list[FieldDef]:
    """Describe the fields of ``schema`` in the order of their property names."""
    if not isinstance(schema, Mapping):
        return []

    if schema.get("type") == "array" and "items" in schema:
        items = schema["items"]
        item_name = _schema_ref_name(items)
        if item_name is not None:
            return [
                FieldDef(
                    name="items",
                    ty=f"Vec<{item_name}>",
                    optional=False,
                    value="vec![]",
                )
            ]
        return extract_fields(items)

    required_raw = schema.get("required")
    required = (
        {name for name in required_raw if isinstance(name, str)}
        if isinstance(required_raw, list)
        else set()
    )

    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return []

    fields: list[FieldDef] = []
    for name in sorted(properties, key=str):
        ty = _property_type(properties[name])
        fields.append(
            FieldDef(
                name=str(name),
                ty=ty,
                optional=name not in required,
                value=dummy_value(ty) or DEFAULT_EXPRESSION,
            )
        )
    return fields


def process_schema_type(
    schema: Any, schema_types: MutableMapping[str, TypeDefinition]
) -> None:
    """Record the component type ``schema`` refers to, unless already known."""
    name = _schema_ref_name(schema)
    if name is None or name in schema_types:
        return
    schema_types[name] = TypeDefinition(name=name, fields=extract_fields(schema))


def collect_imports(fields: Iterable[FieldDef]) -> list[str]:
    """Return the sorted, distinct named types that ``fields`` refer to."""
    imports: set[str] = set()
    for item in fields:
        inner = _vec_inner(item.ty)
        if inner is not None:
            if is_named_type(inner):
                imports.add(inner)
        elif is_named_type(item.ty):
            imports.add(item.ty)
    return sorted(imports)
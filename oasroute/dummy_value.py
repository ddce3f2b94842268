"""Placeholder expressions used to fill generated handler stubs."""

from __future__ import annotations

DEFAULT_EXPRESSION = "Default::default()"

_DUMMY_VALUES: dict[str, str] = {
    "String": '"example".to_string()',
    "i32": "42",
    "f64": "3.14",
    "bool": "true",
    "Vec<Value>": "vec![]",
}


def dummy_value(ty: str) -> str:
    """Return a placeholder value expression for the generated type ``ty``."""
    return _DUMMY_VALUES.get(ty, DEFAULT_EXPRESSION)
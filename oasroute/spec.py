"""Loading an OpenAPI document into a flat list of route descriptions."""

from __future__ import annotations

import copy
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .validator import ValidationIssue, fail_if_issues

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
SCHEMA_REF_PREFIX = "#/components/schemas/"
JSON_MEDIA_TYPE = "application/json"


@dataclass
class ParameterMeta:
    """Description of a single operation parameter."""

    name: str
    location: str
    required: bool
    schema: dict[str, Any] | None = None


@dataclass
class RouteMeta:
    """Everything the router and dispatcher need to know about one operation."""

    method: str
    path_pattern: str
    handler_name: str
    parameters: list[ParameterMeta] = field(default_factory=list)
    request_schema: dict[str, Any] | None = None
    response_schema: dict[str, Any] | None = None


def load_spec(file_path: str | Path, verbose: bool = False) -> list[RouteMeta]:
    """Read a YAML or JSON spec file and build its routes."""
    name = str(file_path)
    content = Path(file_path).read_text(encoding="utf-8")
    if name.endswith((".yaml", ".yml")):
        spec = yaml.safe_load(content)
    else:
        spec = json.loads(content)
    return build_routes(spec, verbose)


def load_spec_from_spec(spec: Mapping[str, Any], verbose: bool = False) -> list[RouteMeta]:
    """Build routes from an already parsed spec document."""
    return build_routes(spec, verbose)


def _resolve_schema_ref(spec: Mapping[str, Any], ref_path: str) -> dict[str, Any] | None:
    if not ref_path.startswith(SCHEMA_REF_PREFIX):
        return None
    name = ref_path[len(SCHEMA_REF_PREFIX):]
    components = spec.get("components") or {}
    schemas = components.get("schemas") or {} if isinstance(components, Mapping) else {}
    schema = schemas.get(name) if isinstance(schemas, Mapping) else None
    if isinstance(schema, Mapping) and "$ref" not in schema:
        return copy.deepcopy(dict(schema))
    return None


def _handler_name(operation: Mapping[str, Any]) -> str | None:
    for key in sorted(k for k in operation if isinstance(k, str)):
        value = operation[key]
        if key.startswith("x-handler") and isinstance(value, str):
            return value
    operation_id = operation.get("operationId")
    return operation_id if isinstance(operation_id, str) else None


def _schema_value(
    spec: Mapping[str, Any],
    schema: Any,
    location: str,
    kind: str,
    message: str,
    issues: list[ValidationIssue],
) -> dict[str, Any] | None:
    if not isinstance(schema, Mapping):
        return None
    ref = schema.get("$ref")
    if ref is not None:
        return _resolve_schema_ref(spec, ref) if isinstance(ref, str) else None
    value = copy.deepcopy(dict(schema))
    if "type" not in value:
        issues.append(ValidationIssue(location, kind, message))
    return value


def _request_schema(
    spec: Mapping[str, Any],
    operation: Mapping[str, Any],
    location: str,
    issues: list[ValidationIssue],
) -> dict[str, Any] | None:
    body = operation.get("requestBody")
    if not isinstance(body, Mapping) or "$ref" in body:
        return None
    content = body.get("content") or {}
    if JSON_MEDIA_TYPE not in content:
        issues.append(
            ValidationIssue(
                location,
                "InvalidRequestSchema",
                "Missing 'application/json' requestBody content",
            )
        )
        return None
    media = content[JSON_MEDIA_TYPE]
    if not isinstance(media, Mapping):
        return None
    return _schema_value(
        spec,
        media.get("schema"),
        location,
        "InvalidRequestSchema",
        "Request schema is missing 'type' field",
        issues,
    )


def _response_schema(
    spec: Mapping[str, Any],
    operation: Mapping[str, Any],
    location: str,
    issues: list[ValidationIssue],
) -> dict[str, Any] | None:
    responses = operation.get("responses")
    if not isinstance(responses, Mapping):
        return None
    response = responses.get("200", responses.get(200))
    if not isinstance(response, Mapping) or "$ref" in response:
        return None
    content = response.get("content") or {}
    media = content.get(JSON_MEDIA_TYPE) if isinstance(content, Mapping) else None
    if not isinstance(media, Mapping):
        return None
    return _schema_value(
        spec,
        media.get("schema"),
        location,
        "InvalidResponseSchema",
        "Response schema is missing 'type' field",
        issues,
    )


def build_routes(spec: Mapping[str, Any], verbose: bool = False) -> list[RouteMeta]:
    """Turn every operation of ``spec`` into a :class:`RouteMeta`.

    Raises :class:`~oasroute.validator.SpecValidationError` if any operation
    lacks a handler name or has malformed JSON schemas.
    """
    if not isinstance(spec, Mapping):
        raise ValueError("OpenAPI spec must be a mapping")

    routes: list[RouteMeta] = []
    issues: list[ValidationIssue] = []
    paths = spec.get("paths") or {}

    for path in sorted(paths, key=str):
        item = paths[path]
        if not isinstance(item, Mapping):
            continue
        for method_key in HTTP_METHODS:
            operation = item.get(method_key)
            if not isinstance(operation, Mapping):
                continue
            method = method_key.upper()
            location = f"{path} → {method}"

            handler_name = _handler_name(operation)
            if handler_name is None:
                issues.append(
                    ValidationIssue(
                        location,
                        "MissingHandler",
                        "Missing operationId or x-handler-* extension",
                    )
                )
                continue

            route = RouteMeta(
                method=method,
                path_pattern=str(path),
                handler_name=handler_name,
                request_schema=_request_schema(spec, operation, location, issues),
                response_schema=_response_schema(spec, operation, location, issues),
            )
            if verbose:
                print(f"{method} {path} -> {handler_name}", file=sys.stderr)
            routes.append(route)

    fail_if_issues(issues)
    return routes
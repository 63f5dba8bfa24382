"""OpenAPI response and operation objects around a compiled schema."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from jbschema.annotations import OperationDeclaration, ParameterDeclaration
from jbschema.schema.core import Schema, SchemaDocument

DEFAULT_STATUS = "200"
RESPONSE_DESCRIPTION = "Successful response"
JSON_MEDIA_TYPE = "application/json"


def build_response(
    document: SchemaDocument, operation: OperationDeclaration | None = None
) -> dict[str, Any]:
    """Wrap a schema into a ``responses`` mapping keyed by status code."""
    status = (operation.status if operation else None) or DEFAULT_STATUS
    return {
        status: {
            "description": RESPONSE_DESCRIPTION,
            "content": {JSON_MEDIA_TYPE: {"schema": document.schema}},
        }
    }


def build_operation(
    document: SchemaDocument,
    operation: OperationDeclaration | None = None,
    parameters: Iterable[ParameterDeclaration] = (),
) -> dict[str, Any]:
    """Build an OpenAPI operation object.

    Path and query parameters become ``parameters``; body parameters are
    collected into a JSON ``requestBody``.

    Args:
        document: Compiled response schema.
        operation: Operation metadata from the template, if any.
        parameters: Request parameters declared for the endpoint.
    """
    result: dict[str, Any] = {}
    if operation is not None:
        if operation.summary:
            result["summary"] = operation.summary
        if operation.operation_id:
            result["operationId"] = operation.operation_id
        if operation.tags:
            result["tags"] = list(operation.tags)
        if operation.description:
            result["description"] = operation.description

    declared = list(parameters)
    in_request = [p.to_schema() for p in declared if p.location != "body"]
    if in_request:
        result["parameters"] = in_request
    body = [p for p in declared if p.location == "body"]
    if body:
        result["requestBody"] = _request_body(body)

    result["responses"] = build_response(document, operation)
    return result


def _request_body(parameters: list[ParameterDeclaration]) -> dict[str, Any]:
    properties: Schema = {}
    required: list[str] = []
    for parameter in parameters:
        rendered = parameter.to_schema()
        schema = dict(rendered["schema"])
        if parameter.description:
            schema["description"] = parameter.description
        properties[parameter.name] = schema
        if rendered["required"]:
            required.append(parameter.name)

    schema: Schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return {"required": True, "content": {JSON_MEDIA_TYPE: {"schema": schema}}}


def validate_schema(schema: Any, path: str = "root") -> list[str]:
    """List structural problems of a schema mapping.

    Checks that every schema is a mapping with a ``type`` (or a ``oneOf``),
    recursing through ``properties``, ``items`` and ``oneOf``.

    Returns:
        Human-readable problems; empty when the schema is well formed.
    """
    if not isinstance(schema, Mapping):
        return [f"Schema at {path} must be a mapping"]

    errors: list[str] = []
    if "oneOf" in schema:
        for index, option in enumerate(schema["oneOf"]):
            errors.extend(validate_schema(option, f"{path}.oneOf[{index}]"))
        return errors

    schema_type = schema.get("type")
    if not schema_type:
        errors.append(f"Schema at {path} is missing type")

    if schema_type == "object":
        properties = schema.get("properties", {})
        if not isinstance(properties, Mapping):
            errors.append(f"Properties at {path} must be a mapping")
        else:
            for name, child in properties.items():
                errors.extend(validate_schema(child, f"{path}.{name}"))
        for name in schema.get("required", ()):
            if name not in properties:
                errors.append(f"Required property {name!r} at {path} is not defined")
    elif schema_type == "array":
        if "items" not in schema:
            errors.append(f"Array at {path} is missing items")
        else:
            errors.extend(validate_schema(schema["items"], f"{path}[]"))
    return errors

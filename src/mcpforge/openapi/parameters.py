"""
Name: Tool input assembly.
Description: Merges path-level and operation-level parameters, maps the request body to a synthetic requestBody field, and combines both into the JSON Schema a tool validates its input against.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..constants import (
    DEFAULT_REQUEST_BODY_DESCRIPTION,
    JSON_CONTENT_TYPE,
    REQUEST_BODY_PROPERTY,
)
from .diagnostics import DiagnosticSink
from .models import ParameterSpec
from .schema import map_openapi_schema_to_json_schema


def _declared_parameters(container: Dict[str, Any]) -> List[Dict[str, Any]]:
    parameters = container.get("parameters")
    if not isinstance(parameters, list):
        return []
    return [p for p in parameters if isinstance(p, dict) and p.get("name")]


def merge_parameters(
    path_item: Dict[str, Any], operation: Dict[str, Any]
) -> List[ParameterSpec]:
    """Merge path-level and operation-level parameters.

    Path-level parameters seed the result in declaration order. An
    operation-level parameter replaces a same-named one in place, otherwise it
    is appended. Entries without a name are dropped.

    Args:
        path_item: Path item whose parameters apply to every operation
        operation: The operation

    Returns:
        Ordered, de-duplicated parameters
    """
    merged: Dict[str, ParameterSpec] = {}
    for parameter in _declared_parameters(path_item) + _declared_parameters(operation):
        spec = ParameterSpec.from_openapi(parameter)
        merged[spec.name] = spec
    return list(merged.values())


def build_parameter_schema(
    parameters: List[ParameterSpec],
    diagnostics: Optional[DiagnosticSink] = None,
) -> Tuple[Dict[str, Any], List[str]]:
    """Build input properties for parameters that have a schema.

    Args:
        parameters: Merged parameters
        diagnostics: Sink passed to the schema mapper

    Returns:
        Tuple of (properties, required parameter names)
    """
    properties: Dict[str, Any] = {}
    required: List[str] = []

    for param in parameters:
        if param.schema_definition is None:
            continue

        param_schema = map_openapi_schema_to_json_schema(
            param.schema_definition, diagnostics
        )
        if isinstance(param_schema, dict):
            description = param.description or param_schema.get("description")
            if description:
                param_schema["description"] = description

        properties[param.name] = param_schema
        if param.required:
            required.append(param.name)

    return properties, required


def build_request_body_property(
    operation: Dict[str, Any],
    diagnostics: Optional[DiagnosticSink] = None,
) -> Tuple[Optional[Any], bool, Optional[str]]:
    """Map the operation's request body to a single input property.

    A JSON body is mapped through the schema mapper. Any other content type
    becomes a plain string property naming the content type.

    Args:
        operation: The operation
        diagnostics: Sink passed to the schema mapper

    Returns:
        Tuple of (property schema or None, required flag, content type or None)
    """
    request_body = operation.get("requestBody")
    if not isinstance(request_body, dict):
        return None, False, None

    content = request_body.get("content")
    if not isinstance(content, dict):
        content = {}
    body_description = request_body.get("description")
    required = request_body.get("required") is True

    json_content = content.get(JSON_CONTENT_TYPE)
    if isinstance(json_content, dict) and json_content.get("schema") is not None:
        body_schema = map_openapi_schema_to_json_schema(
            json_content["schema"], diagnostics
        )
        if isinstance(body_schema, dict):
            body_schema["description"] = (
                body_schema.get("description")
                or body_description
                or DEFAULT_REQUEST_BODY_DESCRIPTION
            )
        return body_schema, required, JSON_CONTENT_TYPE

    if content:
        content_type = next(iter(content))
        body_property = {
            "type": "string",
            "description": body_description
            or f"Request body (content type: {content_type})",
        }
        return body_property, required, content_type

    return None, False, None


def generate_input_schema_and_details(
    operation: Dict[str, Any],
    path_item: Dict[str, Any],
    diagnostics: Optional[DiagnosticSink] = None,
) -> Tuple[Dict[str, Any], List[ParameterSpec], Optional[str]]:
    """Generate the tool input schema and parameter details for an operation.

    Args:
        operation: The operation
        path_item: Path item containing the operation
        diagnostics: Sink for schema mapping diagnostics

    Returns:
        Tuple of (input schema, merged parameters, request body content type)
    """
    parameters = merge_parameters(path_item, operation)
    properties, required = build_parameter_schema(parameters, diagnostics)

    body_property, body_required, content_type = build_request_body_property(
        operation, diagnostics
    )
    if body_property is not None:
        properties[REQUEST_BODY_PROPERTY] = body_property
        if body_required:
            required.append(REQUEST_BODY_PROPERTY)

    input_schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        input_schema["required"] = required

    return input_schema, parameters, content_type

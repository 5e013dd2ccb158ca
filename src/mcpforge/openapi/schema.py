"""
Name: OpenAPI to JSON Schema mapper.
Description: Recursively converts OpenAPI schema objects into JSON Schema suitable for tool input validation. Integer types become number, OpenAPI-only keywords are dropped, nullable is folded into the type, and recursive schemas are cut with a generic object at the cycle point.
"""

from typing import Any, Dict, Optional, Set, Union

from ..constants import (
    OPENAPI_ONLY_SCHEMA_FIELDS,
    SUBSCHEMA_KEYWORDS,
    SUBSCHEMA_LIST_KEYWORDS,
)
from .diagnostics import (
    INVALID_SCHEMA,
    SCHEMA_CYCLE,
    UNRESOLVED_REF,
    DiagnosticSink,
    report,
)

JsonSchema = Union[Dict[str, Any], bool]


def _generic_object() -> Dict[str, Any]:
    return {"type": "object"}


def _has_type(schema: Dict[str, Any], type_name: str) -> bool:
    declared = schema.get("type")
    if isinstance(declared, list):
        return type_name in declared
    return declared == type_name


def _fold_nullable(schema: Dict[str, Any]) -> None:
    declared = schema.get("type")
    if isinstance(declared, list):
        if "null" not in declared:
            schema["type"] = declared + ["null"]
    elif isinstance(declared, str):
        schema["type"] = [declared, "null"]
    elif not declared:
        schema["type"] = "null"


def _report_cycle(node: Any, diagnostics: Optional[DiagnosticSink]) -> None:
    title = node.get("title") if isinstance(node, dict) else None
    named = f' "{title}"' if title else ""
    report(
        diagnostics,
        SCHEMA_CYCLE,
        f"Cycle detected in schema{named}, returning generic object to break recursion.",
    )


def strip_cycles(
    value: Any,
    diagnostics: Optional[DiagnosticSink] = None,
    visiting: Optional[Set[int]] = None,
    report_cycles: bool = True,
) -> Any:
    """Copy a JSON-like value, replacing every back-reference with a generic object.

    Keys and scalars are copied as they are, no schema rules are applied.

    Args:
        value: Mapping, list or scalar, possibly containing object cycles
        diagnostics: Sink for detected cycles
        visiting: ids of the containers on the current recursion path
        report_cycles: Whether to emit schema_cycle diagnostics

    Returns:
        A finite copy of the value
    """
    if not isinstance(value, (dict, list)):
        return value

    if visiting is None:
        visiting = set()

    if id(value) in visiting:
        if report_cycles:
            _report_cycle(value, diagnostics)
        return _generic_object()

    visiting.add(id(value))
    try:
        if isinstance(value, list):
            return [
                strip_cycles(item, diagnostics, visiting, report_cycles)
                for item in value
            ]
        return {
            key: strip_cycles(item, diagnostics, visiting, report_cycles)
            for key, item in value.items()
        }
    finally:
        visiting.discard(id(value))


def map_openapi_schema_to_json_schema(
    schema: Any,
    diagnostics: Optional[DiagnosticSink] = None,
    visiting: Optional[Set[int]] = None,
) -> JsonSchema:
    """Map an OpenAPI schema object to JSON Schema with cycle protection.

    Args:
        schema: OpenAPI schema object, reference object or boolean schema
        diagnostics: Sink for unresolved references and detected cycles
        visiting: ids of the schema objects on the current recursion path

    Returns:
        The JSON Schema representation. The input is never modified and the
        result shares no objects with it.
    """
    if isinstance(schema, dict) and "$ref" in schema:
        report(
            diagnostics,
            UNRESOLVED_REF,
            f"Unresolved $ref '{schema['$ref']}', using a generic object.",
            value=schema["$ref"],
        )
        return _generic_object()

    if isinstance(schema, bool):
        return schema

    if not isinstance(schema, dict):
        report(
            diagnostics,
            INVALID_SCHEMA,
            f"Expected a schema object, got {type(schema).__name__}, using a generic object.",
            value=schema,
        )
        return _generic_object()

    if visiting is None:
        visiting = set()

    if id(schema) in visiting:
        _report_cycle(schema, diagnostics)
        return _generic_object()

    visiting.add(id(schema))
    try:
        json_schema = dict(schema)
        mapped_keys = set()

        if schema.get("type") == "integer":
            json_schema["type"] = "number"

        for field in OPENAPI_ONLY_SCHEMA_FIELDS:
            json_schema.pop(field, None)

        if schema.get("nullable"):
            _fold_nullable(json_schema)

        properties = json_schema.get("properties")
        if _has_type(json_schema, "object") and isinstance(properties, dict):
            mapped_properties = {}
            for key, property_schema in properties.items():
                if isinstance(property_schema, bool):
                    mapped_properties[key] = property_schema
                elif isinstance(property_schema, dict):
                    mapped_properties[key] = map_openapi_schema_to_json_schema(
                        property_schema, diagnostics, visiting
                    )
            json_schema["properties"] = mapped_properties
            mapped_keys.add("properties")

        items = json_schema.get("items")
        if _has_type(json_schema, "array") and isinstance(items, dict):
            json_schema["items"] = map_openapi_schema_to_json_schema(
                items, diagnostics, visiting
            )
            mapped_keys.add("items")

        for keyword in SUBSCHEMA_LIST_KEYWORDS:
            subschemas = json_schema.get(keyword)
            if isinstance(subschemas, list):
                json_schema[keyword] = [
                    map_openapi_schema_to_json_schema(subschema, diagnostics, visiting)
                    for subschema in subschemas
                ]
                mapped_keys.add(keyword)

        for keyword in SUBSCHEMA_KEYWORDS:
            subschema = json_schema.get(keyword)
            if isinstance(subschema, (dict, bool)):
                json_schema[keyword] = map_openapi_schema_to_json_schema(
                    subschema, diagnostics, visiting
                )
                mapped_keys.add(keyword)

        # Whatever was not mapped above is copied so no input object leaks into the result
        for key, value in json_schema.items():
            if key not in mapped_keys and isinstance(value, (dict, list)):
                json_schema[key] = strip_cycles(value, diagnostics, visiting)

        return json_schema
    finally:
        visiting.discard(id(schema))

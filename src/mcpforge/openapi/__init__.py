"""OpenAPI tool extraction module for mcpforge."""

from .diagnostics import Diagnostic, DiagnosticCollector, log_diagnostic
from .filters import normalize_boolean, should_include_operation
from .models import ExecutionParameter, ExtensionValue, ParameterSpec, ToolDefinition
from .parameters import generate_input_schema_and_details, merge_parameters
from .schema import map_openapi_schema_to_json_schema, strip_cycles
from .spec import SpecLoadError, determine_base_url, load_openapi_spec, resolve_references
from .tools import (
    ToolExtractionError,
    extract_tools_from_api,
    generate_operation_id,
    get_tools_from_openapi,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "log_diagnostic",
    "normalize_boolean",
    "should_include_operation",
    "ExecutionParameter",
    "ExtensionValue",
    "ParameterSpec",
    "ToolDefinition",
    "generate_input_schema_and_details",
    "merge_parameters",
    "map_openapi_schema_to_json_schema",
    "strip_cycles",
    "SpecLoadError",
    "determine_base_url",
    "load_openapi_spec",
    "resolve_references",
    "ToolExtractionError",
    "extract_tools_from_api",
    "generate_operation_id",
    "get_tools_from_openapi",
]

"""
Name: OpenAPI tools.
Description: Implements tool extraction from OpenAPI documents. Walks every path and operation, applies the x-mcp inclusion filter, assigns collision-free tool names, builds each tool's input schema, and resolves its security requirements. Also provides the get_tools_from_openapi entry point that loads, extracts and post-filters tools in one call.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from ..constants import DEFAULT_INCLUDE, HTTP_METHODS, MCP_EXTENSION_KEY
from .diagnostics import FILTER_ERROR, DiagnosticSink, report
from .filters import should_include_operation
from .models import ExecutionParameter, ToolDefinition
from .parameters import generate_input_schema_and_details
from .spec import determine_base_url, load_openapi_spec, resolve_references

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


class ToolExtractionError(ValueError):
    """Raised when tools cannot be extracted from an OpenAPI document."""


def generate_operation_id(method: str, path: str) -> str:
    """Generate an operation identifier from an HTTP method and path.

    ``("get", "/pets/{petId}/toys")`` becomes ``get_pets_petId_toys``.

    Args:
        method: HTTP method
        path: Path template

    Returns:
        The generated identifier
    """
    segments = [segment.strip("{}") for segment in path.split("/")]
    return "_".join([method.lower()] + [segment for segment in segments if segment])


def sanitize_tool_name(name: str) -> str:
    """Replace every character not allowed in an MCP tool name with '_'."""
    return _INVALID_NAME_CHARS.sub("_", name.replace(".", "_"))


def unique_tool_name(base_name: str, used_names: Set[str]) -> str:
    """Return base_name, or base_name with the first free numeric suffix.

    The returned name is added to used_names.
    """
    final_name = base_name
    counter = 1
    while final_name in used_names:
        final_name = f"{base_name}_{counter}"
        counter += 1
    used_names.add(final_name)
    return final_name


def resolve_security(
    operation: Dict[str, Any], global_security: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Resolve the effective security requirements of an operation.

    An explicit list on the operation wins, including an empty list meaning
    no authentication. An absent or null value falls back to the document's
    global requirements. Entries that are not requirement mappings are dropped.
    """
    security = operation.get("security")
    if isinstance(security, list):
        return _requirement_entries(security)
    return _requirement_entries(global_security)


def _requirement_entries(security: Any) -> List[Dict[str, Any]]:
    if not isinstance(security, list):
        return []
    return [entry for entry in security if isinstance(entry, dict)]


def _extension_preview(*containers: Dict[str, Any]) -> str:
    for container in containers:
        if isinstance(container, dict) and container.get(MCP_EXTENSION_KEY) is not None:
            value = container[MCP_EXTENSION_KEY]
            try:
                return json.dumps(value)
            except (TypeError, ValueError):
                return str(value)
    return "null"


def _is_included(
    api: Dict[str, Any],
    path: str,
    path_item: Dict[str, Any],
    method: str,
    operation: Dict[str, Any],
    default_include: bool,
    diagnostics: Optional[DiagnosticSink],
) -> bool:
    try:
        return should_include_operation(
            api, path_item, operation, default_include, diagnostics
        )
    except Exception as e:
        location = operation.get("operationId") or f"{method} {path}"
        preview = _extension_preview(operation, path_item, api)
        logger.debug(
            f"Error evaluating {MCP_EXTENSION_KEY} extension for operation {location}",
            exc_info=True,
        )
        report(
            diagnostics,
            FILTER_ERROR,
            f"Error evaluating {MCP_EXTENSION_KEY} extension "
            f"({MCP_EXTENSION_KEY}={preview}): {e}",
            location=location,
        )
        # Failures exclude the operation unless the default is to include
        return default_include


def _iter_operations(api: Dict[str, Any]) -> Iterable:
    paths = api.get("paths")
    if not isinstance(paths, dict):
        return

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                yield path, path_item, method, operation


def extract_tools_from_api(
    api: Dict[str, Any],
    default_include: bool = DEFAULT_INCLUDE,
    diagnostics: Optional[DiagnosticSink] = None,
) -> List[ToolDefinition]:
    """Extract tool definitions from an OpenAPI document.

    Args:
        api: OpenAPI document, ideally with references already resolved
        default_include: Whether operations without an x-mcp decision are included
        diagnostics: Sink for non-fatal diagnostics, logs warnings when None

    Returns:
        Tool definitions in path declaration order, then method order
    """
    tools: List[ToolDefinition] = []
    used_names: Set[str] = set()
    global_security = _requirement_entries(api.get("security"))

    for path, path_item, method, operation in _iter_operations(api):
        if not _is_included(
            api, path, path_item, method, operation, default_include, diagnostics
        ):
            logger.debug(f"Skipping {method.upper()} {path}: excluded by {MCP_EXTENSION_KEY}")
            continue

        operation_id = operation.get("operationId")
        if operation_id is None or operation_id == "":
            operation_id = generate_operation_id(method, path)
        operation_id = str(operation_id)

        base_name = sanitize_tool_name(operation_id)
        if not base_name:
            continue
        tool_name = unique_tool_name(base_name, used_names)

        description = (
            operation.get("description")
            or operation.get("summary")
            or f"Executes {method.upper()} {path}"
        )

        input_schema, parameters, content_type = generate_input_schema_and_details(
            operation, path_item, diagnostics
        )

        tools.append(
            ToolDefinition(
                name=tool_name,
                description=str(description),
                input_schema=input_schema,
                method=method,
                path_template=path,
                parameters=parameters,
                execution_parameters=[
                    ExecutionParameter(name=p.name, location=p.location)
                    for p in parameters
                ],
                request_body_content_type=content_type,
                security_requirements=resolve_security(operation, global_security),
                operation_id=operation_id,
            )
        )

    logger.debug(f"Extracted {len(tools)} tools")
    return tools


def get_tools_from_openapi(
    spec: Union[str, Dict[str, Any]],
    base_url: Optional[str] = None,
    dereference: bool = False,
    exclude_operation_ids: Optional[List[str]] = None,
    filter_fn: Optional[Callable[[ToolDefinition], bool]] = None,
    default_include: bool = DEFAULT_INCLUDE,
    diagnostics: Optional[DiagnosticSink] = None,
) -> List[ToolDefinition]:
    """Get a list of tools from an OpenAPI specification.

    Args:
        spec: Parsed OpenAPI document, or a path/URL to load it from
        base_url: Base URL overriding the document's servers
        dereference: Whether to resolve local $ref references first
        exclude_operation_ids: Operation identifiers to leave out
        filter_fn: Predicate a tool must satisfy to be returned
        default_include: Whether operations without an x-mcp decision are included
        diagnostics: Sink for non-fatal diagnostics

    Returns:
        The tools, each with base_url set

    Raises:
        ToolExtractionError: If loading or extraction fails
    """
    try:
        if isinstance(spec, dict):
            api = resolve_references(spec) if dereference else spec
        else:
            api = load_openapi_spec(str(spec), dereference=dereference)

        tools = extract_tools_from_api(api, default_include, diagnostics)
        resolved_base_url = determine_base_url(api, base_url) or ""

        if exclude_operation_ids:
            excluded = set(exclude_operation_ids)
            tools = [tool for tool in tools if tool.operation_id not in excluded]

        if filter_fn:
            tools = [tool for tool in tools if filter_fn(tool)]

        return [tool.model_copy(update={"base_url": resolved_base_url}) for tool in tools]
    except Exception as e:
        raise ToolExtractionError(f"Failed to extract tools from OpenAPI: {e}") from e

"""
Name: Inclusion filter.
Description: Decides whether an OpenAPI operation becomes a tool from the x-mcp vendor extension declared on the operation, its path item, or the document root.
"""

from typing import Any, Dict, Optional

from ..constants import DEFAULT_INCLUDE, MCP_EXTENSION_KEY
from .diagnostics import INVALID_EXTENSION, DiagnosticSink, report
from .models import ExtensionValue, ExtensionValueKind


TRUE_STRINGS = ("true", "1", "yes", "on")
FALSE_STRINGS = ("false", "0", "no", "off")


def read_extension(container: Dict[str, Any]) -> Optional[ExtensionValue]:
    """Read the raw x-mcp value of a document, path item or operation.

    Args:
        container: The mapping that may carry the extension

    Returns:
        The tagged raw value, or None if the extension is absent
    """
    if MCP_EXTENSION_KEY not in container:
        return None
    return ExtensionValue.from_raw(container[MCP_EXTENSION_KEY])


def normalize_boolean(value: Any) -> Optional[bool]:
    """Normalize a value to a boolean if it looks like one.

    Args:
        value: Raw value or an ExtensionValue

    Returns:
        True or False for boolean-like values, None otherwise
    """
    if not isinstance(value, ExtensionValue):
        value = ExtensionValue.from_raw(value)

    if value.kind == ExtensionValueKind.BOOLEAN:
        return value.raw
    if value.kind == ExtensionValueKind.STRING:
        normalized = value.raw.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
    return None


def _resolve_scope(
    container: Dict[str, Any],
    scope: str,
    fallback: str,
    diagnostics: Optional[DiagnosticSink],
) -> Optional[bool]:
    extension = read_extension(container)
    if extension is None:
        return None

    decision = normalize_boolean(extension)
    if decision is None:
        report(
            diagnostics,
            INVALID_EXTENSION,
            f"Invalid {MCP_EXTENSION_KEY} value {extension.raw!r} -> expected boolean "
            f"or 'true'/'false'. Falling back to {fallback}.",
            location=scope,
            value=extension.raw,
        )
    return decision


def should_include_operation(
    api: Dict[str, Any],
    path_item: Dict[str, Any],
    operation: Dict[str, Any],
    default_include: bool = DEFAULT_INCLUDE,
    diagnostics: Optional[DiagnosticSink] = None,
) -> bool:
    """Determine if an operation should become a tool.

    Precedence is operation > path item > document root > default_include.
    A malformed value at one scope is reported and ignored in favor of the
    next scope.

    Args:
        api: The OpenAPI document
        path_item: Path item containing the operation
        operation: The operation
        default_include: Decision when no scope carries a usable value
        diagnostics: Sink for malformed-value diagnostics

    Returns:
        True if the operation should be included
    """
    operation_id = operation.get("operationId") or "[no operationId]"

    decision = _resolve_scope(
        operation,
        f"operation '{operation_id}'",
        "path/root/default",
        diagnostics,
    )
    if decision is not None:
        return decision

    decision = _resolve_scope(path_item, "path item", "root/default", diagnostics)
    if decision is not None:
        return decision

    decision = _resolve_scope(
        api, "API root", f"defaultInclude={default_include}", diagnostics
    )
    if decision is not None:
        return decision

    return default_include

"""
Name: OpenAPI document loading.
Description: Loads OpenAPI documents from files or URLs, resolves local $ref references in place, and determines the API base URL. This is the collaborator that hands a parsed document to the tool extractor.
"""

import copy
import logging
from typing import Any, Dict, Optional

from ..utils import load_spec_from_file, load_spec_from_url

logger = logging.getLogger(__name__)


class SpecLoadError(ValueError):
    """Raised when an OpenAPI document cannot be loaded."""


def _unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def _lookup_pointer(document: Any, ref_string: str) -> Optional[Any]:
    """Resolve a local JSON pointer such as ``#/components/schemas/Pet``."""
    if ref_string in ("#", "#/"):
        return document

    current = document
    for part in ref_string[2:].split("/"):
        token = _unescape_pointer_token(part)
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
    return current


def resolve_references(openapi_spec: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve all local $ref references in an OpenAPI document.

    Every reference is replaced by the very object it points to, so schemas
    that refer to themselves become cyclic object graphs rather than being
    expanded forever. Unresolvable references and reference loops are left in
    place.

    Args:
        openapi_spec: A dictionary representing the OpenAPI specification.

    Returns:
        A dereferenced copy of the document. The input is not modified.

    Raises:
        ValueError: If the document contains an external reference
    """
    document = copy.deepcopy(openapi_spec)
    walked = set()

    def target_of(node: Dict[str, Any]) -> Any:
        """Follow a (possibly chained) reference to its final target."""
        seen_refs = set()
        current = node
        while isinstance(current, dict) and isinstance(current.get("$ref"), str):
            ref_string = current["$ref"]
            if not ref_string.startswith("#"):
                raise ValueError(f"External references not supported: {ref_string}")
            if ref_string in seen_refs:
                logger.debug(f"Reference loop at {ref_string}, leaving unresolved")
                return node
            seen_refs.add(ref_string)

            resolved = _lookup_pointer(document, ref_string)
            if resolved is None:
                logger.debug(f"Reference {ref_string} not found, leaving unresolved")
                return node
            current = resolved
        return current

    def walk(node: Any) -> None:
        if id(node) in walked:
            return
        walked.add(id(node))

        if isinstance(node, dict):
            for key, value in node.items():
                node[key] = target_of(value) if isinstance(value, dict) else value
                walk(node[key])
        elif isinstance(node, list):
            for index, value in enumerate(node):
                node[index] = target_of(value) if isinstance(value, dict) else value
                walk(node[index])

    document = target_of(document)
    walk(document)
    return document


def load_openapi_spec(location: str, dereference: bool = False) -> Dict[str, Any]:
    """Load an OpenAPI document from a file path or URL.

    Args:
        location: Path or http(s) URL of the document
        dereference: Whether to resolve local $ref references

    Returns:
        The parsed document

    Raises:
        SpecLoadError: If the document cannot be loaded or parsed
    """
    try:
        if location.startswith(("http://", "https://")):
            logger.debug(f"Loading OpenAPI spec from {location}")
            spec = load_spec_from_url(location)
        else:
            logger.debug(f"Loading OpenAPI spec from file {location}")
            spec = load_spec_from_file(location)

        if not isinstance(spec, dict):
            raise ValueError("Document is not a mapping")

        if dereference:
            spec = resolve_references(spec)
    except Exception as e:
        raise SpecLoadError(f"Failed to load OpenAPI spec from {location}: {e}") from e

    return spec


def determine_base_url(
    api: Dict[str, Any], override: Optional[str] = None
) -> Optional[str]:
    """Determine the base URL for API requests.

    Args:
        api: The OpenAPI document
        override: Base URL that takes precedence over the document's servers

    Returns:
        The base URL without trailing slash, or None if none is declared
    """
    url = override
    if not url:
        servers = api.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict):
            url = servers[0].get("url")

    if not url or not isinstance(url, str):
        return None

    # Remove trailing slash if present
    return url.rstrip("/")

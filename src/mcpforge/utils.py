"""
Name: Utility functions.
Description: Common utility functions for mcpforge, including loading OpenAPI specs, reading extraction configs, and logging.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import requests
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from .constants import (
    DEFAULT_INCLUDE,
    DEFAULT_SPEC_TIMEOUT,
    JSON_CONTENT_TYPE,
    LOG_FORMAT,
    YAML_EXTENSIONS,
)

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    """Send log records to stderr, at DEBUG level when debugging and INFO otherwise.

    Stdout is reserved for extracted tools. When the root logger already has
    handlers, only the level of its stream handlers is adjusted.

    Args:
        debug: Whether to log at DEBUG level
    """
    level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setLevel(level)
        return

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(stderr_handler)


def load_spec_from_file(file_path: str) -> Dict[str, Any]:
    """Parse an OpenAPI document stored as JSON or YAML.

    Args:
        file_path: Path ending in .json, .yaml or .yml

    Returns:
        The parsed document

    Raises:
        ValueError: If the extension is not a JSON or YAML one
    """
    extension = os.path.splitext(file_path)[1].lower()
    if extension != ".json" and extension not in YAML_EXTENSIONS:
        raise ValueError(f"Unsupported file extension: {extension}")

    with open(file_path, "r") as f:
        if extension == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_spec_from_url(url: str) -> Dict[str, Any]:
    """Download an OpenAPI document and parse it.

    A JSON content type is parsed as JSON. A YAML content type, or a URL
    ending in .yaml/.yml, is parsed as YAML. Anything else is tried as JSON
    and then as YAML.

    Args:
        url: Address of the document

    Returns:
        The parsed document

    Raises:
        ValueError: If the body is neither JSON nor YAML
    """
    response = requests.get(url, timeout=DEFAULT_SPEC_TIMEOUT)
    response.raise_for_status()
    content_type = response.headers.get("Content-Type", "")

    if JSON_CONTENT_TYPE in content_type:
        return response.json()
    if "yaml" in content_type or url.lower().endswith(YAML_EXTENSIONS):
        return yaml.safe_load(response.text)

    try:
        return response.json()
    except ValueError:
        logger.debug(f"{url} did not return JSON, trying YAML")

    try:
        return yaml.safe_load(response.text)
    except yaml.YAMLError as e:
        raise ValueError("Unable to parse response as JSON or YAML") from e


def substitute_env_vars(value: str) -> str:
    """Expand ``{VAR_NAME}`` placeholders from the environment and any .env file.

    The value comes back unchanged when a placeholder cannot be expanded.

    Args:
        value: Config value that may reference environment variables

    Returns:
        The expanded value
    """
    if not isinstance(value, str) or not value:
        return value

    load_dotenv()

    try:
        return value.format_map(os.environ)
    except KeyError as e:
        logger.warning(f"No environment variable {e} for config value '{value}'")
    except (IndexError, ValueError) as e:
        logger.warning(f"Cannot expand environment variables in '{value}': {e}")

    return value


class ExtractionConfig(BaseModel):
    """Configuration for a tool extraction run."""

    spec: Optional[str] = None
    base_url: Optional[str] = None
    dereference: bool = False
    default_include: bool = DEFAULT_INCLUDE
    exclude_operation_ids: List[str] = Field(default_factory=list)
    output: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept camelCase keys alongside snake_case ones."""
        if not isinstance(data, dict):
            return data

        aliases = {
            "baseUrl": "base_url",
            "defaultInclude": "default_include",
            "excludeOperationIds": "exclude_operation_ids",
        }
        for camel, snake in aliases.items():
            if camel in data and snake not in data:
                data[snake] = data.pop(camel)

        return data


def process_config(config_path: str) -> ExtractionConfig:
    """Process an extraction configuration file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        Extraction configuration
    """
    with open(config_path, "r") as f:
        config_data = json.load(f)

    for key in ("spec", "base_url", "baseUrl"):
        if key in config_data:
            config_data[key] = substitute_env_vars(config_data[key])

    return ExtractionConfig(**config_data)


def setup_environment(debug: bool = False):
    """Setup the environment for the application.

    - Configures logging
    - Loads environment variables from .env file
    """
    configure_logging(debug)
    load_dotenv()
    logger.debug("Loaded environment variables from .env file")

"""
Name: Constants and settings.
Description: Centralized location for constants and settings used throughout mcpforge.
This file contains default values, OpenAPI keywords, and other constants to maintain consistency.
"""


# Inclusion settings
MCP_EXTENSION_KEY = "x-mcp"
DEFAULT_INCLUDE = True

# Canonical traversal order of operations within a path item
HTTP_METHODS = ["get", "put", "post", "delete", "options", "head", "patch", "trace"]

# Request body settings
JSON_CONTENT_TYPE = "application/json"
REQUEST_BODY_PROPERTY = "requestBody"
DEFAULT_REQUEST_BODY_DESCRIPTION = "The JSON request body."

# OpenAPI-only schema keywords with no JSON Schema counterpart
OPENAPI_ONLY_SCHEMA_FIELDS = (
    "nullable",
    "example",
    "xml",
    "externalDocs",
    "deprecated",
    "readOnly",
    "writeOnly",
)

# Schema keywords holding subschemas that the mapper converts recursively
SUBSCHEMA_LIST_KEYWORDS = ("allOf", "anyOf", "oneOf")
SUBSCHEMA_KEYWORDS = ("not", "additionalProperties")

# Loader settings
DEFAULT_SPEC_TIMEOUT = 30
YAML_EXTENSIONS = (".yaml", ".yml")

# Output settings
DEFAULT_JSON_INDENT = 2
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

"""
Name: mcpforge package.
Description: Defines the package version and exposes the tool extraction API, establishing mcpforge as a package for turning OpenAPI specs into MCP tool definitions.
"""

__version__ = "0.1.0"

from .openapi import ToolDefinition, extract_tools_from_api, get_tools_from_openapi

__all__ = ["ToolDefinition", "extract_tools_from_api", "get_tools_from_openapi"]

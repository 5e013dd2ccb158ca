"""Common models for OpenAPI tool extraction."""

from enum import Enum
from typing import Any, Dict, List, Optional

from mcp.types import Tool
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from .schema import strip_cycles


class ExtensionValueKind(str, Enum):
    """Shape of a raw ``x-mcp`` value."""

    BOOLEAN = "boolean"
    STRING = "string"
    OTHER = "other"


class ExtensionValue(BaseModel):
    """A raw ``x-mcp`` value found at one scope of the document.

    An absent extension is represented by ``None`` rather than by an instance,
    so an explicit ``x-mcp: null`` is still a present (``OTHER``) value.
    """

    kind: ExtensionValueKind
    raw: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ExtensionValue":
        # bool is checked before anything numeric since bool subclasses int
        if isinstance(raw, bool):
            return cls(kind=ExtensionValueKind.BOOLEAN, raw=raw)
        if isinstance(raw, str):
            return cls(kind=ExtensionValueKind.STRING, raw=raw)
        return cls(kind=ExtensionValueKind.OTHER, raw=raw)


class ParameterSpec(BaseModel):
    """Parameter of an API operation after path/operation merging."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(default="query", alias="in")  # path, query, header, cookie
    required: bool = False
    description: Optional[str] = None
    schema_definition: Optional[Any] = Field(default=None, alias="schema")

    @classmethod
    def from_openapi(cls, parameter: Dict[str, Any]) -> "ParameterSpec":
        """Build a parameter from an OpenAPI Parameter Object.

        Args:
            parameter: Parameter Object with at least a ``name``

        Returns:
            The parameter spec
        """
        description = parameter.get("description")
        return cls(
            name=str(parameter["name"]),
            location=str(parameter.get("in") or "query"),
            required=parameter.get("required") is True,
            description=description if isinstance(description, str) else None,
            schema_definition=parameter.get("schema"),
        )

    @field_serializer("schema_definition")
    def serialize_schema_definition(self, schema_definition: Any) -> Any:
        # Dereferenced recursive schemas are object cycles
        return strip_cycles(schema_definition, report_cycles=False)


class ExecutionParameter(BaseModel):
    """Name and location of an input field, used to assemble the proxied call."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")


class ToolDefinition(BaseModel):
    """A callable tool derived from a single API operation.

    Serialize with ``model_dump(by_alias=True)`` to get the camelCase layout
    (``inputSchema``, ``pathTemplate``, ``executionParameters`` ...) consumed by
    code generators and invokers.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any]
    method: str
    path_template: str
    parameters: List[ParameterSpec] = []
    execution_parameters: List[ExecutionParameter] = []
    request_body_content_type: Optional[str] = None
    security_requirements: List[Dict[str, Any]] = []
    operation_id: str
    base_url: Optional[str] = None

    def to_mcp_tool(self) -> Tool:
        """Project the definition onto the MCP tool listing type.

        Returns:
            An ``mcp.types.Tool`` with name, description and input schema
        """
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )

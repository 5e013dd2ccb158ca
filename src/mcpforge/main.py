"""
Name: Command-line interface.
Description: Implements the command-line interface for mcpforge with commands for extracting tool definitions from an OpenAPI document as JSON and for listing the tools a document would produce.
"""

import argparse
import json
import logging
import sys

from .constants import DEFAULT_JSON_INDENT
from .openapi.tools import ToolExtractionError, get_tools_from_openapi
from .utils import ExtractionConfig, process_config, setup_environment

logger = logging.getLogger(__name__)


def _resolve_config(args) -> ExtractionConfig:
    """Merge a config file (if any) with command-line overrides."""
    config = process_config(args.config) if getattr(args, "config", None) else ExtractionConfig()

    updates = {}
    if args.spec:
        updates["spec"] = args.spec
    if getattr(args, "base_url", None):
        updates["base_url"] = args.base_url
    if getattr(args, "output", None):
        updates["output"] = args.output
    if args.dereference:
        updates["dereference"] = True
    if args.default_exclude:
        updates["default_include"] = False
    if getattr(args, "exclude_operation_id", None):
        updates["exclude_operation_ids"] = (
            config.exclude_operation_ids + args.exclude_operation_id
        )

    return config.model_copy(update=updates)


def _load_tools(config: ExtractionConfig):
    if not config.spec:
        raise ValueError("No OpenAPI spec given. Use --spec or a config with 'spec'.")

    return get_tools_from_openapi(
        config.spec,
        base_url=config.base_url,
        dereference=config.dereference,
        exclude_operation_ids=config.exclude_operation_ids,
        default_include=config.default_include,
    )


def extract_command(args):
    """Extract tool definitions and write them as JSON."""
    try:
        config = _resolve_config(args)
        tools = _load_tools(config)
    except (ToolExtractionError, ValueError, OSError) as e:
        logger.error(f"Error extracting tools: {e}")
        sys.exit(1)

    payload = json.dumps(
        [tool.model_dump(by_alias=True) for tool in tools],
        indent=DEFAULT_JSON_INDENT,
    )

    if config.output:
        with open(config.output, "w") as f:
            f.write(payload)
        logger.info(f"Wrote {len(tools)} tool definitions to {config.output}")
    else:
        print(payload)


def list_command(args):
    """List the tools an OpenAPI document produces."""
    try:
        config = _resolve_config(args)
        tools = _load_tools(config)
    except (ToolExtractionError, ValueError, OSError) as e:
        logger.error(f"Error extracting tools: {e}")
        sys.exit(1)

    if not tools:
        print("No tools found.")
        return

    print(f"Found {len(tools)} tool(s):")
    for tool in tools:
        print(f"  - {tool.name}  {tool.method.upper()} {tool.path_template}")


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="mcpforge - Extract MCP tool definitions from OpenAPI specs"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_common_args(parser):
        """Add arguments shared by every command."""
        parser.add_argument(
            "--spec",
            type=str,
            required=False,
            help="Path or URL of the OpenAPI document",
        )
        parser.add_argument(
            "--dereference",
            action="store_true",
            help="Resolve local $ref references before extraction",
        )
        parser.add_argument(
            "--default-exclude",
            action="store_true",
            help="Exclude operations that carry no x-mcp decision",
        )
        parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    # Extract command
    extract_parser = subparsers.add_parser(
        "extract", help="Extract tool definitions as JSON"
    )
    add_common_args(extract_parser)
    extract_parser.add_argument(
        "--config",
        type=str,
        required=False,
        help="Path to a JSON extraction configuration file",
    )
    extract_parser.add_argument(
        "--output", type=str, required=False, help="File to write the JSON to"
    )
    extract_parser.add_argument(
        "--base-url", type=str, required=False, help="Override the API base URL"
    )
    extract_parser.add_argument(
        "--exclude-operation-id",
        type=str,
        action="append",
        help="Operation identifier to leave out (repeatable)",
    )

    # List command
    list_parser = subparsers.add_parser(
        "list", help="List the tools an OpenAPI document produces"
    )
    add_common_args(list_parser)

    args = parser.parse_args()

    if args.command:
        setup_environment(debug=args.debug)

    # Execute command
    if args.command == "extract":
        extract_command(args)
    elif args.command == "list":
        list_command(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

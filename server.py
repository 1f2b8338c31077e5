#!/usr/bin/env python3
"""
Context7 Documentation MCP Server

An MCP server that resolves library names to Context7-compatible library IDs
and fetches up-to-date documentation and code examples for them.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from library_docs import (
    CONTEXT7_API_BASE_URL,
    ClientConfig,
    Context7Client,
    DocumentationRequest,
    __version__,
    format_search_response,
)

logger = logging.getLogger("c67-mcp")

# Constants
SERVER_NAME = "c67-mcp"
SERVER_INSTRUCTIONS = (
    "Use this server to retrieve up-to-date documentation and code examples for any library."
)

RESOLVE_LIBRARY_ID = "resolve-library-id"
GET_LIBRARY_DOCS = "get-library-docs"

DOCS_NOT_FOUND_MESSAGE = (
    "Documentation not found or not finalized for this library. This might have happened "
    "because you used an invalid Context7-compatible library ID. To get a valid "
    "Context7-compatible library ID, use the 'resolve-library-id' with the package name "
    "you wish to retrieve documentation for."
)


# ============================================================================
# Input Models (Pydantic v2)
# ============================================================================

class ResolveLibraryIdInput(BaseModel):
    """Input model for resolving a library name."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    library_name: StrictStr = Field(
        ...,
        alias="libraryName",
        description="Library name to search for and retrieve a Context7-compatible library ID.",
    )


class GetLibraryDocsInput(BaseModel):
    """Input model for fetching library documentation."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    library_id: StrictStr = Field(
        ...,
        alias="context7CompatibleLibraryID",
        description=(
            "Exact Context7-compatible library ID (e.g., '/mongodb/docs', '/vercel/next.js', "
            "'/supabase/supabase', '/vercel/next.js/v14.3.0-canary.87') retrieved from "
            "'resolve-library-id' or directly from user query in the format '/org/project' "
            "or '/org/project/version'."
        ),
    )
    tokens: Optional[int] = Field(
        default=None,
        description=(
            "Maximum number of tokens of documentation to retrieve (default: 5000). "
            "Higher values provide more context but consume more tokens."
        ),
    )
    topic: Optional[str] = Field(
        default=None,
        description="Topic to focus documentation on (e.g., 'hooks', 'routing').",
    )

    @field_validator("tokens", mode="before")
    @classmethod
    def _coerce_tokens(cls, value: Any) -> Optional[int]:
        # Only non-negative whole numbers count; anything else means "use the default"
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not value.is_integer():
            return None
        if value < 0:
            return None
        return int(value)

    @field_validator("topic", mode="before")
    @classmethod
    def _ignore_non_string_topic(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


# ============================================================================
# Tool Descriptors
# ============================================================================

RESOLVE_LIBRARY_ID_TOOL = types.Tool(
    name=RESOLVE_LIBRARY_ID,
    description="""Resolves a package/product name to a Context7-compatible library ID and returns a list of matching libraries.

You MUST call this function before 'get-library-docs' to obtain a valid Context7-compatible library ID UNLESS the user explicitly provides a library ID in the format '/org/project' or '/org/project/version' in their query.

Selection Process:
1. Analyze the query to understand what library/package the user is looking for
2. Return the most relevant match based on:
- Name similarity to the query (exact matches prioritized)
- Description relevance to the query's intent
- Documentation coverage (prioritize libraries with higher Code Snippet counts)
- Trust score (consider libraries with scores of 7-10 more authoritative)

Response Format:
- Return the selected library ID in a clearly marked section
- Provide a brief explanation for why this library was chosen
- If multiple good matches exist, acknowledge this but proceed with the most relevant one
- If no good matches exist, clearly state this and suggest query refinements

For ambiguous queries, request clarification before proceeding with a best-guess match.""",
    inputSchema={
        "type": "object",
        "properties": {
            "libraryName": {
                "type": "string",
                "description": ResolveLibraryIdInput.model_fields["library_name"].description,
            },
        },
        "required": ["libraryName"],
    },
)

GET_LIBRARY_DOCS_TOOL = types.Tool(
    name=GET_LIBRARY_DOCS,
    description=(
        "Fetches up-to-date documentation for a library. You must call 'resolve-library-id' "
        "first to obtain the exact Context7-compatible library ID required to use this tool, "
        "UNLESS the user explicitly provides a library ID in the format '/org/project' or "
        "'/org/project/version' in their query."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "context7CompatibleLibraryID": {
                "type": "string",
                "description": GetLibraryDocsInput.model_fields["library_id"].description,
            },
            "tokens": {
                "type": "number",
                "description": GetLibraryDocsInput.model_fields["tokens"].description,
            },
            "topic": {
                "type": "string",
                "description": GetLibraryDocsInput.model_fields["topic"].description,
            },
        },
        "required": ["context7CompatibleLibraryID"],
    },
)


# ============================================================================
# Tool Dispatcher
# ============================================================================

def _text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def _parse_arguments(model, arguments: Dict[str, Any], required: str):
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise McpError(
            types.ErrorData(code=types.INVALID_PARAMS, message=f"Missing {required} parameter")
        ) from e


class Context7Tools:
    """
    Dispatches MCP tool calls to the Context7 client.

    Holds no per-call state. Malformed calls raise McpError; every outcome
    of a well-formed call, upstream failures included, is returned as a
    successful result with a single text item.
    """

    def __init__(self, client: Context7Client):
        self._client = client

    def list_tools(self) -> List[types.Tool]:
        return [RESOLVE_LIBRARY_ID_TOOL, GET_LIBRARY_DOCS_TOOL]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> types.CallToolResult:
        """
        Run one tool call.

        Args:
            name: Tool name
            arguments: Raw tool arguments from the client

        Returns:
            Success result carrying one text content item

        Raises:
            McpError: INVALID_PARAMS for a missing required argument,
                      METHOD_NOT_FOUND for an unknown tool
        """
        arguments = arguments or {}

        if name == RESOLVE_LIBRARY_ID:
            params = _parse_arguments(ResolveLibraryIdInput, arguments, "libraryName")
            return _text_result(await self._resolve_library_id(params))

        if name == GET_LIBRARY_DOCS:
            params = _parse_arguments(GetLibraryDocsInput, arguments, "context7CompatibleLibraryID")
            return _text_result(await self._get_library_docs(params))

        raise McpError(
            types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}")
        )

    async def _resolve_library_id(self, params: ResolveLibraryIdInput) -> str:
        try:
            outcome = await self._client.search(params.library_name)
        except Exception as e:
            error_msg = f"Failed to retrieve library documentation data from Context7: {e}"
            logger.error(error_msg)
            return error_msg

        if outcome.error is not None:
            return outcome.error
        return format_search_response(outcome)

    async def _get_library_docs(self, params: GetLibraryDocsInput) -> str:
        request = DocumentationRequest(
            library_id=params.library_id,
            tokens=params.tokens,
            topic=params.topic,
        )

        try:
            documentation = await self._client.fetch_documentation(request)
        except Exception as e:
            error_msg = f"Error fetching library documentation: {e}"
            logger.error(error_msg)
            return error_msg

        if documentation is None:
            return DOCS_NOT_FOUND_MESSAGE
        return documentation


def create_server(client: Context7Client) -> Server:
    """
    Build the MCP server around a Context7 client.

    Args:
        client: Shared client used by every tool call

    Returns:
        Low-level MCP server with the tools capability registered
    """
    server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)
    tools = Context7Tools(client)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tools.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await tools.call_tool(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    # Registered directly so McpError is answered as a JSON-RPC error
    server.request_handlers[types.CallToolRequest] = call_tool

    return server


# ============================================================================
# Configuration
# ============================================================================

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="A Context7 documentation MCP server",
    )
    parser.add_argument(
        "--log-level",
        default="warn",
        help="Log level (logs to stderr)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for Context7 authentication (default: $CONTEXT7_API_KEY)",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging to stderr",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Enable verbose output to stderr",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Disable TLS certificate verification (insecure, for corporate MITM)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{SERVER_NAME} {__version__}",
    )
    return parser.parse_args(argv)


def resolve_log_level(log_level: str, debug: bool = False, verbose: int = 0) -> int:
    """
    Map CLI flags to a logging level.

    Without --debug or -v only warnings and errors are shown. -v applies
    --log-level; --debug always means DEBUG and ignores --log-level, and
    warnings stay visible even with neither flag set.
    """
    if debug:
        return logging.DEBUG
    if not verbose:
        return logging.WARNING

    name = log_level.strip().upper()
    name = {"WARN": "WARNING", "TRACE": "DEBUG"}.get(name, name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(args: argparse.Namespace) -> None:
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        level=resolve_log_level(args.log_level, args.debug, args.verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_config(args: argparse.Namespace) -> ClientConfig:
    return ClientConfig(
        api_key=args.api_key or os.getenv("CONTEXT7_API_KEY") or None,
        base_url=os.getenv("CONTEXT7_API_BASE_URL", CONTEXT7_API_BASE_URL),
        insecure=args.insecure,
    )


# ============================================================================
# Server Entry Point
# ============================================================================

async def main(config: ClientConfig) -> None:
    """Run the MCP server using stdio transport."""
    logger.info("Starting Context7 Documentation MCP Server (%s)", config.base_url)

    with Context7Client(config) as client:
        server = create_server(client)
        print("Context7 Documentation MCP Server running on stdio", file=sys.stderr)

        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options()
            )


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args)
    asyncio.run(main(build_config(args)))


if __name__ == "__main__":
    run()

# =============================================================================
# line_tools/mcp_server.py  -  MCP Server wiring (both error modes)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the ToolDispatcher over MCP.  The dispatcher does all the work;
#   this module only translates between MCP request/response types and the
#   dispatcher's plain dataclasses.
#
# TWO MODES:
#   a) Compatible (default) - create_server()
#      A low-level MCP Server with ONE call_tool handler.  Every CallTool,
#      including unknown names and bad arguments, reaches the dispatcher,
#      and every failure comes back inside the normal envelope as
#      {"error": "..."}.  The protocol result is never flagged as an error.
#      Input validation by the SDK is switched off (validate_input=False) so
#      the dispatcher's own messages reach the host.
#
#   b) Strict (LINE_MCP_STRICT_ERRORS=true) - create_strict_server()
#      A FastMCP server with one typed function per tool.  FastMCP rejects
#      schema violations itself, and dispatcher failures are raised as
#      ToolError, so the host sees isError=true.
#
# RUNNING THIS SERVER:
#   python main.py          (or the `line-mcp-server` console script)
#   The host launches it as a subprocess and speaks MCP over stdin/stdout.
# =============================================================================

import logging
from typing import Annotated, Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import Field

from line_core.dispatcher import ToolDispatcher
from line_core.logging_setup import log_request, log_response
from line_core.models import ToolFailure
from line_core.registry import (
    DEFAULT_HISTORY_COUNT,
    GET_GROUP_HISTORY_TOOL,
    GET_GROUP_PROFILE_TOOL,
    SEND_GROUP_MESSAGE_TOOL,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "LINE MCP Server"
SERVER_VERSION = "1.0.0"


# =============================================================================
# Compatible mode: low-level server, envelope-embedded errors
# =============================================================================
def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build the default MCP server around ``dispatcher``."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        logger.info("Received ListToolsRequest")
        return [types.Tool(**descriptor.to_dict()) for descriptor in dispatcher.list_tools()]

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[dict[str, Any]]) -> list[types.TextContent]:
        logger.info("Received CallToolRequest: %s", name)
        response = await dispatcher.handle(name, arguments)
        return [types.TextContent(**item) for item in response.to_dict()["content"]]

    return server


async def run_stdio(server: Server) -> None:
    """Serve ``server`` on stdin/stdout until the host closes the stream."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{SERVER_NAME} running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


# =============================================================================
# Strict mode: FastMCP, protocol-level errors
# =============================================================================
def create_strict_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Build a FastMCP server that reports tool failures as MCP errors."""
    mcp = FastMCP(SERVER_NAME)

    async def _run(tool_name: str, arguments: dict[str, Any]) -> str:
        log_request(tool_name, arguments)
        outcome = await dispatcher.call_tool(tool_name, arguments)
        log_response(tool_name, outcome.text)
        if isinstance(outcome, ToolFailure):
            raise ToolError(outcome.message)
        return outcome.text

    @mcp.tool(name=SEND_GROUP_MESSAGE_TOOL.name, description=SEND_GROUP_MESSAGE_TOOL.description)
    async def send_group_message(
        group_id: Annotated[str, Field(description="The ID of the group to send to")],
        message: Annotated[str, Field(description="The message content")],
    ) -> str:
        return await _run(SEND_GROUP_MESSAGE_TOOL.name, {"group_id": group_id, "message": message})

    @mcp.tool(name=GET_GROUP_PROFILE_TOOL.name, description=GET_GROUP_PROFILE_TOOL.description)
    async def get_group_profile(
        group_id: Annotated[str, Field(description="The ID of the group")],
    ) -> str:
        return await _run(GET_GROUP_PROFILE_TOOL.name, {"group_id": group_id})

    @mcp.tool(name=GET_GROUP_HISTORY_TOOL.name, description=GET_GROUP_HISTORY_TOOL.description)
    async def get_group_history(
        group_id: Annotated[str, Field(description="The ID of the group")],
        count: Annotated[
            float, Field(description=f"Number of messages to retrieve (default: {DEFAULT_HISTORY_COUNT})")
        ] = DEFAULT_HISTORY_COUNT,
    ) -> str:
        return await _run(GET_GROUP_HISTORY_TOOL.name, {"group_id": group_id, "count": count})

    return mcp

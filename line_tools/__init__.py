# =============================================================================
# line_tools/__init__.py
# =============================================================================
# This package is the MCP layer: it exposes line_core's ToolDispatcher as an
# MCP server.  It handles protocol types and transport only; validation,
# LINE calls and error formatting stay in line_core/.
# =============================================================================

from line_tools.mcp_server import (
    SERVER_NAME,
    SERVER_VERSION,
    create_server,
    create_strict_server,
    run_stdio,
)

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "create_server",
    "create_strict_server",
    "run_stdio",
]

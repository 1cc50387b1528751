# =============================================================================
# line_core/__init__.py
# =============================================================================
# This package contains the logic of the LINE MCP server: the LINE API
# client, the tool registry, and the dispatcher that connects them.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports the MCP SDK or FastMCP.  The dispatcher
#   takes a tool name and a dict and returns a plain dataclass, so it can be
#   driven from a test, a REPL, or any protocol server.  The wiring to MCP
#   lives in line_tools/.
# =============================================================================

from line_core.config import ConfigurationError, ServerConfig, load_config
from line_core.dispatcher import ToolDispatcher
from line_core.line_client import LINE_API_BASE_URL, LineClient
from line_core.registry import TOOLS

__all__ = [
    "ConfigurationError",
    "LINE_API_BASE_URL",
    "LineClient",
    "ServerConfig",
    "TOOLS",
    "ToolDispatcher",
    "load_config",
]

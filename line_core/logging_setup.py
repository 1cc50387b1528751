# =============================================================================
# line_core/logging_setup.py  -  Logging to STDERR
# =============================================================================
#
# The MCP server talks to its host over STDOUT (stdin/stdout is the MCP
# transport).  Anything else written to stdout corrupts the JSON-RPC stream,
# so every log line goes to STDERR.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + arguments)
#     - GREEN for response JSON
#     - YELLOW for intermediate status/progress messages
# =============================================================================

import json
import logging
import sys
from typing import Any

# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

LOG_FORMAT = "%(asctime)s [MCP] %(message)s"

logger = logging.getLogger("line_mcp")


def configure_logging(level: str = "INFO") -> None:
    """Send all log records to stderr at ``level``."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def log_request(tool_name: str, arguments: Any) -> None:
    """Log an incoming tool call with its arguments in CYAN."""
    if isinstance(arguments, dict):
        param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    else:
        param_str = repr(arguments)
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def log_response(tool_name: str, text: str) -> None:
    """Log the tool response payload as compact JSON in GREEN."""
    try:
        compact = json.dumps(json.loads(text), separators=(",", ":"), ensure_ascii=False)
    except ValueError:
        compact = text
    logger.info(f"{_GREEN}  ← {tool_name} response: {compact}{_RESET}")

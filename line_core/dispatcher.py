# =============================================================================
# line_core/dispatcher.py  -  Request Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps a CallTool request (tool name + arguments) to one LineClient
#   operation, and reports the result.
#
# HOW IT WORKS (the flow):
#   1. No arguments at all            → ToolFailure("No arguments provided")
#      Arguments not an object        → ToolFailure("Arguments must be an object")
#   2. Name not in the registry       → ToolFailure("Unknown tool: <name>")
#   3. Required field missing/empty   → ToolFailure("Missing required ...")
#   4. Declared field of wrong type   → ToolFailure("Invalid argument: ...")
#   5. Defaults filled in, LINE called
#   6. JSON body                      → ToolSuccess(body)
#      Any exception from the call    → ToolFailure(str(exc))
#
#   call_tool() returns the outcome as a VALUE; it never raises for a
#   per-request problem.  handle() is the one place where an outcome is
#   turned into the response envelope.
# =============================================================================

import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from line_core.line_client import LineClient
from line_core.logging_setup import log_request, log_response, log_status
from line_core.models import (
    ToolDescriptor,
    ToolFailure,
    ToolInvocationRequest,
    ToolInvocationResponse,
    ToolOutcome,
    ToolSuccess,
    to_response,
)
from line_core.registry import GET_GROUP_HISTORY, GET_GROUP_PROFILE, SEND_GROUP_MESSAGE, TOOLS

logger = logging.getLogger(__name__)

Operation = Callable[[LineClient, dict[str, Any]], Awaitable[Any]]

# Tool name → the LineClient call it forwards to.
_OPERATIONS: dict[str, Operation] = {
    SEND_GROUP_MESSAGE: lambda client, args: client.send_group_message(args["group_id"], args["message"]),
    GET_GROUP_PROFILE: lambda client, args: client.get_group_profile(args["group_id"]),
    GET_GROUP_HISTORY: lambda client, args: client.get_group_history(args["group_id"], args["count"]),
}


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _matches_type(value: Any, json_type: str) -> bool:
    if json_type == "string":
        return isinstance(value, str)
    if json_type == "number":
        # bool is an int subclass; JSON true/false is not a number
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return True


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def validate_arguments(descriptor: ToolDescriptor, arguments: dict[str, Any]) -> Optional[str]:
    """Check ``arguments`` against the descriptor's schema.

    Returns:
        None when the arguments are acceptable, otherwise the error message.
    """
    missing = [name for name in descriptor.required if _is_missing(arguments.get(name))]
    if missing:
        noun = "argument" if len(missing) == 1 else "arguments"
        return f"Missing required {noun}: {_join_names(missing)}"

    for arg in descriptor.arguments:
        value = arguments.get(arg.name)
        if value is not None and not _matches_type(value, arg.type):
            return f"Invalid argument: {arg.name} must be a {arg.type}"
    return None


def apply_defaults(descriptor: ToolDescriptor, arguments: dict[str, Any]) -> dict[str, Any]:
    """Return the declared arguments with defaults filled in; extras are dropped."""
    resolved = {}
    for arg in descriptor.arguments:
        value = arguments.get(arg.name)
        if value is None:
            value = arg.default
        elif isinstance(value, float) and value.is_integer():
            # JSON hosts often send 20.0 for 20
            value = int(value)
        resolved[arg.name] = value
    return resolved


class ToolDispatcher:
    """Routes tool invocations to the LINE client."""

    def __init__(self, client: LineClient, tools: Iterable[ToolDescriptor] = TOOLS):
        self._client = client
        self._tools: dict[str, ToolDescriptor] = {}
        for descriptor in tools:
            if descriptor.name in self._tools:
                raise ValueError(f"Tool '{descriptor.name}' is already registered")
            if descriptor.name not in _OPERATIONS:
                raise ValueError(f"No LINE operation for tool '{descriptor.name}'")
            self._tools[descriptor.name] = descriptor

    def list_tools(self) -> list[ToolDescriptor]:
        """All registered descriptors, in registration order."""
        return list(self._tools.values())

    async def call_tool(self, tool_name: str, arguments: Optional[dict[str, Any]]) -> ToolOutcome:
        """Validate and execute one tool call, returning its outcome."""
        if arguments is None:
            return ToolFailure("No arguments provided")
        if not isinstance(arguments, dict):
            return ToolFailure("Arguments must be an object")

        descriptor = self._tools.get(tool_name)
        if descriptor is None:
            return ToolFailure(f"Unknown tool: {tool_name}")

        problem = validate_arguments(descriptor, arguments)
        if problem is not None:
            return ToolFailure(problem)

        resolved = apply_defaults(descriptor, arguments)
        operation = _OPERATIONS[tool_name]
        try:
            value = await operation(self._client, resolved)
        except Exception as exc:
            logger.exception("Error executing tool %s", tool_name)
            return ToolFailure(str(exc) or exc.__class__.__name__)

        log_status(f"LINE API answered for {tool_name}")
        return ToolSuccess(value)

    async def handle(self, tool_name: str, arguments: Optional[dict[str, Any]]) -> ToolInvocationResponse:
        """Run a tool call and wrap the outcome in the response envelope."""
        log_request(tool_name, arguments)
        outcome = await self.call_tool(tool_name, arguments)
        if isinstance(outcome, ToolFailure):
            log_status(f"{tool_name} failed: {outcome.message}")
        response = to_response(outcome)
        log_response(tool_name, response.text)
        return response

    async def handle_request(self, request: ToolInvocationRequest) -> ToolInvocationResponse:
        return await self.handle(request.tool_name, request.arguments)

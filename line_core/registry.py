# =============================================================================
# line_core/registry.py  -  Tool Registry (what the host can call)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares the three LINE tools as ToolDescriptor values.  This is pure
#   data: ListTools returns TOOLS verbatim, and the dispatcher validates
#   every CallTool against the argument list declared here.
# =============================================================================

from line_core.models import ToolArgument, ToolDescriptor

SEND_GROUP_MESSAGE = "send-group-message"
GET_GROUP_PROFILE = "get-group-profile"
GET_GROUP_HISTORY = "get-group-history"

DEFAULT_HISTORY_COUNT = 10


SEND_GROUP_MESSAGE_TOOL = ToolDescriptor(
    name=SEND_GROUP_MESSAGE,
    description="Send a message to a LINE group",
    arguments=(
        ToolArgument("group_id", "string", "The ID of the group to send to", required=True),
        ToolArgument("message", "string", "The message content", required=True),
    ),
)

GET_GROUP_PROFILE_TOOL = ToolDescriptor(
    name=GET_GROUP_PROFILE,
    description="Get profile information of a LINE group",
    arguments=(
        ToolArgument("group_id", "string", "The ID of the group", required=True),
    ),
)

GET_GROUP_HISTORY_TOOL = ToolDescriptor(
    name=GET_GROUP_HISTORY,
    description="Get message history of a LINE group",
    arguments=(
        ToolArgument("group_id", "string", "The ID of the group", required=True),
        ToolArgument(
            "count",
            "number",
            f"Number of messages to retrieve (default: {DEFAULT_HISTORY_COUNT})",
            default=DEFAULT_HISTORY_COUNT,
        ),
    ),
)

# Order is part of the ListTools contract.
TOOLS: tuple[ToolDescriptor, ...] = (
    SEND_GROUP_MESSAGE_TOOL,
    GET_GROUP_PROFILE_TOOL,
    GET_GROUP_HISTORY_TOOL,
)

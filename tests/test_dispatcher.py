"""Tests for ToolDispatcher: validation, routing, and the response envelope."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from line_core.dispatcher import ToolDispatcher, apply_defaults, validate_arguments
from line_core.line_client import LineClient
from line_core.models import (
    ToolDescriptor,
    ToolFailure,
    ToolInvocationRequest,
    ToolSuccess,
    to_response,
)
from line_core.registry import GET_GROUP_HISTORY_TOOL, SEND_GROUP_MESSAGE_TOOL, TOOLS


def _payload(response) -> dict:
    """Decode the single text item of an envelope."""
    assert len(response.content) == 1
    assert response.content[0].type == "text"
    return json.loads(response.content[0].text)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

class TestEnvelope:

    def test_success_envelope(self):
        response = to_response(ToolSuccess({"groupName": "Team"}))
        assert response.to_dict() == {"content": [{"type": "text", "text": '{"groupName": "Team"}'}]}

    def test_failure_envelope_has_same_shape(self):
        response = to_response(ToolFailure("boom"))
        assert list(response.to_dict()) == ["content"]
        assert _payload(response) == {"error": "boom"}


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

class TestValidateArguments:

    def test_accepts_complete_arguments(self):
        assert validate_arguments(SEND_GROUP_MESSAGE_TOOL, {"group_id": "G1", "message": "hi"}) is None

    def test_single_missing_field(self):
        problem = validate_arguments(SEND_GROUP_MESSAGE_TOOL, {"group_id": "G1"})
        assert problem == "Missing required argument: message"

    def test_all_missing_fields_named(self):
        problem = validate_arguments(SEND_GROUP_MESSAGE_TOOL, {})
        assert problem == "Missing required arguments: group_id and message"

    def test_empty_string_counts_as_missing(self):
        problem = validate_arguments(SEND_GROUP_MESSAGE_TOOL, {"group_id": "", "message": "hi"})
        assert problem == "Missing required argument: group_id"

    def test_wrong_string_type(self):
        problem = validate_arguments(SEND_GROUP_MESSAGE_TOOL, {"group_id": 42, "message": "hi"})
        assert problem == "Invalid argument: group_id must be a string"

    @pytest.mark.parametrize("count", ["10", True, [10]])
    def test_wrong_number_type(self, count):
        problem = validate_arguments(GET_GROUP_HISTORY_TOOL, {"group_id": "G1", "count": count})
        assert problem == "Invalid argument: count must be a number"

    def test_apply_defaults(self):
        assert apply_defaults(GET_GROUP_HISTORY_TOOL, {"group_id": "G1", "extra": 1}) == {
            "group_id": "G1",
            "count": 10,
        }

    def test_integral_float_becomes_int(self):
        assert apply_defaults(GET_GROUP_HISTORY_TOOL, {"group_id": "G1", "count": 20.0})["count"] == 20


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatcherConstruction:

    @pytest.fixture
    def mock_dispatcher(self):
        return ToolDispatcher(MagicMock(spec=LineClient))

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            ToolDispatcher(MagicMock(spec=LineClient), tools=(SEND_GROUP_MESSAGE_TOOL, SEND_GROUP_MESSAGE_TOOL))

    def test_tool_without_operation_rejected(self):
        with pytest.raises(ValueError, match="No LINE operation"):
            ToolDispatcher(MagicMock(spec=LineClient), tools=(ToolDescriptor("line_leave_group", "Leave"),))

    def test_list_tools_is_registry_order(self, mock_dispatcher):
        assert mock_dispatcher.list_tools() == list(TOOLS)

    def test_list_tools_is_idempotent(self, mock_dispatcher):
        first = [tool.to_dict() for tool in mock_dispatcher.list_tools()]
        second = [tool.to_dict() for tool in mock_dispatcher.list_tools()]
        assert first == second


class TestCallTool:

    @pytest.mark.asyncio
    async def test_no_arguments(self, dispatcher, line_api):
        outcome = await dispatcher.call_tool("get-group-profile", None)
        assert outcome == ToolFailure("No arguments provided")
        assert line_api.requests == []

    @pytest.mark.asyncio
    async def test_missing_arguments_checked_before_tool_name(self, dispatcher):
        outcome = await dispatcher.call_tool("line_unknown", None)
        assert outcome == ToolFailure("No arguments provided")

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, line_api):
        outcome = await dispatcher.call_tool("line_delete_group", {"group_id": "G1"})
        assert outcome == ToolFailure("Unknown tool: line_delete_group")
        assert line_api.requests == []

    @pytest.mark.asyncio
    async def test_non_object_arguments(self, dispatcher):
        outcome = await dispatcher.call_tool("get-group-profile", ["G1"])
        assert outcome == ToolFailure("Arguments must be an object")

    @pytest.mark.asyncio
    async def test_non_object_arguments_checked_before_tool_name(self, dispatcher, line_api):
        outcome = await dispatcher.call_tool("line_unknown", ["G1"])
        assert outcome == ToolFailure("Arguments must be an object")
        assert line_api.requests == []

    @pytest.mark.asyncio
    async def test_missing_required_field_never_calls_line(self, dispatcher, line_api):
        outcome = await dispatcher.call_tool("send-group-message", {"group_id": "G1"})
        assert outcome == ToolFailure("Missing required argument: message")
        assert line_api.requests == []

    @pytest.mark.asyncio
    async def test_send_group_message(self, dispatcher, line_api):
        line_api.body = {"sentMessages": [{"id": "468789577898262530"}]}

        outcome = await dispatcher.call_tool("send-group-message", {"group_id": "G1", "message": "hi"})

        assert outcome == ToolSuccess({"sentMessages": [{"id": "468789577898262530"}]})
        assert len(line_api.requests) == 1
        assert line_api.last_request.url.path.endswith("/message/push")
        assert line_api.last_json() == {"to": "G1", "messages": [{"type": "text", "text": "hi"}]}

    @pytest.mark.asyncio
    async def test_history_uses_default_count(self, dispatcher, line_api):
        await dispatcher.call_tool("get-group-history", {"group_id": "G1"})
        assert line_api.last_request.url.params["count"] == "10"

    @pytest.mark.asyncio
    async def test_history_passes_count(self, dispatcher, line_api):
        await dispatcher.call_tool("get-group-history", {"group_id": "G1", "count": 3})
        assert line_api.last_request.url.params["count"] == "3"

    @pytest.mark.asyncio
    async def test_network_error_becomes_failure(self, dispatcher, line_api):
        line_api.error = httpx.ConnectError("Connection refused")
        outcome = await dispatcher.call_tool("get-group-profile", {"group_id": "G1"})
        assert outcome == ToolFailure("Connection refused")

    @pytest.mark.asyncio
    async def test_malformed_body_becomes_failure(self, dispatcher, line_api):
        line_api.raw = b"not json"
        outcome = await dispatcher.call_tool("get-group-profile", {"group_id": "G1"})
        assert isinstance(outcome, ToolFailure)
        assert outcome.message

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_class_name(self):
        client = MagicMock(spec=LineClient)
        client.get_group_profile = AsyncMock(side_effect=TimeoutError())
        outcome = await ToolDispatcher(client).call_tool("get-group-profile", {"group_id": "G1"})
        assert outcome == ToolFailure("TimeoutError")

    @pytest.mark.asyncio
    async def test_routes_to_matching_client_method(self):
        client = MagicMock(spec=LineClient)
        client.get_group_history = AsyncMock(return_value={"messages": []})

        outcome = await ToolDispatcher(client).call_tool(
            "get-group-history", {"group_id": "G7", "count": 5}
        )

        client.get_group_history.assert_awaited_once_with("G7", 5)
        assert outcome == ToolSuccess({"messages": []})


class TestHandle:

    @pytest.mark.asyncio
    async def test_success_text_is_serialized_response(self, dispatcher, line_api):
        line_api.body = {"groupId": "G1", "groupName": "Team"}
        response = await dispatcher.handle("get-group-profile", {"group_id": "G1"})
        assert _payload(response) == {"groupId": "G1", "groupName": "Team"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [None, {}])
    async def test_bad_arguments_reported_in_envelope(self, dispatcher, arguments):
        response = await dispatcher.handle("get-group-profile", arguments)
        assert "error" in _payload(response)

    @pytest.mark.asyncio
    async def test_unknown_tool_text(self, dispatcher):
        response = await dispatcher.handle("nope", {})
        assert "Unknown tool: nope" in response.content[0].text

    @pytest.mark.asyncio
    async def test_remote_failure_reported_in_envelope(self, dispatcher, line_api):
        line_api.error = httpx.ReadTimeout("timed out")
        response = await dispatcher.handle("send-group-message", {"group_id": "G1", "message": "hi"})
        assert _payload(response) == {"error": "timed out"}

    @pytest.mark.asyncio
    async def test_line_error_body_passes_through_as_success(self, dispatcher, line_api):
        line_api.status_code = 404
        line_api.body = {"message": "Not found"}
        response = await dispatcher.handle("get-group-profile", {"group_id": "G404"})
        assert _payload(response) == {"message": "Not found"}

    @pytest.mark.asyncio
    async def test_handle_request(self, dispatcher, line_api):
        line_api.body = {"messages": []}
        response = await dispatcher.handle_request(
            ToolInvocationRequest(tool_name="get-group-history", arguments={"group_id": "G1"})
        )
        assert _payload(response) == {"messages": []}

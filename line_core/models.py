# =============================================================================
# line_core/models.py  -  Data Models (the "nouns" of the server)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# between the MCP host, the dispatcher and the LINE API client.  They are
# frozen: a descriptor registered at startup is never mutated afterwards, and
# a dispatch outcome is a value, not an object with behaviour.
#
# THE TWO OUTCOMES:
#   Every tool call ends in exactly one of:
#     - ToolSuccess  →  the parsed JSON body LINE sent back
#     - ToolFailure  →  a human-readable error message
#   Both are rendered into the SAME envelope shape by to_response().  The
#   host tells them apart only by reading the text payload.
# =============================================================================

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union


# -----------------------------------------------------------------------------
# ToolArgument - one field of a tool's input schema
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolArgument:
    """A single argument a tool accepts."""

    name: str                          # "group_id"
    type: str                          # JSON-Schema primitive: "string" | "number"
    description: str
    required: bool = False
    default: Optional[Any] = None      # Applied by the dispatcher when absent

    def to_schema(self) -> dict:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.default is not None:
            schema["default"] = self.default
        return schema


# -----------------------------------------------------------------------------
# ToolDescriptor - what ListTools returns for one tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described operation the host can invoke.

    The JSON schema is rebuilt on every access of ``input_schema`` so a
    caller that edits the returned dict cannot change the registry.
    """

    name: str
    description: str
    arguments: tuple[ToolArgument, ...] = ()

    @property
    def required(self) -> list[str]:
        return [arg.name for arg in self.arguments if arg.required]

    @property
    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {arg.name: arg.to_schema() for arg in self.arguments},
            "required": self.required,
        }

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ToolInvocationRequest:
    """An incoming CallTool request, already parsed by the transport."""

    tool_name: str
    arguments: Optional[dict[str, Any]] = None


# -----------------------------------------------------------------------------
# Dispatch outcomes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolSuccess:
    """The LINE API answered; ``value`` is its JSON body, untouched."""

    value: Any

    @property
    def text(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)


@dataclass(frozen=True)
class ToolFailure:
    """The call could not be completed; ``message`` says why."""

    message: str

    @property
    def text(self) -> str:
        return json.dumps({"error": self.message}, ensure_ascii=False)


ToolOutcome = Union[ToolSuccess, ToolFailure]


# -----------------------------------------------------------------------------
# ToolInvocationResponse - the envelope sent back for every CallTool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolInvocationResponse:
    """``{content: [{type: "text", text: ...}]}`` for success AND failure."""

    content: tuple[TextContent, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.content)

    def to_dict(self) -> dict:
        return {"content": [{"type": item.type, "text": item.text} for item in self.content]}


def to_response(outcome: ToolOutcome) -> ToolInvocationResponse:
    """Render a dispatch outcome as the uniform response envelope."""
    return ToolInvocationResponse(content=(TextContent(text=outcome.text),))

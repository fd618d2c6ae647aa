"""Pydantic models shared by the orchestrator, the tools and the decoder.

Wire-facing models (``ArtifactPayload``, ``Reference``) use camelCase aliases
because the same JSON travels through the model prompt, the offline templates
and the HTTP API.  Python code always uses the snake_case attribute names.
"""

from __future__ import annotations

import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ── Tool catalog ─────────────────────────────────────────────────────


class ToolParameter(BaseModel):
    """One typed argument of a tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["string", "integer", "number", "boolean"] = "string"
    description: str = ""
    required: bool = True


class ToolDeclaration(BaseModel):
    """Name, description and parameter schema of a tool the model may call."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    @property
    def required_parameters(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def to_function_spec(self) -> dict[str, Any]:
        """Render the declaration in the OpenAI function-calling format.

        LangChain chat models (Anthropic included) accept this shape in
        ``bind_tools`` and convert it to their provider's native schema.
        """
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            properties[param.name] = prop

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": self.required_parameters,
                },
            },
        }


# ── Conversation ─────────────────────────────────────────────────────


class ToolInvocation(BaseModel):
    """A tool call requested by the model inside an assistant turn."""

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    call_id: str = Field(default_factory=lambda: f"call_{uuid.uuid4().hex[:12]}")


class ToolResult(BaseModel):
    """The outcome of one ``ToolInvocation``, matched to it by ``call_id``."""

    call_id: str
    tool_name: str
    payload: Any = None
    is_error: bool = False

    @classmethod
    def failure(cls, invocation: ToolInvocation, message: str) -> ToolResult:
        """Build the error-shaped result the model sees for a failed call."""
        return cls(
            call_id=invocation.call_id,
            tool_name=invocation.tool_name,
            payload={"error": message},
            is_error=True,
        )


class ConversationTurn(BaseModel):
    """One role-tagged entry of the transcript sent to the backend.

    A turn carries plain text, tool invocations (assistant turns, possibly
    alongside text) or tool results (user turns), never both invocations
    and results.
    """

    role: Literal["user", "assistant"]
    text: str = ""
    invocations: list[ToolInvocation] = Field(default_factory=list)
    results: list[ToolResult] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_content(self) -> ConversationTurn:
        if self.invocations and self.role != "assistant":
            raise ValueError("only assistant turns may carry tool invocations")
        if self.results and self.role != "user":
            raise ValueError("only user turns may carry tool results")
        return self

    @classmethod
    def user(cls, text: str) -> ConversationTurn:
        return cls(role="user", text=text)

    @property
    def has_invocations(self) -> bool:
        return bool(self.invocations)


# ── Decoded response parts ───────────────────────────────────────────


class ArtifactPayload(BaseModel):
    """Generated document/slide/audio/video bundle."""

    model_config = ConfigDict(populate_by_name=True)

    document_content: str = Field("", alias="documentContent")
    presentation_content: str = Field("", alias="presentationContent")
    audio_content: str | None = Field(None, alias="audioContent")
    video_uri: str | None = Field(None, alias="videoUri")
    video_prompt: str | None = Field(None, alias="videoPrompt")

    def to_wire(self) -> dict[str, Any]:
        """camelCase dict without unset media fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


ReferenceType = Literal["crm", "email", "file", "news", "meeting"]


class Reference(BaseModel):
    """Citation of a (simulated) data source used for an answer."""

    model_config = ConfigDict(populate_by_name=True)

    type: ReferenceType
    title: str
    key_point: str = Field(..., alias="keyPoint")
    url: str | None = None
    id: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DecodedResponse(BaseModel):
    """Final assistant text split into its display and structured parts."""

    display_text: str
    reasoning: list[str] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)
    artifact: ArtifactPayload | None = None

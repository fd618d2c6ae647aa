"""Chat backend contract and its LangChain/Anthropic implementation.

The orchestrator only knows ``ChatBackend.complete``: it sends the full
transcript, the tool catalog and the system instruction, and gets back the
model's text plus any tool invocations.  The backend is stateless between
calls, so the transcript must be complete every time.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Protocol

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from pydantic import BaseModel, Field

from velocity.config import ANTHROPIC_API_KEY, MODEL_NAME
from velocity.models import ConversationTurn, ToolDeclaration, ToolInvocation
from velocity.services.metrics import metrics

logger = logging.getLogger(__name__)


class BackendUnavailableError(Exception):
    """Raised when the chat backend is not configured or cannot be reached."""


class BackendRequest(BaseModel):
    history: list[ConversationTurn]
    tools: list[ToolDeclaration] = Field(default_factory=list)
    system_instruction: str = ""


class BackendResponse(BaseModel):
    text: str = ""
    invocations: list[ToolInvocation] = Field(default_factory=list)

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(role="assistant", text=self.text, invocations=self.invocations)


class ChatBackend(Protocol):
    async def complete(self, request: BackendRequest) -> BackendResponse: ...


# ── Transcript conversion ────────────────────────────────────────────


def _result_content(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, default=str)


def to_langchain_messages(request: BackendRequest) -> list[BaseMessage]:
    """Convert the transcript into LangChain messages.

    A result turn becomes one ``ToolMessage`` per result; LangChain merges
    consecutive tool messages back into a single provider-side turn.
    """
    messages: list[BaseMessage] = []
    if request.system_instruction:
        messages.append(SystemMessage(content=request.system_instruction))

    for turn in request.history:
        if turn.role == "assistant":
            messages.append(
                AIMessage(
                    content=turn.text,
                    tool_calls=[
                        {"name": inv.tool_name, "args": inv.arguments, "id": inv.call_id}
                        for inv in turn.invocations
                    ],
                )
            )
        elif turn.results:
            for result in turn.results:
                messages.append(
                    ToolMessage(
                        content=_result_content(result.payload),
                        tool_call_id=result.call_id,
                        name=result.tool_name,
                        status="error" if result.is_error else "success",
                    )
                )
        else:
            messages.append(HumanMessage(content=turn.text))
    return messages


def message_text(message: BaseMessage) -> str:
    """Plain text of a message whose content may be a list of blocks."""
    content = message.content
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def from_ai_message(message: AIMessage) -> BackendResponse:
    invocations = [
        ToolInvocation(
            tool_name=call["name"],
            arguments=call.get("args") or {},
            call_id=call.get("id") or f"call_{uuid.uuid4().hex[:12]}",
        )
        for call in (message.tool_calls or [])
    ]
    return BackendResponse(text=message_text(message), invocations=invocations)


# ── Anthropic backend ────────────────────────────────────────────────


def build_chat_model(api_key: str | None = None, model: str | None = None) -> BaseChatModel:
    """Build the primary chat model used by the tool-calling loop."""
    api_key = api_key or ANTHROPIC_API_KEY
    if not api_key:
        raise BackendUnavailableError("ANTHROPIC_API_KEY is not configured")
    return ChatAnthropic(
        model=model or MODEL_NAME,
        api_key=api_key,
        temperature=0.2,
        max_tokens=4096,
    )


class LangChainBackend:
    """``ChatBackend`` backed by any LangChain chat model with tool calling.

    The model is built lazily so a missing credential surfaces as
    ``BackendUnavailableError`` on the first request instead of at startup.
    """

    def __init__(self, llm: BaseChatModel | None = None, *, api_key: str | None = None) -> None:
        self._llm = llm
        self._api_key = api_key

    def _model(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = build_chat_model(api_key=self._api_key)
        return self._llm

    async def complete(self, request: BackendRequest) -> BackendResponse:
        llm = self._model()
        bound = llm.bind_tools([tool.to_function_spec() for tool in request.tools]) if request.tools else llm
        messages = to_langchain_messages(request)

        with metrics.timer("anthropic", "chat_completion"):
            reply = await bound.ainvoke(messages)

        response = from_ai_message(reply)
        logger.debug(
            "Backend replied: %d chars, %d tool call(s)",
            len(response.text), len(response.invocations),
        )
        return response

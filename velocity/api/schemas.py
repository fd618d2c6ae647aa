"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from velocity.models import ConversationTurn
from velocity.services.artifact_store import ArtifactRecord


class HistoryMessage(BaseModel):
    """A previous exchange, as displayed in the chat window."""

    role: Literal["user", "assistant"]
    text: str = Field(..., max_length=20_000)

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(role=self.role, text=self.text)


class ChatRequest(BaseModel):
    """Incoming chat message from the frontend."""

    message: str = Field(..., min_length=1, max_length=4000, description="The user's message")
    history: list[HistoryMessage] = Field(
        default_factory=list,
        max_length=100,
        description="Earlier messages of this conversation, oldest first",
    )


class ChatResponse(BaseModel):
    """Decoded reply of the copilot."""

    reply: str = Field(..., description="Visible text with tagged blocks removed")
    reasoning: list[str] = Field(default_factory=list)
    references: list[dict[str, Any]] = Field(default_factory=list)
    artifact: dict[str, Any] | None = None
    artifact_id: str | None = Field(None, description="Saved artifact, when one was generated")
    offline: bool = False


class ArtifactResponse(BaseModel):
    id: str
    title: str
    kind: str
    status: str
    company_name: str
    created_at: datetime
    last_modified: datetime
    content: dict[str, Any]

    @classmethod
    def from_record(cls, record: ArtifactRecord) -> ArtifactResponse:
        return cls(
            id=record.id,
            title=record.title,
            kind=record.kind,
            status=record.status,
            company_name=record.company_name,
            created_at=record.created_at,
            last_modified=record.last_modified,
            content=record.content.to_wire(),
        )


class RefineRequest(BaseModel):
    selected_text: str = Field(..., min_length=1)
    instruction: str = Field(..., min_length=1, max_length=2000)


class EmailDraftResponse(BaseModel):
    artifact_id: str
    email: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "velocity-copilot"

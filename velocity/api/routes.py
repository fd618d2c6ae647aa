"""FastAPI route definitions for the Velocity copilot API."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Request

from velocity.api.schemas import (
    ArtifactResponse,
    ChatRequest,
    ChatResponse,
    EmailDraftResponse,
    HealthResponse,
    RefineRequest,
)
from velocity.services.artifact_store import ArtifactRecord, new_artifact_record

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_orchestrator(request: Request):
    """Retrieve the orchestrator built during the FastAPI lifespan."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=503,
            detail="The copilot is still starting up. Please try again in a moment.",
        )
    return orchestrator


def _get_artifact(request: Request, artifact_id: str) -> ArtifactRecord:
    record = request.app.state.artifacts.get(artifact_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Artifact not found.")
    return record


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """Run one message through the copilot and return the decoded reply.

    The server keeps no conversation state: the client sends the earlier
    messages in ``history``.  A generated artifact is saved to the
    artifact repository and its id returned as ``artifact_id``.
    """
    orchestrator = _get_orchestrator(http_request)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        history = [m.to_turn() for m in request.history]
        result = await orchestrator.run(request.message, history=history)
        decoded = result.decode()

        artifact_id = None
        if decoded.artifact is not None:
            record = new_artifact_record(
                decoded.artifact,
                kind=result.artifact_kind,
                company_name=result.company_name,
            )
            http_request.app.state.artifacts.save(record)
            artifact_id = record.id
            logger.info("[%s] Saved artifact %s (%s)", request_id, record.id, record.title)

        return ChatResponse(
            reply=decoded.display_text,
            reasoning=decoded.reasoning,
            references=[ref.to_wire() for ref in decoded.references],
            artifact=decoded.artifact.to_wire() if decoded.artifact else None,
            artifact_id=artifact_id,
            offline=result.offline,
        )

    except HTTPException:
        raise
    except Exception as e:
        # Full traceback stays in the server log only
        logger.exception("[%s] Error processing chat request", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e


@router.get("/artifacts", response_model=list[ArtifactResponse])
async def list_artifacts(http_request: Request):
    """All saved artifacts, most recently modified first."""
    return [ArtifactResponse.from_record(r) for r in http_request.app.state.artifacts.list()]


@router.get("/artifacts/{artifact_id}", response_model=ArtifactResponse)
async def get_artifact(artifact_id: str, http_request: Request):
    return ArtifactResponse.from_record(_get_artifact(http_request, artifact_id))


@router.post("/artifacts/{artifact_id}/refine", response_model=ArtifactResponse)
async def refine_artifact(artifact_id: str, request: RefineRequest, http_request: Request):
    """Rewrite the artifact document around a selected passage."""
    record = _get_artifact(http_request, artifact_id)
    generator = http_request.app.state.generator

    updated_document = await generator.refine(
        record.content.document_content,
        request.selected_text,
        request.instruction,
    )
    updated = record.model_copy(
        update={
            "content": record.content.model_copy(update={"document_content": updated_document}),
            "last_modified": datetime.now(UTC),
        }
    )
    http_request.app.state.artifacts.save(updated)
    return ArtifactResponse.from_record(updated)


@router.post("/artifacts/{artifact_id}/email", response_model=EmailDraftResponse)
async def draft_artifact_email(artifact_id: str, http_request: Request):
    """Draft a cover email for sending the artifact to the client."""
    record = _get_artifact(http_request, artifact_id)
    generator = http_request.app.state.generator
    email = await generator.draft_cover_email(record.company_name, record.title)
    return EmailDraftResponse(artifact_id=record.id, email=email)

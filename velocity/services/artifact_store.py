"""Repository for generated artifacts.

The orchestrator never stores artifacts itself; whoever consumes its output
(the HTTP API, the CLI) gets an ``ArtifactRepository`` injected and decides
what to keep.  ``InMemoryArtifactRepository`` is the default and is purely
ephemeral.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Literal, Protocol

from pydantic import BaseModel, Field

from velocity.models import ArtifactPayload

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class ArtifactRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    kind: str
    status: Literal["Draft", "In Review", "Finalized"] = "Draft"
    company_name: str
    created_at: datetime = Field(default_factory=_now)
    last_modified: datetime = Field(default_factory=_now)
    content: ArtifactPayload


class ArtifactRepository(Protocol):
    def save(self, artifact: ArtifactRecord) -> None: ...

    def list(self) -> list[ArtifactRecord]: ...

    def get(self, artifact_id: str) -> ArtifactRecord | None: ...


def new_artifact_record(
    content: ArtifactPayload,
    *,
    kind: str | None = None,
    company_name: str | None = None,
) -> ArtifactRecord:
    """Build a draft record titled ``"<Kind> for <Company>"``."""
    kind = kind or "Generic"
    company = company_name or "Client"
    return ArtifactRecord(
        title=f"{kind} for {company}",
        kind=kind,
        company_name=company_name or "Unknown",
        content=content,
    )


class InMemoryArtifactRepository:
    """Thread-safe dict-backed repository."""

    def __init__(self) -> None:
        self._store: dict[str, ArtifactRecord] = {}
        self._lock = threading.Lock()

    def save(self, artifact: ArtifactRecord) -> None:
        """Insert or replace by id."""
        with self._lock:
            self._store[artifact.id] = artifact
        logger.debug("Saved artifact %s (%s)", artifact.id, artifact.title)

    def list(self) -> list[ArtifactRecord]:
        """All artifacts, most recently modified first."""
        with self._lock:
            records = list(self._store.values())
        return sorted(records, key=lambda a: a.last_modified, reverse=True)

    def get(self, artifact_id: str) -> ArtifactRecord | None:
        with self._lock:
            return self._store.get(artifact_id)

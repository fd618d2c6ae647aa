"""Tests for artifact records and the in-memory repository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from velocity.models import ArtifactPayload
from velocity.services.artifact_store import InMemoryArtifactRepository, new_artifact_record


def _payload(doc: str = "# Doc") -> ArtifactPayload:
    return ArtifactPayload(document_content=doc, presentation_content="# Slides")


class TestNewArtifactRecord:
    def test_title_from_kind_and_company(self):
        record = new_artifact_record(_payload(), kind="Proposal", company_name="Acme Corp")
        assert record.title == "Proposal for Acme Corp"
        assert record.kind == "Proposal"
        assert record.company_name == "Acme Corp"
        assert record.status == "Draft"
        assert record.last_modified >= record.created_at

    def test_defaults_when_kind_and_company_unknown(self):
        record = new_artifact_record(_payload())
        assert record.title == "Generic for Client"
        assert record.company_name == "Unknown"

    def test_ids_are_unique(self):
        assert new_artifact_record(_payload()).id != new_artifact_record(_payload()).id


class TestInMemoryRepository:
    def test_save_and_get(self):
        repo = InMemoryArtifactRepository()
        record = new_artifact_record(_payload(), kind="Email", company_name="Litware Inc")
        repo.save(record)
        assert repo.get(record.id) == record
        assert repo.get("missing") is None

    def test_save_replaces_by_id(self):
        repo = InMemoryArtifactRepository()
        record = new_artifact_record(_payload("v1"))
        repo.save(record)
        repo.save(record.model_copy(update={"content": _payload("v2")}))
        assert len(repo.list()) == 1
        assert repo.get(record.id).content.document_content == "v2"

    def test_list_is_newest_first(self):
        repo = InMemoryArtifactRepository()
        now = datetime.now(UTC)
        old = new_artifact_record(_payload()).model_copy(update={"last_modified": now - timedelta(hours=1)})
        new = new_artifact_record(_payload()).model_copy(update={"last_modified": now})
        repo.save(old)
        repo.save(new)
        assert [r.id for r in repo.list()] == [new.id, old.id]

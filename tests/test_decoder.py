"""Tests for the tagged response decoder."""

from __future__ import annotations

import json

from velocity.decoder import (
    ARTIFACT_ACKNOWLEDGEMENT,
    decode_response,
    parse_reasoning,
    split_blocks,
)
from velocity.models import ArtifactPayload, Reference
from velocity.templates import format_tagged_response

REFS_JSON = json.dumps([
    {"type": "crm", "title": "CRM: Acme Corp", "keyPoint": "Budget: $200k", "id": "ref-1"},
    {"type": "news", "title": "Press", "keyPoint": "Expansion", "url": "https://example.com"},
])
ARTIFACT_JSON = json.dumps({"documentContent": "# Doc", "presentationContent": "# Slides"})


# ── Plain text ───────────────────────────────────────────────────────


class TestPlainText:
    def test_text_without_tags_is_unchanged(self):
        decoded = decode_response("Sure, happy to help.")
        assert decoded.display_text == "Sure, happy to help."
        assert decoded.reasoning == []
        assert decoded.references == []
        assert decoded.artifact is None

    def test_empty_text(self):
        decoded = decode_response("")
        assert decoded.display_text == ""
        assert decoded.artifact is None

    def test_stray_angle_brackets_stay_visible(self):
        decoded = decode_response("Revenue < 5M and <b>bold</b>")
        assert decoded.display_text == "Revenue < 5M and <b>bold</b>"


# ── Individual blocks ────────────────────────────────────────────────


class TestBlocks:
    def test_reasoning_steps_strip_bullets_and_blank_lines(self):
        text = "<reasoning>\n- Look up lead\n\n  -   Check pricing  \nDraft\n</reasoning>Done."
        decoded = decode_response(text)
        assert decoded.reasoning == ["Look up lead", "Check pricing", "Draft"]
        assert decoded.display_text == "Done."

    def test_references_are_parsed_with_camel_case_keys(self):
        decoded = decode_response(f"<references>{REFS_JSON}</references>Here you go")
        assert len(decoded.references) == 2
        assert decoded.references[0].key_point == "Budget: $200k"
        assert decoded.references[1].url == "https://example.com"
        assert decoded.display_text == "Here you go"

    def test_artifact_only_gets_acknowledgement(self):
        decoded = decode_response(f"<artifact_payload>{ARTIFACT_JSON}</artifact_payload>")
        assert decoded.artifact is not None
        assert decoded.artifact.document_content == "# Doc"
        assert decoded.display_text == ARTIFACT_ACKNOWLEDGEMENT

    def test_blocks_in_any_order(self):
        text = (
            f"<artifact_payload>{ARTIFACT_JSON}</artifact_payload>"
            "Intro "
            "<reasoning>- a</reasoning>"
            f"<references>{REFS_JSON}</references>"
        )
        decoded = decode_response(text)
        assert decoded.reasoning == ["a"]
        assert len(decoded.references) == 2
        assert decoded.artifact is not None
        assert decoded.display_text == "Intro"


# ── Malformed input ──────────────────────────────────────────────────


class TestMalformed:
    def test_bad_references_do_not_affect_other_blocks(self):
        text = (
            "<reasoning>- step</reasoning>"
            "<references>[{not json</references>"
            f"<artifact_payload>{ARTIFACT_JSON}</artifact_payload>"
            "Visible"
        )
        decoded = decode_response(text)
        assert decoded.references == []
        assert decoded.reasoning == ["step"]
        assert decoded.artifact is not None
        assert decoded.display_text == "Visible"

    def test_references_with_wrong_shape_yield_empty_list(self):
        decoded = decode_response('<references>{"type": "crm"}</references>ok')
        assert decoded.references == []

    def test_only_invalid_references_are_dropped(self):
        refs = json.dumps([
            {"type": "crm", "title": "CRM: Acme Corp", "keyPoint": "Budget: $200k"},
            {"type": "rumour", "title": "Hallway chat", "keyPoint": "Unverified"},
            {"type": "news", "title": "Press", "keyPoint": "Expansion"},
        ])
        decoded = decode_response(f"<references>{refs}</references>ok")
        assert [r.title for r in decoded.references] == ["CRM: Acme Corp", "Press"]
        assert decoded.display_text == "ok"

    def test_bad_artifact_is_dropped(self):
        decoded = decode_response("<artifact_payload>{oops</artifact_payload>Text")
        assert decoded.artifact is None
        assert decoded.display_text == "Text"

    def test_unterminated_block_stays_visible(self):
        decoded = decode_response("Hello <reasoning>- never closed")
        assert decoded.reasoning == []
        assert decoded.display_text == "Hello <reasoning>- never closed"

    def test_markers_inside_a_block_are_not_rescanned(self):
        text = "<reasoning>- mentions <references> tag</reasoning>after"
        visible, blocks = split_blocks(text)
        assert visible == "after"
        assert set(blocks) == {"reasoning"}
        assert "<references>" in blocks["reasoning"]

    def test_second_block_of_same_kind_is_left_as_text(self):
        text = "<reasoning>- one</reasoning><reasoning>- two</reasoning>"
        decoded = decode_response(text)
        assert decoded.reasoning == ["one"]
        assert decoded.display_text == "<reasoning>- two</reasoning>"


# ── Properties ───────────────────────────────────────────────────────


class TestProperties:
    def test_decoding_is_idempotent(self):
        text = f"<reasoning>- a\n- b</reasoning><references>{REFS_JSON}</references>Hi"
        assert decode_response(text) == decode_response(text)

    def test_formatter_output_round_trips(self):
        reasoning = ["Analyze account", "Price the deal"]
        references = [Reference(type="file", title="Pricing Guide", key_point="10k/mo", id="ref-3")]
        payload = ArtifactPayload(document_content="# Proposal", presentation_content="# Deck")

        text = format_tagged_response(reasoning, references, payload) + "visible"
        decoded = decode_response(text)

        assert decoded.reasoning == reasoning
        assert decoded.references == references
        assert decoded.artifact == payload
        assert decoded.display_text == "visible"

    def test_parse_reasoning_ignores_whitespace_only_lines(self):
        assert parse_reasoning("\n   \n-\n- x\n") == ["x"]

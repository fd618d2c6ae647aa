"""Decoder for the tagged response format.

The model (and the offline templates) embed up to three blocks in the final
answer::

    <reasoning>
    - step one
    </reasoning>
    <references>
    [{"type": "crm", "title": "...", "keyPoint": "..."}]
    </references>
    <artifact_payload>
    {"documentContent": "...", "presentationContent": "..."}
    </artifact_payload>

``decode_response`` walks the text once.  The first complete block of each
kind is captured and removed from the visible text; anything inside a
captured block is never scanned again, an unterminated opening marker stays
visible, and a second block of an already-captured kind is left as text.
Malformed JSON in one block never affects the others.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from velocity.models import ArtifactPayload, DecodedResponse, Reference

logger = logging.getLogger(__name__)

REASONING_TAG = "reasoning"
REFERENCES_TAG = "references"
ARTIFACT_TAG = "artifact_payload"

_TAGS = (REASONING_TAG, REFERENCES_TAG, ARTIFACT_TAG)

ARTIFACT_ACKNOWLEDGEMENT = "I've generated the requested asset."


def _open(tag: str) -> str:
    return f"<{tag}>"


def _close(tag: str) -> str:
    return f"</{tag}>"


def split_blocks(text: str) -> tuple[str, dict[str, str]]:
    """Separate tagged blocks from the visible text.

    Returns the visible text (untrimmed) and a mapping of tag name to the
    raw inner text of the first complete block of that tag.
    """
    visible: list[str] = []
    blocks: dict[str, str] = {}
    pos = 0
    length = len(text)

    while pos < length:
        lt = text.find("<", pos)
        if lt == -1:
            visible.append(text[pos:])
            break
        visible.append(text[pos:lt])

        tag = next(
            (t for t in _TAGS if t not in blocks and text.startswith(_open(t), lt)),
            None,
        )
        if tag is None:
            visible.append("<")
            pos = lt + 1
            continue

        body_start = lt + len(_open(tag))
        end = text.find(_close(tag), body_start)
        if end == -1:
            # No closing marker: the opening marker is ordinary text
            visible.append(_open(tag))
            pos = body_start
            continue

        blocks[tag] = text[body_start:end]
        pos = end + len(_close(tag))

    return "".join(visible), blocks


def parse_reasoning(body: str) -> list[str]:
    """One step per non-empty line, without a leading ``-`` bullet."""
    steps: list[str] = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("-"):
            line = line[1:].strip()
        if line:
            steps.append(line)
    return steps


def parse_references(body: str) -> list[Reference]:
    """Parse a JSON array of references.

    Invalid JSON or a non-array body yields ``[]``; an invalid item is
    dropped on its own and the rest are kept.
    """
    try:
        items = json.loads(body.strip())
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse references block: %s", exc)
        return []
    if not isinstance(items, list):
        logger.warning("References block is not a JSON array (got %s)", type(items).__name__)
        return []

    references: list[Reference] = []
    for item in items:
        try:
            references.append(Reference.model_validate(item))
        except ValidationError as exc:
            logger.warning("Dropping invalid reference %r: %s", item, exc)
    return references


def parse_artifact(body: str) -> ArtifactPayload | None:
    """Parse the artifact JSON object; any failure yields ``None``."""
    try:
        return ArtifactPayload.model_validate(json.loads(body.strip()))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Failed to parse artifact payload: %s", exc)
        return None


def decode_response(text: str) -> DecodedResponse:
    """Split a final assistant message into display text and structured parts."""
    visible, blocks = split_blocks(text or "")

    reasoning = parse_reasoning(blocks[REASONING_TAG]) if REASONING_TAG in blocks else []
    references = parse_references(blocks[REFERENCES_TAG]) if REFERENCES_TAG in blocks else []
    artifact = parse_artifact(blocks[ARTIFACT_TAG]) if ARTIFACT_TAG in blocks else None

    display_text = visible.strip()
    if artifact is not None and not display_text:
        display_text = ARTIFACT_ACKNOWLEDGEMENT

    return DecodedResponse(
        display_text=display_text,
        reasoning=reasoning,
        references=references,
        artifact=artifact,
    )

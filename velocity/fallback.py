"""Degraded-mode responder used when the chat backend cannot be reached.

It never talks to the tool registry or the orchestrator: a keyword picks
the artifact kind, a company name found in the message picks the lead, and
the generator renders the artifact (from its template when offline).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from velocity.data.crm import CrmDataSource
from velocity.services.artifact_generator import ArtifactGenerator
from velocity.templates import ArtifactContext, ArtifactKind

logger = logging.getLogger(__name__)

OFFLINE_PREFIX = "(Offline Mode)"

OFFLINE_MESSAGE = (
    f"{OFFLINE_PREFIX} I can't reach the AI service right now, so I can only "
    "produce sample drafts. Ask me for a **proposal**, a **handoff**, a "
    "**meeting brief** or a **follow-up email** and name the account."
)

# First match wins, so more specific intents come first
_KEYWORDS: list[tuple[tuple[str, ...], ArtifactKind]] = [
    (("proposal",), ArtifactKind.PROPOSAL),
    (("handoff",), ArtifactKind.HANDOFF),
    (("brief", "prep", "meeting"), ArtifactKind.MEETING_BRIEF),
    (("email", "follow up", "follow-up"), ArtifactKind.EMAIL),
]


def detect_kind(message: str) -> ArtifactKind | None:
    """Artifact kind requested by *message*, by case-insensitive keyword."""
    lowered = message.lower()
    for keywords, kind in _KEYWORDS:
        if any(k in lowered for k in keywords):
            return kind
    return None


@dataclass
class FallbackReply:
    text: str
    kind: ArtifactKind | None = None
    company_name: str | None = None


class FallbackResponder:
    def __init__(self, data: CrmDataSource, generator: ArtifactGenerator) -> None:
        self._data = data
        self._generator = generator

    async def respond(self, message: str) -> FallbackReply:
        kind = detect_kind(message)
        if kind is None:
            logger.info("Offline: no artifact keyword in message")
            return FallbackReply(text=OFFLINE_MESSAGE)

        lead = self._data.find_lead_in_text(message)
        if lead is None:
            leads = self._data.get_leads()
            lead = leads[0] if leads else None

        if lead is None:
            context = ArtifactContext(company_name="Client")
        else:
            context = ArtifactContext(
                company_name=lead.company_name,
                industry=lead.industry,
                needs=lead.needs,
            )

        logger.info("Offline: rendering %s for %s", kind.value, context.company_name)
        artifact = await self._generator.generate(kind, context)
        return FallbackReply(
            text=f"{OFFLINE_PREFIX} I have generated a **sample** for you.\n\n{artifact}",
            kind=kind,
            company_name=context.company_name,
        )

"""Generation tools: proposals, handoffs, briefs, follow-ups, audio, video.

Every handler returns ``{"result": <tagged text>}``.  Drafting failures are
absorbed twice: ``ArtifactGenerator`` already falls back to the template, and
the handlers here catch anything that still escapes and render the same
template, so the model always receives a usable artifact.
"""

from __future__ import annotations

import logging
from typing import Any

from velocity.data.crm import CrmDataSource
from velocity.services.artifact_generator import ArtifactGenerator
from velocity.services.media_client import MediaClient
from velocity.templates import (
    ArtifactContext,
    ArtifactKind,
    render_demo_video,
    render_fallback,
    render_voice_over,
)

logger = logging.getLogger(__name__)


class GenerationTools:
    def __init__(
        self,
        data: CrmDataSource,
        generator: ArtifactGenerator,
        media: MediaClient,
    ) -> None:
        self._data = data
        self._generator = generator
        self._media = media

    def _context(self, company_name: str, **extra: Any) -> ArtifactContext:
        """Context from the matching CRM lead, or just the name as given."""
        lead = self._data.get_lead(company_name)
        if lead is None:
            return ArtifactContext(company_name=company_name, **extra)
        return ArtifactContext(
            company_name=lead.company_name,
            industry=lead.industry,
            needs=lead.needs,
            **extra,
        )

    async def _draft(self, kind: ArtifactKind, context: ArtifactContext, instructions: str) -> dict[str, str]:
        try:
            text = await self._generator.generate(kind, context, instructions)
        except Exception:
            logger.exception("Drafting %s crashed; rendering template", kind.value)
            text = render_fallback(kind, context)
        return {"result": text}

    async def draft_proposal(self, args: dict[str, Any]) -> dict[str, str]:
        ctx = self._context(args["companyName"])
        return await self._draft(ArtifactKind.PROPOSAL, ctx, args.get("instructions", ""))

    async def draft_handoff(self, args: dict[str, Any]) -> dict[str, str]:
        ctx = self._context(args["companyName"], target_team=args.get("targetTeam"))
        return await self._draft(ArtifactKind.HANDOFF, ctx, args.get("instructions", ""))

    async def prepare_meeting_brief(self, args: dict[str, Any]) -> dict[str, str]:
        ctx = self._context(args["companyName"])
        return await self._draft(ArtifactKind.MEETING_BRIEF, ctx, args.get("instructions", ""))

    async def draft_follow_up(self, args: dict[str, Any]) -> dict[str, str]:
        ctx = self._context(args["companyName"], meeting_context=args.get("meetingContext"))
        return await self._draft(ArtifactKind.EMAIL, ctx, args.get("instructions", ""))

    async def draft_voice_over(self, args: dict[str, Any]) -> dict[str, str]:
        company, script = args["companyName"], args["script"]
        try:
            audio = await self._media.synthesize_speech(script)
        except Exception:
            logger.exception("Speech synthesis crashed")
            audio = None
        return {"result": render_voice_over(company, script, audio)}

    async def create_demo_video(self, args: dict[str, Any]) -> dict[str, str]:
        company, prompt = args["companyName"], args["prompt"]
        try:
            uri = await self._media.generate_video(prompt)
        except Exception:
            logger.exception("Video generation crashed")
            uri = None
        return {"result": render_demo_video(company, prompt, uri)}

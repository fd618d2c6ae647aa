"""LLM-backed drafting of sales artifacts with offline template fallback.

``ArtifactGenerator.generate`` always returns a string in the tagged wire
format: the drafting model's answer when it works, otherwise the shared
offline template for the same artifact kind.  Nothing is retried; one
failure means template output.
"""

from __future__ import annotations

import logging

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from velocity.backend import message_text
from velocity.config import ANTHROPIC_API_KEY, GENERATION_MODEL_NAME
from velocity.prompts import (
    COVER_EMAIL_PROMPT_TEMPLATE,
    REFINE_PROMPT_TEMPLATE,
    build_artifact_prompt,
)
from velocity.services.metrics import metrics
from velocity.templates import ArtifactContext, ArtifactKind, render_fallback

logger = logging.getLogger(__name__)


def build_generation_llm(api_key: str | None = None) -> BaseChatModel | None:
    """Build the drafting model, or ``None`` when no credential is configured."""
    api_key = api_key or ANTHROPIC_API_KEY
    if not api_key:
        return None
    return ChatAnthropic(
        model=GENERATION_MODEL_NAME,
        api_key=api_key,
        temperature=0.4,
        max_tokens=4096,
    )


def cover_email_template(title: str) -> str:
    return (
        f"Subject: {title}\n\n"
        f"Please find attached the {title} for your review.\n\n"
        "Best regards,\n[Your Name]"
    )


class ArtifactGenerator:
    """Drafts artifacts with a tool-less chat model."""

    def __init__(self, llm: BaseChatModel | None = None) -> None:
        self._llm = llm

    @property
    def online(self) -> bool:
        return self._llm is not None

    async def _ask(self, operation: str, prompt: str) -> str:
        with metrics.timer("anthropic", operation):
            reply = await self._llm.ainvoke([HumanMessage(content=prompt)])
        return message_text(reply).strip()

    async def generate(
        self,
        kind: ArtifactKind,
        context: ArtifactContext,
        instructions: str = "",
    ) -> str:
        kind = ArtifactKind(kind)
        logger.info("Generating %s for %s", kind.value, context.company_name)

        if not self.online:
            logger.info("No drafting model configured; using %s template", kind.value)
            return render_fallback(kind, context)

        try:
            text = await self._ask("artifact_generation", build_artifact_prompt(kind, context, instructions))
        except Exception as exc:
            logger.warning("Artifact generation failed (%s); using fallback template", exc)
            return render_fallback(kind, context)

        return text or render_fallback(kind, context)

    async def refine(self, full_content: str, selected_text: str, instruction: str) -> str:
        """Rewrite *full_content* per *instruction*; the original on any failure."""
        if not self.online:
            return full_content
        prompt = REFINE_PROMPT_TEMPLATE.format(
            full_content=full_content,
            selected_text=selected_text,
            instruction=instruction,
        )
        try:
            text = await self._ask("artifact_refine", prompt)
        except Exception:
            logger.exception("Refinement failed; returning original content")
            return full_content
        return text or full_content

    async def draft_cover_email(self, company_name: str, title: str) -> str:
        """Short email to send an artifact to the client."""
        if not self.online:
            return cover_email_template(title)
        prompt = COVER_EMAIL_PROMPT_TEMPLATE.format(company_name=company_name, title=title)
        try:
            text = await self._ask("cover_email", prompt)
        except Exception:
            logger.exception("Cover email generation failed")
            return cover_email_template(title)
        return text or cover_email_template(title)

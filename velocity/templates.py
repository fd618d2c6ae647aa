"""Offline artifact templates and the tagged-response formatter.

Both the generation tools (when the drafting model is unavailable or fails)
and the offline responder render artifacts through ``render_fallback``, so
the two paths can never drift apart.  ``format_tagged_response`` produces
exactly the block layout that ``velocity.decoder`` parses.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from velocity.models import ArtifactPayload, Reference

OFFLINE_NOTE = "> **Note:** Offline Mode - Generated Draft."


class ArtifactKind(str, Enum):
    PROPOSAL = "proposal"
    HANDOFF = "handoff"
    MEETING_BRIEF = "meeting_brief"
    EMAIL = "email"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    ArtifactKind.PROPOSAL: "Proposal",
    ArtifactKind.HANDOFF: "Handoff",
    ArtifactKind.MEETING_BRIEF: "Meeting Brief",
    ArtifactKind.EMAIL: "Email",
}


class ArtifactContext(BaseModel):
    """What the drafting step knows about the account."""

    company_name: str
    industry: str | None = None
    needs: list[str] = Field(default_factory=list)
    target_team: str | None = None
    meeting_context: str | None = None


@dataclass
class TemplateArtifact:
    reasoning: list[str]
    references: list[Reference] = field(default_factory=list)
    payload: ArtifactPayload = field(default_factory=ArtifactPayload)


def format_tagged_response(
    reasoning: list[str],
    references: list[Reference],
    payload: ArtifactPayload,
) -> str:
    """Serialise the three parts in reasoning → references → artifact order."""
    reasoning_block = "\n".join(f"- {step}" for step in reasoning)
    references_json = json.dumps([ref.to_wire() for ref in references])
    payload_json = json.dumps(payload.to_wire())
    return (
        f"<reasoning>\n{reasoning_block}\n</reasoning>\n"
        f"<references>\n{references_json}\n</references>\n"
        f"<artifact_payload>\n{payload_json}\n</artifact_payload>"
    )


# ── Per-kind templates ───────────────────────────────────────────────


def _ref(type_: str, title: str, key_point: str, ref_id: str) -> Reference:
    return Reference(type=type_, title=title, key_point=key_point, id=ref_id)


def _proposal(ctx: ArtifactContext) -> TemplateArtifact:
    company = ctx.company_name
    needs = ", ".join(ctx.needs)
    discussed = f" regarding {needs}" if needs else ""
    sector = f"As a leader in the {ctx.industry} sector, " if ctx.industry else ""

    document = (
        f"{OFFLINE_NOTE}\n\n"
        f"# Strategic Proposal for {company}\n\n"
        "## Executive Summary\n"
        f"We are pleased to submit this proposal to support {company} in their "
        f"upcoming initiatives. Based on our recent discussions{discussed}, we have "
        "tailored a solution to drive operational efficiency and growth.\n\n"
        "## Understanding Your Needs\n"
        f"{sector}we understand the unique challenges you face, particularly "
        "around scalability and security.\n\n"
        "## Proposed Solution\n"
        "### 1. Cloud Infrastructure\n- Scalable architecture\n- 99.99% Uptime SLA\n\n"
        "### 2. Security & Compliance\n- Enterprise-grade encryption\n"
        "- Compliance with industry standards\n\n"
        "## Investment\n\n"
        "| Item | Description | Annual Cost |\n"
        "| :--- | :--- | :--- |\n"
        "| **Implementation** | One-time setup and migration fee | $25,000 |\n"
        "| **Enterprise Subscription** | Core platform access (Unlimited Users) | $120,000 |\n"
        "| **Premium Support** | 24/7 dedicated support SLA | $15,000 |\n"
        "| **Total Year 1** | | **$160,000** |\n\n"
        "*Payment Terms: Net 30*\n\n"
        "## Timeline\n"
        "- **Month 1**: Discovery & Planning\n"
        "- **Month 2**: Deployment\n"
        "- **Month 3**: Training & Go-Live"
    )
    slides = (
        f"# {company} Proposal\n\n- Strategic Partnership\n- Innovation\n- Growth\n\n---\n\n"
        "# Agenda\n\n1. Current Challenges\n2. Our Solution\n3. Investment & ROI\n4. Next Steps\n\n---\n\n"
        "# Investment Summary\n\n| Item | Cost |\n| --- | --- |\n"
        "| Implementation | $25k |\n| Subscription | $120k |\n| Support | $15k |\n\n"
        "**Total**: $160k\n\n---\n\n"
        "# Next Steps\n\n- Sign Proposal\n- Kickoff Meeting"
    )
    return TemplateArtifact(
        reasoning=[
            f"Analyzing needs for {company} in {ctx.industry or 'General'} sector...",
            f"Retrieving pricing for requested services: {needs or 'Standard Package'}...",
            "Structuring executive summary and investment breakdown...",
        ],
        references=[
            _ref("crm", f"CRM: {company}", "Budget: $200k, Decision Maker: CIO", "ref-1"),
            _ref("email", "Email: Negotiation Thread", "Client requested 15% discount on annual commit", "ref-2"),
            _ref("file", "Pricing Guide Q3", "Standard rate for Enterprise is $10k/mo", "ref-3"),
        ],
        payload=ArtifactPayload(document_content=document, presentation_content=slides),
    )


def _handoff(ctx: ArtifactContext) -> TemplateArtifact:
    company = ctx.company_name
    team = ctx.target_team or "Implementation Team"
    document = (
        f"{OFFLINE_NOTE}\n\n"
        f"# Implementation Handoff: {company}\n\n"
        f"**To:** {team}\n**Date:** {date.today().isoformat()}\n\n"
        "## Account Overview\n"
        f"{company} is a key account. We have successfully closed the deal for the "
        "Enterprise tier.\n\n"
        "## Scope of Work\n- Deploy core platform\n- Integrate with legacy CRM\n"
        "- User training for 50 seats\n\n"
        "## Key Stakeholders\n- **Sponsor**: CIO\n- **Project Lead**: IT Director\n\n"
        "## Critical Milestones\n1. Kickoff Call (Week 1)\n2. Environment Setup (Week 2)\n"
        "3. UAT (Week 4)\n4. Go-Live (Week 6)"
    )
    slides = (
        f"# Project Kickoff: {company}\n\n- Internal Handoff\n- Success Criteria\n\n---\n\n"
        f"# Account Context\n\n- **Industry**: {ctx.industry or 'Technology'}\n"
        "- **Goal**: Modernization\n\n---\n\n"
        "# Technical Scope\n\n- API Integration\n- Data Migration\n- SSO Setup"
    )
    return TemplateArtifact(
        reasoning=[
            f"Identifying key stakeholders for {company}...",
            "Mapping scope of work to implementation timeline...",
            f"Drafting internal handoff protocols for {team}...",
        ],
        references=[
            _ref("crm", f"CRM: {company}", "Deal Status: Closed Won", "ref-1"),
            _ref("file", "SOW_Final_Signed.pdf", "Scope includes full data migration", "ref-2"),
        ],
        payload=ArtifactPayload(document_content=document, presentation_content=slides),
    )


def _meeting_brief(ctx: ArtifactContext) -> TemplateArtifact:
    company = ctx.company_name
    document = (
        f"{OFFLINE_NOTE}\n\n"
        f"# Meeting Brief: {company}\n\n"
        "## Meeting Details\n**Date:** Today\n**Context:** Strategic Review\n\n"
        "## Account Health\n- **Status**: Active\n"
        "- **Last Interaction**: Positive email exchange re: renewal.\n\n"
        "## Recent News & Signals\n"
        "- Recent press release indicates expansion in the APAC region.\n"
        "- Stock price up 5% this quarter.\n\n"
        "## Talking Points\n1. Congratulate on recent growth.\n"
        "2. Discuss roadmap for Q4.\n3. Address open support ticket #1234."
    )
    slides = (
        f"# Meeting Agenda: {company}\n\n1. Executive Update\n2. Performance Review\n"
        "3. Strategic Roadmap\n\n---\n\n"
        "# Current Status\n\n- **Utilization**: 85%\n- **Health Score**: Green\n\n---\n\n"
        "# Discussion Topics\n\n- Expansion Plans\n- New Features\n- Renewal Options"
    )
    return TemplateArtifact(
        reasoning=[
            f"Scanning recent interactions and email threads with {company}...",
            "Checking account health and recent support tickets...",
            "Compiling strategic talking points for upcoming meeting...",
        ],
        references=[
            _ref("email", "Email: Meeting Request", "Agenda: Q4 Roadmap", "ref-1"),
            _ref("news", "TechCrunch Article", f"{company} acquiring startup X", "ref-2"),
        ],
        payload=ArtifactPayload(document_content=document, presentation_content=slides),
    )


def _follow_up_email(ctx: ArtifactContext) -> TemplateArtifact:
    company = ctx.company_name
    topic = ctx.meeting_context or "our partnership"
    document = (
        f"{OFFLINE_NOTE}\n\n"
        f"**Subject:** Follow up: Our conversation regarding {topic}\n\n"
        "Hi [Name],\n\n"
        f"Thank you for the time today. It was great discussing how we can support {company}.\n\n"
        "**Recap of Key Points:**\n- We reviewed the current challenges.\n"
        "- We demonstrated the new analytics module.\n- We agreed on a pilot timeline.\n\n"
        "**Next Steps:**\n1. I will send over the technical docs by Friday.\n"
        "2. You will review with your security team.\n\n"
        "Looking forward to hearing from you.\n\nBest regards,\n[Your Name]"
    )
    slides = (
        "# Discussion Recap\n\n- Alignment on Goals\n- Path Forward\n\n---\n\n"
        "# Action Items\n\n- **Us**: Send Docs\n- **You**: Security Review"
    )
    return TemplateArtifact(
        reasoning=[
            f"Reviewing meeting context: {topic}...",
            "Identifying agreed next steps and action items...",
            "Drafting personalized follow-up email...",
        ],
        payload=ArtifactPayload(document_content=document, presentation_content=slides),
    )


_BUILDERS = {
    ArtifactKind.PROPOSAL: _proposal,
    ArtifactKind.HANDOFF: _handoff,
    ArtifactKind.MEETING_BRIEF: _meeting_brief,
    ArtifactKind.EMAIL: _follow_up_email,
}


def build_template(kind: ArtifactKind, context: ArtifactContext) -> TemplateArtifact:
    return _BUILDERS[ArtifactKind(kind)](context)


def render_fallback(kind: ArtifactKind, context: ArtifactContext) -> str:
    """Offline artifact for *kind*, already in the tagged wire format."""
    artifact = build_template(kind, context)
    return format_tagged_response(artifact.reasoning, artifact.references, artifact.payload)


# ── Media artifacts ──────────────────────────────────────────────────


def render_voice_over(company_name: str, script: str, audio_base64: str | None) -> str:
    payload = ArtifactPayload(
        document_content=f"## Voice Over Script for {company_name}\n\n{script}",
        presentation_content=f"# Voice Over\n\n- **Client**: {company_name}\n- **Status**: Generated",
        audio_content=audio_base64,
    )
    return format_tagged_response(["Generating TTS audio..."], [], payload)


def render_demo_video(company_name: str, prompt: str, video_uri: str | None) -> str:
    payload = ArtifactPayload(
        document_content=f"## Demo Video Prompt for {company_name}\n\n**Prompt Used:** {prompt}",
        presentation_content=f"# Demo Video\n\n- **Client**: {company_name}\n- **Status**: Generated",
        video_uri=video_uri,
        video_prompt=prompt,
    )
    return format_tagged_response(["Generating demo video..."], [], payload)

"""Binds every declared tool to its handler in one sealed registry."""

from __future__ import annotations

from velocity.data.crm import CrmDataSource
from velocity.registry import ToolRegistry
from velocity.services.artifact_generator import ArtifactGenerator
from velocity.services.media_client import MediaClient
from velocity.tools import declarations as d
from velocity.tools.generation import GenerationTools
from velocity.tools.lookup import LookupTools


def build_tool_registry(
    data: CrmDataSource,
    generator: ArtifactGenerator,
    media: MediaClient,
) -> ToolRegistry:
    lookup = LookupTools(data)
    generation = GenerationTools(data, generator, media)

    bindings = [
        (d.GET_LEAD_DETAILS, lookup.get_lead_details),
        (d.GET_COMPANY_NEWS, lookup.get_company_news),
        (d.GET_RECENT_EMAILS, lookup.get_recent_emails),
        (d.GET_ORG_CHANGES, lookup.get_org_changes),
        (d.GET_PRICING, lookup.get_pricing),
        (d.GET_LEGAL_CLAUSE, lookup.get_legal_clause),
        (d.SEARCH_KNOWLEDGE_BASE, lookup.search_knowledge_base),
        (d.DRAFT_PROPOSAL, generation.draft_proposal),
        (d.DRAFT_HANDOFF, generation.draft_handoff),
        (d.PREPARE_MEETING_BRIEF, generation.prepare_meeting_brief),
        (d.DRAFT_FOLLOW_UP, generation.draft_follow_up),
        (d.DRAFT_VOICE_OVER, generation.draft_voice_over),
        (d.CREATE_DEMO_VIDEO, generation.create_demo_video),
    ]

    registry = ToolRegistry()
    for declaration, handler in bindings:
        registry.register(declaration, handler)

    missing = {t.name for t in d.LOOKUP_TOOLS + d.GENERATION_TOOLS} - {t.name for t in registry.all()}
    if missing:
        raise RuntimeError(f"Declared tools without a handler: {sorted(missing)}")

    registry.seal()
    return registry

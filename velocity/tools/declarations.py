"""Declarations of every tool the copilot exposes to the model.

Keep the descriptions short and the arguments few: the catalog is sent on
every backend call.
"""

from __future__ import annotations

from velocity.models import ToolDeclaration, ToolParameter

_COMPANY = ToolParameter(name="companyName", description="Company name; partial names are accepted")
_INSTRUCTIONS = ToolParameter(name="instructions", description="Extra guidance from the user")


def _company_lookup(name: str, description: str) -> ToolDeclaration:
    return ToolDeclaration(name=name, description=description, parameters=(_COMPANY,))


GET_LEAD_DETAILS = _company_lookup(
    "getLeadDetails",
    "Retrieve details about a sales lead or customer from the CRM data.",
)
GET_COMPANY_NEWS = _company_lookup(
    "getCompanyNews",
    "Fetch the latest news headlines and updates for a company.",
)
GET_RECENT_EMAILS = _company_lookup(
    "getRecentEmails",
    "Fetch recent email threads and communication signals from the account.",
)
GET_ORG_CHANGES = _company_lookup(
    "getOrgChanges",
    "Check for recent leadership or role changes in the organization.",
)
GET_PRICING = ToolDeclaration(
    name="getPricing",
    description="Search the product price list by keyword.",
    parameters=(ToolParameter(name="productKeyword", description="Word contained in the product name"),),
)
GET_LEGAL_CLAUSE = ToolDeclaration(
    name="getLegalClause",
    description="Fetch the standard legal clause for an industry (defaults to 'standard').",
    parameters=(ToolParameter(name="industry", description="e.g. finance, manufacturing, standard"),),
)
SEARCH_KNOWLEDGE_BASE = ToolDeclaration(
    name="searchKnowledgeBase",
    description="Search the shared drive for past proposals, playbooks and specs.",
    parameters=(ToolParameter(name="query"),),
)

DRAFT_PROPOSAL = ToolDeclaration(
    name="draftProposal",
    description=(
        "Drafts a full sales proposal (Doc + Slides) with pricing and timelines. "
        "Trigger via @Velocity draft proposal."
    ),
    parameters=(_COMPANY, _INSTRUCTIONS),
)
DRAFT_HANDOFF = ToolDeclaration(
    name="draftHandoff",
    description="Generates a cross-team handoff document. Trigger via @Velocity handoff.",
    parameters=(
        _COMPANY,
        ToolParameter(name="targetTeam", description="Team receiving the account"),
        _INSTRUCTIONS,
    ),
)
PREPARE_MEETING_BRIEF = ToolDeclaration(
    name="prepareMeetingBrief",
    description=(
        "Generates a pre-meeting briefing with recent interactions and talking points. "
        "Trigger via @Velocity prep meeting."
    ),
    parameters=(_COMPANY, _INSTRUCTIONS),
)
DRAFT_FOLLOW_UP = ToolDeclaration(
    name="draftFollowUp",
    description="Drafts a personalized follow-up email after a meeting. Trigger via @Velocity follow up.",
    parameters=(
        _COMPANY,
        ToolParameter(name="meetingContext", description="What the meeting covered"),
        _INSTRUCTIONS,
    ),
)
DRAFT_VOICE_OVER = ToolDeclaration(
    name="draftVoiceOver",
    description="Generates a voice-over script and audio file for a pitch. Trigger via @Velocity voice over.",
    parameters=(_COMPANY, ToolParameter(name="script", description="The text to speak")),
)
CREATE_DEMO_VIDEO = ToolDeclaration(
    name="createDemoVideo",
    description="Generates a short demo video. Trigger via @Velocity demo video.",
    parameters=(_COMPANY, ToolParameter(name="prompt", description="Visual description of the video")),
)

LOOKUP_TOOLS = (
    GET_LEAD_DETAILS,
    GET_COMPANY_NEWS,
    GET_RECENT_EMAILS,
    GET_ORG_CHANGES,
    GET_PRICING,
    GET_LEGAL_CLAUSE,
    SEARCH_KNOWLEDGE_BASE,
)

GENERATION_TOOLS = (
    DRAFT_PROPOSAL,
    DRAFT_HANDOFF,
    PREPARE_MEETING_BRIEF,
    DRAFT_FOLLOW_UP,
    DRAFT_VOICE_OVER,
    CREATE_DEMO_VIDEO,
)

# Artifact label recorded for each generation tool
ARTIFACT_LABELS: dict[str, str] = {
    DRAFT_PROPOSAL.name: "Proposal",
    DRAFT_HANDOFF.name: "Handoff",
    PREPARE_MEETING_BRIEF.name: "Meeting Brief",
    DRAFT_FOLLOW_UP.name: "Email",
    DRAFT_VOICE_OVER.name: "Voice Over",
    CREATE_DEMO_VIDEO.name: "Demo Video",
}

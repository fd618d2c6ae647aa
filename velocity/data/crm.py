"""Read-only CRM fixture data and the lookup interface the tools use.

Company matching policy
-----------------------
Every lookup matches company names with a **case-insensitive substring**
test, never an exact comparison: users type partial names ("acme",
"Global") and the model passes them through unchanged.  ``get_lead("acme")``
therefore returns the "Acme Corp" record.  When several records match, the
first one in fixture order wins.

``find_lead_in_text`` is the reverse test used by the offline responder:
it looks for a known company name *inside* free text.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

NO_NEWS_MESSAGE = "No recent news found for this company."


class Signal(BaseModel):
    type: Literal["positive", "warning", "info"]
    text: str


class Lead(BaseModel):
    """One CRM record."""

    id: str
    company_name: str
    contact_name: str
    email: str
    industry: str
    status: Literal["New", "Contacted", "Proposal", "Negotiation"]
    needs: list[str] = Field(default_factory=list)
    estimated_value: int
    last_interaction: str
    ai_summary: str | None = None
    meeting_time: str | None = None
    signals: list[Signal] = Field(default_factory=list)
    suggested_action: str | None = None


class EmailThread(BaseModel):
    subject: str
    sender: str
    date: str
    summary: str


class OrgChange(BaseModel):
    name: str
    role: str
    change: str
    date: str


# ── Fixtures ─────────────────────────────────────────────────────────

LEADS: list[Lead] = [
    Lead(
        id="1",
        company_name="Acme Corp",
        contact_name="Alice Smith",
        email="alice@acme.com",
        industry="Manufacturing",
        status="Negotiation",
        needs=["Cloud Migration", "Security Audit", "24/7 Support"],
        estimated_value=150000,
        last_interaction="Email received regarding timeline for cloud transition.",
        meeting_time="Tomorrow, 2:00 PM",
        ai_summary=(
            "High-momentum opportunity. Q4 earnings signals increased tech "
            "spending (+25%) and a priority on analytics."
        ),
        signals=[
            Signal(type="positive", text="Technical requirements align with solution"),
            Signal(type="info", text="Strategic review tomorrow - brief ready"),
            Signal(type="warning", text="Need to connect with VP Engineering"),
        ],
        suggested_action="Review sales proposal",
    ),
    Lead(
        id="3",
        company_name="TechStart Inc",
        contact_name="Charlie Day",
        email="charlie@techstart.io",
        industry="Technology",
        status="Proposal",
        needs=["SaaS Platform", "API Access"],
        estimated_value=75000,
        last_interaction="3 days ago",
        meeting_time="Thursday, 11:00 AM",
        ai_summary=(
            "Early stage but promising. Focus on infrastructure modernization "
            "aligns with our value prop."
        ),
        signals=[
            Signal(type="info", text="POC discussions next week"),
            Signal(type="warning", text="Meeting brief needed"),
        ],
        suggested_action="Prepare demo brief",
    ),
    Lead(
        id="2",
        company_name="Global Bank",
        contact_name="Bob Jones",
        email="bob@globalbank.com",
        industry="Finance",
        status="New",
        needs=["Compliance Reporting", "Data Encryption"],
        estimated_value=250000,
        last_interaction="Inbound inquiry via website.",
        ai_summary=(
            "High potential value. Regulatory pressure is driving demand for "
            "compliance tools."
        ),
        signals=[
            Signal(type="positive", text="Budget approved for Q3"),
            Signal(type="info", text="Competitor analysis available"),
        ],
        suggested_action="Draft outreach email",
    ),
    Lead(
        id="5",
        company_name="Northwind Traders",
        contact_name="Maria Anders",
        email="maria@northwind.com",
        industry="Retail/Logistics",
        status="Contacted",
        needs=["Inventory Management", "IoT Tracking"],
        estimated_value=120000,
        last_interaction="Phone call yesterday.",
        ai_summary=(
            "Expanding logistics network. They are looking for real-time "
            "tracking solutions for their new distribution centers."
        ),
        signals=[
            Signal(type="positive", text="New distribution center opening in Q2"),
            Signal(type="warning", text="Current provider contract expires soon"),
        ],
        suggested_action="Send pricing deck",
    ),
    Lead(
        id="6",
        company_name="Litware Inc",
        contact_name="David So",
        email="david@litware.com",
        industry="Consumer Electronics",
        status="Proposal",
        needs=["Customer Support Bot", "Knowledge Base"],
        estimated_value=95000,
        last_interaction="Demo requested.",
        ai_summary=(
            "Seeking to automate 40% of customer support queries. Strong "
            "interest in our GenAI agent capabilities."
        ),
        signals=[
            Signal(type="positive", text="CTO is the primary sponsor"),
            Signal(type="info", text="Evaluating 2 other vendors"),
        ],
        suggested_action="Draft competitive analysis vs. Competitor X",
    ),
    Lead(
        id="7",
        company_name="Fabrikam Residences",
        contact_name="Elizabeth Brown",
        email="liz@fabrikam.com",
        industry="Real Estate",
        status="New",
        needs=["Tenant Portal", "Payment Processing"],
        estimated_value=180000,
        last_interaction="LinkedIn message.",
        ai_summary=(
            "Large property management firm digitizing tenant experiences. "
            "High volume transaction potential."
        ),
        signals=[
            Signal(type="info", text="Just acquired 5 new properties"),
            Signal(type="warning", text="Requires custom ERP integration"),
        ],
        suggested_action="Schedule discovery call",
    ),
    Lead(
        id="4",
        company_name="MediCare Plus",
        contact_name="Sarah Connor",
        email="sarah@medicare.com",
        industry="Healthcare",
        status="Contacted",
        needs=["HIPAA Compliance", "Patient Portal"],
        estimated_value=500000,
        last_interaction="Follow-up call scheduled.",
        ai_summary=(
            "Complex deal. Recent data breach news suggests urgent need for "
            "our security suite."
        ),
        signals=[
            Signal(type="warning", text="Decision timeline is tight"),
            Signal(type="positive", text="Successful pilot at sister hospital"),
        ],
        suggested_action="Send HIPAA compliance docs",
    ),
]

NEWS: dict[str, list[str]] = {
    "Acme Corp": [
        "Acme Corp Announces $50M Expansion of Ohio Manufacturing Plant",
        "CEO of Acme Corp Discusses Supply Chain Resilience on CNBC",
        "Acme Corp Partners with GreenEnergy for Sustainable Operations",
    ],
    "Global Bank": [
        "Global Bank to Launch AI-Driven Wealth Management Tool",
        "Regulatory Scrutiny Increases for Cross-Border Payments at Global Bank",
        "Global Bank Reports Record Q3 Profits driven by Investment Banking",
    ],
    "TechStart Inc": [
        "TechStart Inc Closes Series B Funding Round led by Sequoia",
        "TechStart Inc Released New API for Seamless ERP Integration",
        "TechCrunch: Is TechStart Inc the next Unicorn?",
    ],
    "MediCare Plus": [
        "MediCare Plus Suffers Minor Data Breach, Security Overhaul Planned",
        "MediCare Plus Acquires Small Telehealth Startup for $20M",
        "New Government Healthcare Regulations Favor MediCare Plus Business Model",
    ],
    "Northwind Traders": [
        "Northwind Traders Opens New European Distribution Hub",
        "Logistics Weekly: Northwind Traders adopts electric fleet",
        "Supply Chain shock hits Northwind Asian operations",
    ],
    "Litware Inc": [
        "Litware Inc recalls newest smart home hub due to firmware bug",
        "Litware Inc CEO to step down next year",
        "Review: Litware's new AI assistant is surprisingly good",
    ],
    "Fabrikam Residences": [
        "Fabrikam Residences acquires downtown luxury apartment complex",
        "Fabrikam faces lawsuit over tenant data privacy",
        "Real Estate Outlook: Fabrikam leads market in digital transformation",
    ],
}

EMAILS: dict[str, list[EmailThread]] = {
    "Acme Corp": [
        EmailThread(
            subject="Re: Cloud transition timeline",
            sender="alice@acme.com",
            date="2 days ago",
            summary="Alice asked whether migration can finish before the Q1 freeze.",
        ),
        EmailThread(
            subject="Support coverage question",
            sender="alice@acme.com",
            date="1 week ago",
            summary="Concern about the cost of 24/7 support in last year's quote.",
        ),
    ],
    "Global Bank": [
        EmailThread(
            subject="Compliance reporting inquiry",
            sender="bob@globalbank.com",
            date="4 days ago",
            summary="Requested a walkthrough of audit trail and encryption features.",
        ),
    ],
    "TechStart Inc": [
        EmailThread(
            subject="POC scope",
            sender="charlie@techstart.io",
            date="3 days ago",
            summary="Wants API rate limits and sandbox access confirmed before the POC.",
        ),
    ],
    "MediCare Plus": [
        EmailThread(
            subject="HIPAA documentation",
            sender="sarah@medicare.com",
            date="yesterday",
            summary="Asked for BAA template and HIPAA compliance attestations.",
        ),
    ],
}

ORG_CHANGES: dict[str, list[OrgChange]] = {
    "Acme Corp": [
        OrgChange(
            name="Dana Whitfield",
            role="VP Engineering",
            change="Joined from Contoso Manufacturing",
            date="last month",
        ),
    ],
    "Litware Inc": [
        OrgChange(
            name="Marcus Lee",
            role="CEO",
            change="Announced departure next year",
            date="2 weeks ago",
        ),
    ],
    "MediCare Plus": [
        OrgChange(
            name="Priya Raman",
            role="CISO",
            change="Appointed after the data breach",
            date="3 weeks ago",
        ),
    ],
}


def _matches(candidate: str, query: str) -> bool:
    return query.strip().lower() in candidate.lower()


class CrmDataSource:
    """Lookup facade over the fixtures (or injected test data)."""

    def __init__(
        self,
        leads: list[Lead] | None = None,
        news: dict[str, list[str]] | None = None,
        emails: dict[str, list[EmailThread]] | None = None,
        org_changes: dict[str, list[OrgChange]] | None = None,
    ) -> None:
        self._leads = LEADS if leads is None else leads
        self._news = NEWS if news is None else news
        self._emails = EMAILS if emails is None else emails
        self._org_changes = ORG_CHANGES if org_changes is None else org_changes

    def get_leads(self) -> list[Lead]:
        return list(self._leads)

    def get_lead(self, company_name: str) -> Lead | None:
        """First lead whose company name contains *company_name*."""
        if not company_name.strip():
            return None
        return next((lead for lead in self._leads if _matches(lead.company_name, company_name)), None)

    def find_lead_in_text(self, text: str) -> Lead | None:
        """First lead whose full company name appears inside *text*."""
        lowered = text.lower()
        return next((lead for lead in self._leads if lead.company_name.lower() in lowered), None)

    def get_news(self, company_name: str) -> list[str]:
        key = self._match_key(self._news, company_name)
        return list(self._news[key]) if key else [NO_NEWS_MESSAGE]

    def get_emails(self, company_name: str) -> list[EmailThread]:
        key = self._match_key(self._emails, company_name)
        return list(self._emails[key]) if key else []

    def get_org_changes(self, company_name: str) -> list[OrgChange]:
        key = self._match_key(self._org_changes, company_name)
        return list(self._org_changes[key]) if key else []

    @staticmethod
    def _match_key(table: dict[str, list], company_name: str) -> str | None:
        if not company_name.strip():
            return None
        return next((key for key in table if _matches(key, company_name)), None)

"""Static price list, legal clauses and knowledge-base documents."""

from __future__ import annotations

from pydantic import BaseModel


class PricingItem(BaseModel):
    sku: str
    name: str
    price: int
    currency: str = "USD"


class KnowledgeDocument(BaseModel):
    id: str
    name: str
    type: str
    link: str
    content: str


PRICE_LIST: list[PricingItem] = [
    PricingItem(sku="CLD-001", name="Enterprise Cloud Subscription", price=12000),
    PricingItem(sku="SEC-999", name="Advanced Security Suite", price=5000),
    PricingItem(sku="SUP-247", name="Premium 24/7 Support", price=2000),
    PricingItem(sku="IMP-001", name="Implementation Services", price=15000),
]

DEFAULT_CLAUSE_KEY = "standard"

LEGAL_CLAUSES: dict[str, str] = {
    "standard": (
        "This agreement is governed by the laws of the State of Washington. "
        "Payment terms are Net 30."
    ),
    "finance": (
        "Strict data privacy compliance (GDPR/CCPA) applies. Audit rights "
        "granted to client upon 30 days notice."
    ),
    "manufacturing": (
        "Liability for equipment failure is capped at the total value of the "
        "contract. Service Level Agreements (SLA) guarantee 99.9% uptime."
    ),
}

KNOWLEDGE_BASE: list[KnowledgeDocument] = [
    KnowledgeDocument(
        id="doc-1",
        name="Contoso_Sales_Playbook_2024.pdf",
        type="application/pdf",
        link="https://drive.google.com/file/d/mock-playbook",
        content=(
            "For Manufacturing clients, emphasize 'Operational Efficiency' and "
            "'IoT Integration'. The standard discount cap for new logos is 15% "
            "without VP approval. Use the 'Challenger' sales methodology."
        ),
    ),
    KnowledgeDocument(
        id="doc-2",
        name="Acme_Corp_Past_Proposal_2023.docx",
        type="application/vnd.google-apps.document",
        link="https://docs.google.com/document/d/mock-acme-prev",
        content=(
            "In 2023, we proposed the 'Basic Cloud Pack' to Acme Corp. They "
            "rejected it due to lack of '24/7 Support'. They were price "
            "sensitive around the $100k mark."
        ),
    ),
    KnowledgeDocument(
        id="doc-3",
        name="Technical_Specs_Cloud_V2.pdf",
        type="application/pdf",
        link="https://drive.google.com/file/d/mock-specs",
        content=(
            "The Enterprise Cloud Subscription (CLD-001) supports up to 500TB of "
            "storage per tenant. It includes native disaster recovery with a "
            "4-hour RTO. It is SOC2 Type II compliant."
        ),
    ),
]


def find_pricing(keyword: str) -> list[PricingItem]:
    """Price-list entries whose name contains *keyword* (case-insensitive)."""
    needle = keyword.strip().lower()
    return [item for item in PRICE_LIST if needle in item.name.lower()]


def legal_clause(industry: str) -> str:
    """Clause for *industry*; unknown industries get the standard clause."""
    key = industry.strip().lower()
    return LEGAL_CLAUSES.get(key, LEGAL_CLAUSES[DEFAULT_CLAUSE_KEY])


def search_documents(query: str) -> list[KnowledgeDocument]:
    """Documents whose name or content contains *query* (case-insensitive)."""
    needle = query.strip().lower()
    return [
        doc for doc in KNOWLEDGE_BASE
        if needle in doc.content.lower() or needle in doc.name.lower()
    ]

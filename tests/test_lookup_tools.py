"""Tests for the read-only lookup tools."""

from __future__ import annotations

import asyncio

import pytest

from velocity.data import catalog
from velocity.data.crm import NO_NEWS_MESSAGE
from velocity.tools.lookup import LookupTools


@pytest.fixture
def tools(crm_data):
    return LookupTools(crm_data)


class TestLeadLookups:
    def test_partial_name_finds_lead(self, tools):
        lead = asyncio.run(tools.get_lead_details({"companyName": "acme"}))
        assert lead["company_name"] == "Acme Corp"
        assert lead["industry"] == "Manufacturing"

    def test_unknown_company_returns_error_payload(self, tools):
        result = asyncio.run(tools.get_lead_details({"companyName": "Initech"}))
        assert result == {"error": "Lead not found"}

    def test_news_for_known_company(self, tools):
        result = asyncio.run(tools.get_company_news({"companyName": "Acme"}))
        assert len(result["news"]) == 3
        assert all("Acme" in headline for headline in result["news"])

    def test_news_for_unknown_company(self, tools):
        result = asyncio.run(tools.get_company_news({"companyName": "Initech"}))
        assert result == {"news": [NO_NEWS_MESSAGE]}

    def test_recent_emails(self, tools):
        result = asyncio.run(tools.get_recent_emails({"companyName": "ACME CORP"}))
        assert len(result["emails"]) == 2
        assert {"subject", "sender", "date", "summary"} <= set(result["emails"][0])

    def test_org_changes_empty_for_unknown(self, tools):
        result = asyncio.run(tools.get_org_changes({"companyName": "Initech"}))
        assert result == {"changes": []}


class TestCatalogLookups:
    def test_pricing_keyword_is_case_insensitive(self, tools):
        result = asyncio.run(tools.get_pricing({"productKeyword": "cLoUd"}))
        assert [item["sku"] for item in result] == ["CLD-001"]

    def test_pricing_no_match_is_empty_list(self, tools):
        assert asyncio.run(tools.get_pricing({"productKeyword": "quantum"})) == []

    def test_legal_clause_for_known_industry(self, tools):
        result = asyncio.run(tools.get_legal_clause({"industry": "Finance"}))
        assert result == {"clause": catalog.LEGAL_CLAUSES["finance"]}

    def test_unknown_industry_gets_standard_clause(self, tools):
        result = asyncio.run(tools.get_legal_clause({"industry": "aerospace"}))
        assert result == {"clause": catalog.LEGAL_CLAUSES["standard"]}

    def test_knowledge_base_search(self, tools):
        result = asyncio.run(tools.search_knowledge_base({"query": "Acme"}))
        names = [doc["name"] for doc in result["documents"]]
        assert names == ["Acme_Corp_Past_Proposal_2023.docx"]
        assert set(result["documents"][0]) == {"name", "link", "snippet"}

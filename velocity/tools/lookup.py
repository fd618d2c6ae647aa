"""Read-only lookup tools over the CRM data and the static catalog.

A miss is returned as data (an ``error`` key or an empty list) so the model
can tell the user instead of the turn failing.
"""

from __future__ import annotations

import logging
from typing import Any

from velocity.data import catalog
from velocity.data.crm import CrmDataSource

logger = logging.getLogger(__name__)


class LookupTools:
    """Tool handlers bound to one ``CrmDataSource``."""

    def __init__(self, data: CrmDataSource) -> None:
        self._data = data

    async def get_lead_details(self, args: dict[str, Any]) -> dict[str, Any]:
        company = args["companyName"]
        logger.info("[Tool] Getting lead details for: %s", company)
        lead = self._data.get_lead(company)
        if lead is None:
            return {"error": "Lead not found"}
        return lead.model_dump()

    async def get_company_news(self, args: dict[str, Any]) -> dict[str, Any]:
        logger.info("[Tool] Fetching news for: %s", args["companyName"])
        return {"news": self._data.get_news(args["companyName"])}

    async def get_recent_emails(self, args: dict[str, Any]) -> dict[str, Any]:
        logger.info("[Tool] Fetching emails for: %s", args["companyName"])
        emails = self._data.get_emails(args["companyName"])
        return {"emails": [e.model_dump() for e in emails]}

    async def get_org_changes(self, args: dict[str, Any]) -> dict[str, Any]:
        logger.info("[Tool] Fetching org changes for: %s", args["companyName"])
        changes = self._data.get_org_changes(args["companyName"])
        return {"changes": [c.model_dump() for c in changes]}

    async def get_pricing(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        logger.info("[Tool] Getting pricing for: %s", args["productKeyword"])
        return [item.model_dump() for item in catalog.find_pricing(args["productKeyword"])]

    async def get_legal_clause(self, args: dict[str, Any]) -> dict[str, Any]:
        logger.info("[Tool] Getting legal clause for: %s", args["industry"])
        return {"clause": catalog.legal_clause(args["industry"])}

    async def search_knowledge_base(self, args: dict[str, Any]) -> dict[str, Any]:
        logger.info("[Tool] Searching knowledge base for: %s", args["query"])
        docs = catalog.search_documents(args["query"])
        return {
            "documents": [
                {"name": doc.name, "link": doc.link, "snippet": doc.content}
                for doc in docs
            ]
        }

"""
Seller Lead Gateway — HubSpot CRM Client
==========================================
Thin wrapper over the HubSpot CRM v3 contacts API.

Endpoints used:
    POST  /crm/v3/objects/contacts           create
    POST  /crm/v3/objects/contacts/search    find by exact email
    PATCH /crm/v3/objects/contacts/{id}      update

Auth: private-app bearer token (HUBSPOT_TOKEN). The client never raises on
HTTP status; callers inspect the response, because a 409 on create is an
expected branch rather than a failure.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import ConfigurationError

logger = logging.getLogger("seller_leads.hubspot")

CONTACTS_PATH = "/crm/v3/objects/contacts"


@dataclass
class HubSpotClient:
    http_client: httpx.AsyncClient
    token: str = ""
    api_base: str = "https://api.hubapi.com"

    @property
    def is_configured(self) -> bool:
        return bool(self.token)

    def _headers(self) -> dict:
        if not self.token:
            raise ConfigurationError("HUBSPOT_TOKEN")
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def create_contact(self, properties: dict) -> httpx.Response:
        """Create a contact. 201 on success, 409 when the email is taken."""
        return await self.http_client.post(
            f"{self.api_base}{CONTACTS_PATH}",
            headers=self._headers(),
            json={"properties": properties},
        )

    async def search_contact_by_email(self, email: str) -> httpx.Response:
        return await self.http_client.post(
            f"{self.api_base}{CONTACTS_PATH}/search",
            headers=self._headers(),
            json={
                "filterGroups": [
                    {
                        "filters": [
                            {"propertyName": "email", "operator": "EQ", "value": email},
                        ],
                    },
                ],
                "limit": 1,
            },
        )

    async def update_contact(self, contact_id: str, properties: dict) -> httpx.Response:
        return await self.http_client.patch(
            f"{self.api_base}{CONTACTS_PATH}/{contact_id}",
            headers=self._headers(),
            json={"properties": properties},
        )

    async def find_contact_id(self, email: str) -> Optional[str]:
        """Return the id of the first contact whose email matches, if any."""
        resp = await self.search_contact_by_email(email)
        if not resp.is_success:
            logger.warning(
                "HubSpot contact search failed: HTTP %d — %s",
                resp.status_code,
                resp.text[:500],
            )
            return None
        data = resp.json()
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            logger.warning("HubSpot contact search returned no usable results")
            return None
        contact_id = results[0].get("id")
        return str(contact_id) if contact_id is not None else None

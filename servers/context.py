"""
Shared per-process resources for the site API (replaces module globals).

One httpx.AsyncClient is shared by the HubSpot and API Ninjas clients and
closed when the app shuts down.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from fastapi import Request

from shared.config import Settings
from shared.errors import ValidationError
from shared.hubspot import HubSpotClient
from shared.ninjas import ApiNinjasClient


@dataclass
class SiteContext:
    settings: Settings
    http_client: httpx.AsyncClient
    crm: HubSpotClient
    ninjas: ApiNinjasClient

    @classmethod
    def build(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SiteContext":
        http_client = httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
        return cls(
            settings=settings,
            http_client=http_client,
            crm=HubSpotClient(
                http_client=http_client,
                token=settings.hubspot_token,
                api_base=settings.hubspot_api_base,
            ),
            ninjas=ApiNinjasClient(
                http_client=http_client,
                api_key=settings.api_ninjas_key,
                api_base=settings.api_ninjas_base,
                rate_cache_seconds=settings.mortgage_rate_cache_seconds,
            ),
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()


def get_site(request: Request) -> SiteContext:
    """FastAPI dependency: the SiteContext attached by create_app()."""
    return request.app.state.site


async def read_json(request: Request) -> Any:
    raw_body = await request.body()
    try:
        return json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON") from None

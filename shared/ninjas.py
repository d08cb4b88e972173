"""
Seller Lead Gateway — API Ninjas Client
=========================================
Numeric/property data used by the site:

    GET /mortgagecalculator   amortization estimate
    GET /propertydetails      beds/baths/sqft/... for an address
    GET /mortgagerate         weekly 30/15-year fixed rates

Auth: X-Api-Key header (API_NINJAS_KEY).

The mortgage rate changes weekly, so the latest answer is cached in memory
for MORTGAGE_RATE_CACHE_SECONDS. An asyncio.Lock keeps concurrent cache
misses down to one upstream call.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from .errors import ConfigurationError, UpstreamError
from .models import MortgageRate

logger = logging.getLogger("seller_leads.ninjas")


@dataclass
class ApiNinjasClient:
    http_client: httpx.AsyncClient
    api_key: str = ""
    api_base: str = "https://api.api-ninjas.com/v1"
    rate_cache_seconds: float = 3600.0

    # Cached mortgage-rate state
    _rate: Optional[MortgageRate] = None
    _rate_expires_at: float = 0.0
    _rate_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict:
        if not self.api_key:
            raise ConfigurationError("API_NINJAS_KEY")
        return {"X-Api-Key": self.api_key}

    async def mortgage_calculator(self, params: dict[str, str]) -> httpx.Response:
        return await self.http_client.get(
            f"{self.api_base}/mortgagecalculator",
            params=params,
            headers=self._headers(),
        )

    async def property_details(self, address: str) -> httpx.Response:
        # httpx percent-encodes query params
        return await self.http_client.get(
            f"{self.api_base}/propertydetails",
            params={"address": address},
            headers=self._headers(),
        )

    # ------------------------------------------------------------------
    # Mortgage rate (cached)
    # ------------------------------------------------------------------

    def _rate_is_fresh(self) -> bool:
        return self._rate is not None and time.monotonic() < self._rate_expires_at

    async def mortgage_rate(self) -> MortgageRate:
        """Latest weekly mortgage rates, served from cache when fresh."""
        if self._rate_is_fresh():
            return self._rate

        headers = self._headers()
        async with self._rate_lock:
            # Another coroutine may have refreshed while we waited
            if self._rate_is_fresh():
                return self._rate

            self._rate = await self._fetch_mortgage_rate(headers)
            self._rate_expires_at = time.monotonic() + self.rate_cache_seconds
            return self._rate

    async def _fetch_mortgage_rate(self, headers: dict) -> MortgageRate:
        try:
            resp = await self.http_client.get(
                f"{self.api_base}/mortgagerate", headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("Mortgage rate request failed: %s", exc)
            raise UpstreamError("Failed to fetch rate") from exc

        if not resp.is_success:
            logger.error(
                "Mortgage rate lookup failed: HTTP %d — %s",
                resp.status_code,
                resp.text[:500],
            )
            raise UpstreamError(
                "Failed to fetch rate",
                upstream_status=resp.status_code,
                upstream_body=resp.text[:500],
            )

        try:
            data: Any = resp.json()
        except ValueError as exc:
            raise UpstreamError("Failed to fetch rate") from exc

        latest = data[0] if isinstance(data, list) and data else {}
        if not isinstance(latest, dict):
            latest = {}
        rate = MortgageRate(
            frm_30=latest.get("frm_30") or None,
            frm_15=latest.get("frm_15") or None,
            week=latest.get("week") or None,
        )
        logger.info("Mortgage rate refreshed", extra={"week": rate.week})
        return rate

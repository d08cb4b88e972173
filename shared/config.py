"""
Seller Lead Gateway — Runtime Configuration
============================================
All settings are read from the process environment once at startup.

Env vars:
    HUBSPOT_TOKEN                - HubSpot private-app bearer token (secret)
    API_NINJAS_KEY               - API Ninjas key for mortgage/property data (secret)
    HUBSPOT_API_BASE             - default: https://api.hubapi.com
    API_NINJAS_BASE              - default: https://api.api-ninjas.com/v1
    HTTP_TIMEOUT_SECONDS         - outbound request timeout (default: 15)
    MORTGAGE_RATE_CACHE_SECONDS  - mortgage-rate cache lifetime (default: 3600)
    GEO_DEFAULT_CITY             - /geo fallback city (default: Clemson)
    GEO_DEFAULT_REGION           - /geo fallback region (default: SC)
    GEO_DEFAULT_COUNTRY          - /geo fallback country (default: US)
    LOG_LEVEL                    - default: INFO

Missing secrets never stop the server from starting; the endpoints that
need them answer with a configuration error instead.
"""

import os
from dataclasses import dataclass


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    hubspot_token: str = ""
    api_ninjas_key: str = ""
    hubspot_api_base: str = "https://api.hubapi.com"
    api_ninjas_base: str = "https://api.api-ninjas.com/v1"
    http_timeout_seconds: float = 15.0
    mortgage_rate_cache_seconds: float = 3600.0
    geo_default_city: str = "Clemson"
    geo_default_region: str = "SC"
    geo_default_country: str = "US"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            hubspot_token=os.getenv("HUBSPOT_TOKEN", ""),
            api_ninjas_key=os.getenv("API_NINJAS_KEY", ""),
            hubspot_api_base=os.getenv(
                "HUBSPOT_API_BASE", "https://api.hubapi.com"
            ).rstrip("/"),
            api_ninjas_base=os.getenv(
                "API_NINJAS_BASE", "https://api.api-ninjas.com/v1"
            ).rstrip("/"),
            http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", 15.0),
            mortgage_rate_cache_seconds=_float_env("MORTGAGE_RATE_CACHE_SECONDS", 3600.0),
            geo_default_city=os.getenv("GEO_DEFAULT_CITY", "Clemson"),
            geo_default_region=os.getenv("GEO_DEFAULT_REGION", "SC"),
            geo_default_country=os.getenv("GEO_DEFAULT_COUNTRY", "US"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def crm_configured(self) -> bool:
        return bool(self.hubspot_token)

    @property
    def data_api_configured(self) -> bool:
        return bool(self.api_ninjas_key)

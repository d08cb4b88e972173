"""Visitor location from the edge proxy's geo headers."""

from typing import Mapping, Optional
from urllib.parse import unquote

from .config import Settings
from .models import VisitorGeo

CITY_HEADER = "x-vercel-ip-city"
REGION_HEADER = "x-vercel-ip-country-region"
COUNTRY_HEADER = "x-vercel-ip-country"
LATITUDE_HEADER = "x-vercel-ip-latitude"
LONGITUDE_HEADER = "x-vercel-ip-longitude"


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        return None
    value = unquote(value).strip()
    return value or None


def visitor_geo(headers: Mapping[str, str], settings: Settings) -> VisitorGeo:
    """Geo headers when present, otherwise the configured home-market defaults."""
    return VisitorGeo(
        city=_header(headers, CITY_HEADER) or settings.geo_default_city,
        region=_header(headers, REGION_HEADER) or settings.geo_default_region,
        country=_header(headers, COUNTRY_HEADER) or settings.geo_default_country,
        latitude=_header(headers, LATITUDE_HEADER),
        longitude=_header(headers, LONGITUDE_HEADER),
    )

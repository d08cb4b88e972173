"""
Property enrichment for the address preview card.

Best effort by contract: no API key, an upstream failure or an unreadable
answer all produce {"data": None}, never an error, so a lead can always be
submitted whether or not the preview loaded.

The upstream record has been seen with several spellings for the same
field. FIELD_SOURCES lists (source key, target field) pairs in ascending
priority: every matching pair is applied in order, so when a record carries
more than one spelling the pair listed last wins. The canonical name for
each field is listed last.
"""

import logging
import math
from typing import Any, Callable, Optional

import httpx

from .errors import ConfigurationError
from .models import PropertyDetails
from .ninjas import ApiNinjasClient

logger = logging.getLogger("seller_leads.property")


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


FIELD_SOURCES: tuple[tuple[str, str, Callable[[Any], Any]], ...] = (
    ("bedrooms", "beds", _to_number),
    ("beds", "beds", _to_number),
    ("bathrooms", "baths", _to_number),
    ("baths", "baths", _to_number),
    ("square_feet", "sqft", _to_number),
    ("sqft", "sqft", _to_number),
    ("building_size", "sqft", _to_number),
    ("year_built", "year_built", _to_number),
    ("lot_size", "lot_sqft", _to_number),
    ("lot_sqft", "lot_sqft", _to_number),
    ("property_type", "property_type", _to_text),
    ("estimated_value", "estimated_value", _to_number),
    ("price", "estimated_value", _to_number),
)


def _source_record(raw: Any) -> dict:
    if isinstance(raw, list):
        raw = raw[0] if raw else {}
    if not isinstance(raw, dict):
        return {}
    nested = raw.get("property")
    return nested if isinstance(nested, dict) and nested else raw


def extract_property_details(raw: Any) -> Optional[PropertyDetails]:
    """Map an upstream payload onto PropertyDetails; None when nothing matched."""
    record = _source_record(raw)
    fields: dict[str, Any] = {}
    for source_key, target, convert in FIELD_SOURCES:
        if record.get(source_key) is None:
            continue
        value = convert(record[source_key])
        if value is not None:
            fields[target] = value

    if not fields:
        return None
    return PropertyDetails(**fields)


async def lookup_property(ninjas: ApiNinjasClient, address: str) -> dict:
    """Return {"data": {...populated fields...}} or {"data": None}."""
    try:
        resp = await ninjas.property_details(address)
    except ConfigurationError:
        logger.warning("API_NINJAS_KEY is not configured — property lookup skipped")
        return {"data": None}
    except httpx.HTTPError as exc:
        logger.warning("Property details request failed: %s", exc)
        return {"data": None}

    if not resp.is_success:
        logger.warning(
            "Property details error: HTTP %d — %s",
            resp.status_code,
            resp.reason_phrase,
        )
        return {"data": None}

    try:
        raw = resp.json()
    except ValueError:
        logger.warning("Property details response was not JSON")
        return {"data": None}

    details = extract_property_details(raw)
    logger.info(
        "Property details parsed",
        extra={"fields": sorted(details.model_dump(exclude_none=True)) if details else []},
    )
    if details is None:
        return {"data": None}
    return {"data": details.model_dump(exclude_none=True)}

"""
Mortgage estimate proxy.

The amortization itself is done by the API Ninjas calculator; this module
validates the inputs, builds the query and passes the answer through.
Annual figures come from the calculator as-is and are not derived from the
monthly ones.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from .errors import UpstreamError, ValidationError
from .models import MortgageRequest, MortgageResult
from .ninjas import ApiNinjasClient

logger = logging.getLogger("seller_leads.mortgage")

REQUIRED_FIELDS = ("home_value", "interest_rate", "duration_years")

# Cents of rounding slack when checking a breakdown against its total
_TOTAL_TOLERANCE = 0.01


def parse_mortgage_request(payload: Any) -> MortgageRequest:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    # Explicit null is the same as leaving the field out
    cleaned = {k: v for k, v in payload.items() if v is not None}

    missing = [name for name in REQUIRED_FIELDS if name not in cleaned]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(REQUIRED_FIELDS)}"
        )
    try:
        return MortgageRequest.model_validate(cleaned)
    except PydanticValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ValidationError(f"Invalid value for: {', '.join(fields)}") from exc


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_calculator_query(req: MortgageRequest) -> dict[str, str]:
    """Required fields always; HOA only when non-zero; tax/insurance when given."""
    params = {
        "home_value": _fmt(req.home_value),
        "downpayment": _fmt(req.downpayment),
        "interest_rate": _fmt(req.interest_rate),
        "duration_years": str(req.duration_years),
    }
    if req.monthly_hoa:
        params["monthly_hoa"] = _fmt(req.monthly_hoa)
    if req.annual_property_tax is not None:
        params["annual_property_tax"] = _fmt(req.annual_property_tax)
    if req.annual_home_insurance is not None:
        params["annual_home_insurance"] = _fmt(req.annual_home_insurance)
    return params


def check_breakdown(payload: Any) -> bool:
    """True when the payload has the expected shape and each total adds up."""
    try:
        result = MortgageResult.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("Unexpected mortgage calculator payload: %s", exc.error_count())
        return False

    consistent = True
    for name in ("monthly_payment", "annual_payment"):
        breakdown = getattr(result, name)
        if abs(breakdown.component_sum() - breakdown.total) > _TOTAL_TOLERANCE:
            logger.warning(
                "Mortgage %s components do not sum to total",
                name,
                extra={"component_sum": breakdown.component_sum(), "total": breakdown.total},
            )
            consistent = False
    return consistent


async def estimate_mortgage(ninjas: ApiNinjasClient, req: MortgageRequest) -> dict:
    """Return {"data": <calculator payload>}; upstream errors keep their status."""
    params = build_calculator_query(req)

    try:
        resp = await ninjas.mortgage_calculator(params)
    except httpx.HTTPError as exc:
        logger.error("Mortgage calculator request failed: %s", exc)
        raise UpstreamError("Failed to calculate mortgage") from exc

    if not resp.is_success:
        logger.error(
            "Mortgage calculator error: HTTP %d — %s",
            resp.status_code,
            resp.reason_phrase,
        )
        raise UpstreamError(
            "Failed to calculate mortgage",
            upstream_status=resp.status_code,
            upstream_body=resp.text[:500],
            propagate_status=True,
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamError("Failed to calculate mortgage") from exc

    check_breakdown(data)
    return {"data": data}

"""
Seller Lead Gateway — CRM Upsert
=================================
Reflects a validated submission as a HubSpot contact keyed by email.

Sequence (no retries):
    1. create                      -> 2xx: CREATED
    2. 409 conflict:
         search by email -> id
         update id with properties minus "email"
                                   -> UPDATED, or EXISTING if the search or
                                      update did not go through
    3. anything else               -> UpstreamError

HubSpot owns uniqueness. A conflict proves the contact exists, so the caller
is told the submission succeeded even when the follow-up update fails.
"""

import logging
from enum import Enum
from typing import Any

import httpx

from .errors import UpstreamError
from .hubspot import HubSpotClient
from .models import ContactSubmission, LeadSubmission
from .normalize import property_type_label, relationship_label, selling_timeline_label

logger = logging.getLogger("seller_leads.contacts")

IMMUTABLE_PROPERTIES = frozenset({"email"})

CONTACT_FORM_SOURCE = "Contact Form"


class UpsertOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    EXISTING = "existing"


# ---------------------------------------------------------------------------
# Property builders
# ---------------------------------------------------------------------------

def annotate_address(address: str, lat: float | None, lng: float | None) -> str:
    """Append "(lat, lng)" to the address when both coordinates are known."""
    if lat is None or lng is None:
        return address
    return f"{address} ({lat:.6f}, {lng:.6f})"


def lead_properties(lead: LeadSubmission) -> dict[str, str]:
    """HubSpot properties for a home value lead (expects validate_lead output)."""
    properties = {
        "email": lead.email,
        "firstname": lead.first_name,
        "phone": lead.phone,
        "address": annotate_address(lead.address, lead.lat, lead.lng),
        "selling_timeline": selling_timeline_label(lead.selling_timeline),
        "property_type": property_type_label(lead.property_type),
        "relationship_to_property": relationship_label(lead.relationship),
    }
    if lead.last_name:
        properties["lastname"] = lead.last_name

    visitor_geo = {
        "city": lead.visitor_city,
        "state": lead.visitor_region,
        "country": lead.visitor_country,
        "ip_latitude": lead.visitor_latitude,
        "ip_longitude": lead.visitor_longitude,
    }
    properties.update({k: v for k, v in visitor_geo.items() if v})
    return properties


def contact_form_properties(contact: ContactSubmission) -> dict[str, str]:
    return {
        "firstname": contact.first_name,
        "lastname": contact.last_name or "",
        "email": contact.email,
        "phone": contact.phone or "",
        "message": contact.message,
        "lead_source": CONTACT_FORM_SOURCE,
    }


def update_properties(properties: dict[str, Any]) -> dict[str, Any]:
    """Drop fields HubSpot refuses to change on an existing contact."""
    return {k: v for k, v in properties.items() if k not in IMMUTABLE_PROPERTIES}


def _response_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


# ---------------------------------------------------------------------------
# Upsert coordinator
# ---------------------------------------------------------------------------

async def upsert_contact(
    crm: HubSpotClient,
    properties: dict[str, Any],
    *,
    failure_message: str = "Failed to submit",
    expose_details: bool = False,
) -> UpsertOutcome:
    """
    Create the contact, or update it when HubSpot reports the email exists.

    Raises UpstreamError for any create answer other than 2xx / 409, with
    the HubSpot body attached (and put in the response when expose_details
    is set).
    """
    email = properties["email"]

    try:
        resp = await crm.create_contact(properties)
    except httpx.HTTPError as exc:
        logger.error("HubSpot create request failed: %s", exc)
        raise UpstreamError(failure_message) from exc

    if resp.is_success:
        logger.info("HubSpot contact created", extra={"hubspot_status": resp.status_code})
        return UpsertOutcome.CREATED

    if resp.status_code == httpx.codes.CONFLICT:
        logger.info("HubSpot contact already exists — updating")
        return await _update_existing(crm, email, properties)

    body = _response_body(resp)
    logger.error(
        "HubSpot API error: HTTP %d — %s",
        resp.status_code,
        str(body)[:1000],
    )
    raise UpstreamError(
        failure_message,
        upstream_status=resp.status_code,
        upstream_body=body,
        expose_details=expose_details,
    )


async def _update_existing(
    crm: HubSpotClient, email: str, properties: dict[str, Any]
) -> UpsertOutcome:
    try:
        contact_id = await crm.find_contact_id(email)
        if not contact_id:
            logger.warning("Conflicting HubSpot contact not found by email search")
            return UpsertOutcome.EXISTING

        resp = await crm.update_contact(contact_id, update_properties(properties))
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("HubSpot update after conflict failed: %s", exc)
        return UpsertOutcome.EXISTING

    if not resp.is_success:
        logger.warning(
            "HubSpot contact update failed: HTTP %d — %s",
            resp.status_code,
            resp.text[:500],
            extra={"hubspot_contact_id": contact_id},
        )
        return UpsertOutcome.EXISTING

    logger.info("HubSpot contact updated", extra={"hubspot_contact_id": contact_id})
    return UpsertOutcome.UPDATED

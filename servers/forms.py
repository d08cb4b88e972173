"""
Form submission endpoints.

    POST /lead      home value estimate request
    POST /contact   contact page message

Both answer {"success": true} for accepted submissions AND for honeypot
hits; neither says anything about a submission that a bot could use.
"""

import logging

from fastapi import APIRouter, Depends, Request

from shared.contacts import contact_form_properties, lead_properties, upsert_contact
from shared.errors import ConfigurationError
from shared.validation import validate_contact, validate_lead

from .context import SiteContext, get_site, read_json

logger = logging.getLogger("seller_leads.forms")

router = APIRouter(tags=["forms"])


def _require_crm(site: SiteContext) -> None:
    if not site.crm.is_configured:
        raise ConfigurationError("HUBSPOT_TOKEN")


@router.post("/lead")
async def submit_lead(request: Request, site: SiteContext = Depends(get_site)):
    payload = await read_json(request)
    lead = validate_lead(payload)
    _require_crm(site)

    properties = lead_properties(lead)
    outcome = await upsert_contact(
        site.crm,
        properties,
        failure_message="Failed to submit lead",
        expose_details=True,
    )
    logger.info("Lead submitted", extra={
        "outcome": outcome.value,
        "property_type": lead.property_type,
        "selling_timeline": lead.selling_timeline,
        "has_coordinates": lead.lat is not None and lead.lng is not None,
    })
    return {"success": True}


@router.post("/contact")
async def submit_contact(request: Request, site: SiteContext = Depends(get_site)):
    payload = await read_json(request)
    contact = validate_contact(payload)
    _require_crm(site)

    outcome = await upsert_contact(
        site.crm,
        contact_form_properties(contact),
        failure_message="Failed to submit contact form",
    )
    logger.info("Contact form submitted", extra={"outcome": outcome.value})
    return {"success": True}

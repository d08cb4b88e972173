"""
Lookup endpoints used while the visitor fills in the address form.

    POST /property   property details for the selected address
    GET  /geo        visitor location (pre-fills the map)
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from shared.errors import ValidationError
from shared.geo import visitor_geo
from shared.models import PropertyLookupRequest
from shared.property import lookup_property

from .context import SiteContext, get_site, read_json

logger = logging.getLogger("seller_leads.lookups")

router = APIRouter(tags=["lookups"])


@router.post("/property")
async def property_details(request: Request, site: SiteContext = Depends(get_site)):
    try:
        payload = await read_json(request)
    except ValidationError:
        # Best-effort preview: an unreadable body gets no details, not an error
        logger.warning("Property lookup body is not valid JSON")
        return {"data": None}
    if not isinstance(payload, dict):
        raise ValidationError("Address is required")
    try:
        lookup = PropertyLookupRequest.model_validate(payload)
    except PydanticValidationError:
        raise ValidationError("Address is required") from None
    if not lookup.address:
        raise ValidationError("Address is required")
    return await lookup_property(site.ninjas, lookup.address)


@router.get("/geo")
async def geo(request: Request, site: SiteContext = Depends(get_site)):
    return visitor_geo(request.headers, site.settings).model_dump()

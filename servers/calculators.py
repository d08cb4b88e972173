"""
Mortgage calculator endpoints.

    POST /mortgage        estimate for the visitor's numbers
    GET  /mortgage-rate   current 30/15-year fixed rates
"""

from fastapi import APIRouter, Depends, Request

from shared.errors import ConfigurationError
from shared.mortgage import estimate_mortgage, parse_mortgage_request

from .context import SiteContext, get_site, read_json

router = APIRouter(tags=["mortgage"])


@router.post("/mortgage")
async def calculate_mortgage(request: Request, site: SiteContext = Depends(get_site)):
    payload = await read_json(request)
    req = parse_mortgage_request(payload)
    if not site.ninjas.is_configured:
        raise ConfigurationError("API_NINJAS_KEY", "API configuration error")
    return await estimate_mortgage(site.ninjas, req)


@router.get("/mortgage-rate")
async def mortgage_rate(site: SiteContext = Depends(get_site)):
    rate = await site.ninjas.mortgage_rate()
    return rate.model_dump()

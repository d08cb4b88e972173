"""
Seller Lead Gateway — FastAPI Application

Routes:
    POST /lead            home value lead → HubSpot
    POST /contact         contact form → HubSpot
    POST /mortgage        mortgage estimate (API Ninjas)
    GET  /mortgage-rate   weekly 30/15-year rates (cached 1h)
    POST /property        address → property details (best effort)
    GET  /geo             visitor location from edge headers
    GET  /health

Run with servers/site_api.py, or any ASGI server pointed at servers.app:app.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.config import Settings
from shared.errors import BotDetected, ConfigurationError, SiteError, ValidationError
from shared.middleware import RequestAuditMiddleware, setup_logging

from .calculators import router as calculators_router
from .context import SiteContext
from .forms import router as forms_router
from .lookups import router as lookups_router

logger = logging.getLogger("seller_leads.app")


async def _site_error_handler(request: Request, exc: SiteError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error("%s is not configured", exc.setting, extra={"path": request.url.path})
    elif isinstance(exc, ValidationError):
        logger.info("Request rejected: %s", exc.message, extra={"path": request.url.path})
    elif not isinstance(exc, BotDetected):
        logger.warning("Request failed: %s", exc.message, extra={
            "path": request.url.path,
            "upstream_status": getattr(exc, "upstream_status", None),
        })
    return JSONResponse(exc.to_response(), status_code=exc.status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the site API. settings defaults to Settings.from_env(); transport
    replaces the outbound HTTP transport (tests pass an httpx.MockTransport).
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    site = SiteContext.build(settings, transport=transport)

    if not settings.crm_configured:
        logger.warning("HUBSPOT_TOKEN not set — /lead and /contact will return errors")
    if not settings.data_api_configured:
        logger.warning(
            "API_NINJAS_KEY not set — mortgage endpoints will return errors, "
            "property lookups will return no data"
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await site.aclose()

    app = FastAPI(title="Seller Lead Gateway", lifespan=lifespan)
    app.state.site = site

    app.add_exception_handler(SiteError, _site_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.add_middleware(RequestAuditMiddleware)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "crm_configured": settings.crm_configured,
            "data_api_configured": settings.data_api_configured,
        }

    app.include_router(forms_router)
    app.include_router(calculators_router)
    app.include_router(lookups_router)
    return app


app = create_app()

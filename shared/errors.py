"""
Seller Lead Gateway — Error Taxonomy

Every error the pipeline raises on purpose carries the HTTP status and the
public message the site returns for it. Internal detail (upstream bodies,
missing secret names) stays on the exception for logging and is only put
in a response when the raising code asks for it.
"""

from typing import Any, Optional


class SiteError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.public_message
        super().__init__(self.message)

    def to_response(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(SiteError):
    """Missing or malformed required input."""

    status_code = 400
    public_message = "Invalid request"


class InvalidEmailError(ValidationError):
    public_message = "Invalid email format"


class ConfigurationError(SiteError):
    """A secret the endpoint depends on is not configured."""

    status_code = 500
    public_message = "Server configuration error"

    def __init__(self, setting: str, message: Optional[str] = None) -> None:
        self.setting = setting
        super().__init__(message)


class UpstreamError(SiteError):
    """
    Non-success, non-conflict answer (or no answer) from an external service.

    upstream_status / upstream_body are kept for logs. Set expose_details to
    put the upstream body in the response under "details"; set
    propagate_status to answer with the upstream status code.
    """

    status_code = 500
    public_message = "Upstream service error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        upstream_status: Optional[int] = None,
        upstream_body: Any = None,
        expose_details: bool = False,
        propagate_status: bool = False,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        self.expose_details = expose_details
        if propagate_status and upstream_status and upstream_status >= 400:
            self.status_code = upstream_status

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        if self.expose_details and self.upstream_body is not None:
            body["details"] = self.upstream_body
        return body


class BotDetected(SiteError):
    """
    Honeypot field was filled in. Not a failure: the site answers exactly
    like an accepted submission so the sender learns nothing.
    """

    status_code = 200
    public_message = "Honeypot triggered"

    def to_response(self) -> dict[str, Any]:
        return {"success": True}

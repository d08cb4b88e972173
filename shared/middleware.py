"""
Seller Lead Gateway — Request Middleware

Provides:
  - Correlation ID generation and propagation (X-Request-ID)
  - Structured JSON logging to stderr
  - Per-request audit events with timing

Usage:
    from shared.middleware import RequestAuditMiddleware, setup_logging

    setup_logging("INFO")
    app.add_middleware(RequestAuditMiddleware)
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar, Token
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

# ---------------------------------------------------------------------------
# Correlation ID context
# ---------------------------------------------------------------------------

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_HEADER = "x-request-id"


def get_correlation_id() -> str:
    """The current request's correlation ID, or "" outside a request."""
    return _correlation_id.get()


def set_correlation_id(cid: str) -> Token:
    """Set the correlation ID (e.g., from an inbound HTTP header).

    Returns the token for reset_correlation_id().
    """
    return _correlation_id.set(cid)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


# ---------------------------------------------------------------------------
# Structured JSON logger
# ---------------------------------------------------------------------------

_logger = logging.getLogger("seller_leads")

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class _StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S.000Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key != "extra_data":
                entry[key] = value
        if hasattr(record, "extra_data"):
            entry.update(record.extra_data)
        cid = get_correlation_id()
        if cid:
            entry["correlation_id"] = cid
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging to stderr (idempotent)."""
    _logger.setLevel(level)
    if _logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_StructuredFormatter())
    _logger.addHandler(handler)


def audit_log(event_type: str, **kwargs: Any) -> None:
    """Emit a structured audit log entry."""
    record = _logger.makeRecord(
        name="seller_leads.audit",
        level=logging.INFO,
        fn="",
        lno=0,
        msg=f"{event_type}",
        args=(),
        exc_info=None,
    )
    record.extra_data = {"event_type": event_type, **kwargs}
    _logger.handle(record)


# ---------------------------------------------------------------------------
# ASGI middleware — correlation ID + timing + audit logging per request
# ---------------------------------------------------------------------------

class RequestAuditMiddleware:
    """
    Assigns a correlation ID to every HTTP request (reusing an inbound
    X-Request-ID), echoes it on the response, and emits request.start /
    request.end audit events with the duration.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        inbound = dict(scope.get("headers") or []).get(CORRELATION_HEADER.encode())
        cid = inbound.decode("latin-1") if inbound else str(uuid.uuid4())
        token = set_correlation_id(cid)

        method = scope.get("method", "")
        path = scope.get("path", "")
        status_holder = {"status": 500}

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
                headers = MutableHeaders(scope=message)
                headers[CORRELATION_HEADER] = cid
            await send(message)

        audit_log("request.start", method=method, path=path)
        start = time.monotonic()
        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            duration_ms = int((time.monotonic() - start) * 1000)
            audit_log(
                "request.error",
                method=method,
                path=path,
                duration_ms=duration_ms,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        else:
            duration_ms = int((time.monotonic() - start) * 1000)
            audit_log(
                "request.end",
                method=method,
                path=path,
                status=status_holder["status"],
                duration_ms=duration_ms,
            )
        finally:
            reset_correlation_id(token)

"""
Seller Lead Gateway — Submission Validation

Order matters and is the same for every form:
  1. honeypot  (BotDetected, answered as success)
  2. body shape (ValidationError)
  3. required fields (ValidationError)
  4. format checks (InvalidEmailError / ValidationError)
  5. defaults for optional option codes
"""

import logging
import re
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .errors import BotDetected, InvalidEmailError, ValidationError
from .models import ContactSubmission, LeadSubmission

logger = logging.getLogger("seller_leads.validation")

HONEYPOT_FIELD = "website"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_DIGITS = 10

DEFAULT_SELLING_TIMELINE = "curious"
DEFAULT_RELATIONSHIP = "homeowner"

# wire name -> model attribute
LEAD_REQUIRED = {
    "address": "address",
    "firstName": "first_name",
    "email": "email",
    "phone": "phone",
    "propertyType": "property_type",
}
CONTACT_REQUIRED = {
    "firstName": "first_name",
    "email": "email",
    "message": "message",
}


# ---------------------------------------------------------------------------
# Bot filter
# ---------------------------------------------------------------------------

def check_honeypot(payload: Any, field: str = HONEYPOT_FIELD) -> None:
    """Raise BotDetected when the hidden field came back filled in."""
    if not isinstance(payload, Mapping):
        return
    # Whitespace counts as filled in
    if payload.get(field):
        logger.info("Honeypot triggered — submission dropped",
                    extra={"honeypot_field": field})
        raise BotDetected()


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------

def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def phone_digits(phone: str) -> str:
    return re.sub(r"\D", "", phone)


def _parse(model, payload: Any):
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise ValidationError(f"Invalid value for: {', '.join(fields)}") from exc


def _missing(submission, required: Mapping[str, str]) -> list[str]:
    return [wire for wire, attr in required.items() if not getattr(submission, attr)]


# ---------------------------------------------------------------------------
# Form validators
# ---------------------------------------------------------------------------

def validate_lead(payload: Any) -> LeadSubmission:
    """Validate a raw /lead body and apply option defaults."""
    check_honeypot(payload)
    lead = _parse(LeadSubmission, payload)

    missing = _missing(lead, LEAD_REQUIRED)
    if missing:
        logger.warning("Lead rejected — missing required fields",
                       extra={"missing": missing})
        raise ValidationError(f"Required fields: {', '.join(LEAD_REQUIRED)}")

    if not is_valid_email(lead.email):
        logger.warning("Lead rejected — invalid email format")
        raise InvalidEmailError()

    if len(phone_digits(lead.phone)) < MIN_PHONE_DIGITS:
        logger.warning("Lead rejected — phone number too short")
        raise ValidationError("Invalid phone number")

    return lead.model_copy(update={
        "selling_timeline": lead.selling_timeline or DEFAULT_SELLING_TIMELINE,
        "relationship": lead.relationship or DEFAULT_RELATIONSHIP,
    })


def validate_contact(payload: Any) -> ContactSubmission:
    """Validate a raw /contact body."""
    check_honeypot(payload)
    contact = _parse(ContactSubmission, payload)

    if _missing(contact, CONTACT_REQUIRED):
        raise ValidationError("First name, email, and message are required")

    if not is_valid_email(contact.email):
        raise InvalidEmailError()

    return contact

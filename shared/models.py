"""
Seller Lead Gateway — Shared Domain Models

Inbound models use the browser's camelCase names as aliases and keep every
field optional: required-field checks happen in shared.validation, after the
honeypot check, so a bot never sees a schema error.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Number = Union[int, float]

_INBOUND = ConfigDict(
    populate_by_name=True,
    extra="ignore",
    coerce_numbers_to_str=True,
    str_strip_whitespace=True,
)


# ---------------------------------------------------------------------------
# Form submissions
# ---------------------------------------------------------------------------

class LeadSubmission(BaseModel):
    """Home value estimate request from the address form."""

    model_config = _INBOUND

    address: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    property_type: Optional[str] = Field(None, alias="propertyType")
    selling_timeline: Optional[str] = Field(None, alias="sellingTimeline")
    relationship: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    visitor_city: Optional[str] = Field(None, alias="visitorCity")
    visitor_region: Optional[str] = Field(None, alias="visitorRegion")
    visitor_country: Optional[str] = Field(None, alias="visitorCountry")
    visitor_latitude: Optional[str] = Field(None, alias="visitorLatitude")
    visitor_longitude: Optional[str] = Field(None, alias="visitorLongitude")
    website: Optional[str] = None


class ContactSubmission(BaseModel):
    """Message from the contact page."""

    model_config = _INBOUND

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    website: Optional[str] = None


# ---------------------------------------------------------------------------
# Mortgage calculator
# ---------------------------------------------------------------------------

class MortgageRequest(BaseModel):
    """None means "not supplied"; zero is a supplied value."""

    model_config = ConfigDict(extra="ignore")

    home_value: Optional[float] = Field(None, gt=0)
    downpayment: float = Field(0, ge=0)
    interest_rate: Optional[float] = Field(None, ge=0)
    duration_years: Optional[int] = Field(None, gt=0)
    monthly_hoa: float = Field(0, ge=0)
    annual_property_tax: Optional[float] = Field(None, ge=0)
    annual_home_insurance: Optional[float] = Field(None, ge=0)


class PaymentBreakdown(BaseModel):
    model_config = ConfigDict(extra="allow")

    mortgage: float
    property_tax: float
    hoa: float
    home_insurance: float
    total: float

    def component_sum(self) -> float:
        return self.mortgage + self.property_tax + self.hoa + self.home_insurance


class MortgageResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    monthly_payment: PaymentBreakdown
    annual_payment: PaymentBreakdown
    total_interest_paid: float


class MortgageRate(BaseModel):
    frm_30: Optional[float] = None
    frm_15: Optional[float] = None
    week: Optional[str] = None


# ---------------------------------------------------------------------------
# Property enrichment / visitor geo
# ---------------------------------------------------------------------------

class PropertyLookupRequest(BaseModel):
    model_config = _INBOUND

    address: Optional[str] = None


class PropertyDetails(BaseModel):
    """Sparse: a field is set only when the upstream record had it."""

    beds: Optional[Number] = None
    baths: Optional[Number] = None
    sqft: Optional[Number] = None
    year_built: Optional[Number] = None
    lot_sqft: Optional[Number] = None
    property_type: Optional[str] = None
    estimated_value: Optional[Number] = None


class VisitorGeo(BaseModel):
    city: str
    region: str
    country: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None

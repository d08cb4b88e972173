"""
Form option codes → labels shown to the agent in HubSpot.

Codes missing from a table are passed through verbatim, so a new option
added to the form still reaches the CRM instead of failing the submission.
"""

from typing import Mapping


SELLING_TIMELINE_LABELS: Mapping[str, str] = {
    "asap": "ASAP - Ready now",
    "1-3months": "1-3 months",
    "3-6months": "3-6 months",
    "6-12months": "6-12 months",
    "curious": "Just curious about my value",
}

PROPERTY_TYPE_LABELS: Mapping[str, str] = {
    "single-family": "Single Family Home",
    "townhouse": "Townhouse",
    "condo": "Condo",
    "multi-family": "Multi-Family",
    "land": "Land",
    "other": "Other",
}

RELATIONSHIP_LABELS: Mapping[str, str] = {
    "homeowner": "Homeowner",
    "co-owner": "Co-owner",
    "family-member": "Family member of owner",
    "agent": "Real estate agent",
    "other": "Other",
}


def label_for(table: Mapping[str, str], code: str) -> str:
    return table.get(code, code)


def selling_timeline_label(code: str) -> str:
    return label_for(SELLING_TIMELINE_LABELS, code)


def property_type_label(code: str) -> str:
    return label_for(PROPERTY_TYPE_LABELS, code)


def relationship_label(code: str) -> str:
    return label_for(RELATIONSHIP_LABELS, code)

"""
Tests for the HubSpot upsert coordinator and property builders.

Calls the coroutines directly against the FakeHubSpot transport from
conftest (no FastAPI app involved).

Run: pytest tests/test_contacts.py -v
"""

import json

import httpx
import pytest

from shared.contacts import (
    UpsertOutcome,
    annotate_address,
    contact_form_properties,
    lead_properties,
    update_properties,
    upsert_contact,
)
from shared.errors import ConfigurationError, UpstreamError
from shared.hubspot import HubSpotClient
from shared.validation import validate_contact, validate_lead

from conftest import HUBSPOT_BASE, FakeHubSpot


LEAD = {
    "address": "112 Pendleton Rd, Clemson, SC 29631",
    "firstName": "Dana",
    "email": "dana@example.com",
    "phone": "8645550142",
    "propertyType": "townhouse",
    "sellingTimeline": "3-6months",
    "website": "",
}


@pytest.fixture
def hubspot():
    return FakeHubSpot()


@pytest.fixture
async def crm(hubspot):
    async with httpx.AsyncClient(transport=httpx.MockTransport(hubspot.handle)) as http_client:
        yield HubSpotClient(http_client=http_client, token="tok", api_base=HUBSPOT_BASE)


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content)


# ---------------------------------------------------------------------------
# Property builders
# ---------------------------------------------------------------------------

class TestLeadProperties:
    def test_labels_and_defaults(self):
        props = lead_properties(validate_lead(LEAD))
        assert props == {
            "email": "dana@example.com",
            "firstname": "Dana",
            "phone": "8645550142",
            "address": "112 Pendleton Rd, Clemson, SC 29631",
            "selling_timeline": "3-6 months",
            "property_type": "Townhouse",
            "relationship_to_property": "Homeowner",
        }

    def test_unknown_codes_reach_crm_verbatim(self):
        props = lead_properties(validate_lead({**LEAD, "propertyType": "houseboat"}))
        assert props["property_type"] == "houseboat"

    def test_coordinates_annotate_address(self):
        props = lead_properties(validate_lead({**LEAD, "lat": 34.6834, "lng": -82.8374}))
        assert props["address"] == "112 Pendleton Rd, Clemson, SC 29631 (34.683400, -82.837400)"

    def test_single_coordinate_ignored(self):
        assert annotate_address("1 Main St", 34.5, None) == "1 Main St"

    def test_visitor_geo_only_when_present(self):
        props = lead_properties(validate_lead({
            **LEAD,
            "visitorCity": "Greenville",
            "visitorRegion": "SC",
            "visitorCountry": "",
            "visitorLatitude": None,
        }))
        assert props["city"] == "Greenville"
        assert props["state"] == "SC"
        assert "country" not in props
        assert "ip_latitude" not in props
        assert "ip_longitude" not in props

    def test_last_name_when_given(self):
        props = lead_properties(validate_lead({**LEAD, "lastName": "Reyes"}))
        assert props["lastname"] == "Reyes"


def test_contact_form_properties():
    props = contact_form_properties(validate_contact({
        "firstName": "Morgan", "email": "morgan@example.com", "message": "Hi",
    }))
    assert props == {
        "firstname": "Morgan",
        "lastname": "",
        "email": "morgan@example.com",
        "phone": "",
        "message": "Hi",
        "lead_source": "Contact Form",
    }


def test_update_properties_drops_email():
    assert update_properties({"email": "a@b.co", "phone": "1"}) == {"phone": "1"}


# ---------------------------------------------------------------------------
# Upsert coordinator
# ---------------------------------------------------------------------------

@pytest.mark.anyio
async def test_new_email_creates_once(crm, hubspot):
    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.CREATED
    assert len(hubspot.calls("POST")) == 1
    assert hubspot.calls("POST", "/search") == []
    assert hubspot.calls("PATCH") == []
    create = hubspot.requests[0]
    assert create.headers["Authorization"] == "Bearer tok"
    assert _body(create)["properties"]["email"] == "dana@example.com"


@pytest.mark.anyio
async def test_conflict_searches_then_updates_without_email(crm, hubspot):
    contact_id = hubspot.seed("dana@example.com", firstname="Old")

    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.UPDATED
    methods = [(r.method, r.url.path) for r in hubspot.requests]
    assert methods == [
        ("POST", "/crm/v3/objects/contacts"),
        ("POST", "/crm/v3/objects/contacts/search"),
        ("PATCH", f"/crm/v3/objects/contacts/{contact_id}"),
    ]
    search = _body(hubspot.requests[1])
    assert search["filterGroups"][0]["filters"][0] == {
        "propertyName": "email", "operator": "EQ", "value": "dana@example.com",
    }
    update = _body(hubspot.requests[2])["properties"]
    assert "email" not in update
    assert update["firstname"] == "Dana"
    assert hubspot.contacts["dana@example.com"]["properties"]["firstname"] == "Dana"


@pytest.mark.anyio
async def test_conflict_with_failed_update_still_succeeds(crm, hubspot):
    hubspot.seed("dana@example.com")
    hubspot.update_status = 400

    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.EXISTING
    assert len(hubspot.calls("PATCH")) == 1


@pytest.mark.anyio
async def test_conflict_with_failed_search_still_succeeds(crm, hubspot):
    hubspot.seed("dana@example.com")
    hubspot.search_status = 503

    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.EXISTING
    assert hubspot.calls("PATCH") == []


@pytest.mark.anyio
async def test_conflict_without_search_match(crm, hubspot):
    hubspot.create_status = 409

    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.EXISTING
    assert len(hubspot.calls("POST", "/search")) == 1
    assert hubspot.calls("PATCH") == []


@pytest.mark.anyio
@pytest.mark.parametrize("search_body", [
    {"results": {"id": "9"}},
    {"results": "9"},
    {"results": [None]},
    ["9"],
])
async def test_conflict_with_malformed_search_body(crm, hubspot, search_body):
    hubspot.seed("dana@example.com")
    hubspot.search_body = search_body

    outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.EXISTING
    assert hubspot.calls("PATCH") == []


@pytest.mark.anyio
@pytest.mark.parametrize("method, suffix", [("POST", "/search"), ("PATCH", "/")])
async def test_conflict_with_transport_failure_still_succeeds(hubspot, method, suffix):
    hubspot.seed("dana@example.com")

    def _flaky(request):
        if request.method == method and request.url.path.startswith(
            "/crm/v3/objects/contacts" + suffix
        ):
            raise httpx.ConnectError("connection reset", request=request)
        return hubspot.handle(request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_flaky)) as http_client:
        crm = HubSpotClient(http_client=http_client, token="tok", api_base=HUBSPOT_BASE)
        outcome = await upsert_contact(crm, lead_properties(validate_lead(LEAD)))

    assert outcome is UpsertOutcome.EXISTING
    assert hubspot.contacts["dana@example.com"]["properties"] == {"email": "dana@example.com"}


@pytest.mark.anyio
async def test_other_status_is_upstream_error(crm, hubspot):
    hubspot.create_status = 400

    with pytest.raises(UpstreamError) as exc_info:
        await upsert_contact(
            crm,
            lead_properties(validate_lead(LEAD)),
            failure_message="Failed to submit lead",
            expose_details=True,
        )

    err = exc_info.value
    assert err.status_code == 500
    assert err.upstream_status == 400
    assert err.to_response() == {
        "error": "Failed to submit lead",
        "details": {"message": "forced"},
    }
    assert len(hubspot.requests) == 1


@pytest.mark.anyio
async def test_upstream_details_hidden_by_default(crm, hubspot):
    hubspot.create_status = 500

    with pytest.raises(UpstreamError) as exc_info:
        await upsert_contact(crm, {"email": "x@y.co"}, failure_message="Failed to submit contact form")

    assert exc_info.value.to_response() == {"error": "Failed to submit contact form"}


@pytest.mark.anyio
async def test_transport_failure_on_create():
    def _down(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(_down)) as http_client:
        crm = HubSpotClient(http_client=http_client, token="tok", api_base=HUBSPOT_BASE)
        with pytest.raises(UpstreamError):
            await upsert_contact(crm, {"email": "x@y.co"})


@pytest.mark.anyio
async def test_missing_token_is_configuration_error(hubspot):
    async with httpx.AsyncClient(transport=httpx.MockTransport(hubspot.handle)) as http_client:
        crm = HubSpotClient(http_client=http_client, token="")
        with pytest.raises(ConfigurationError):
            await upsert_contact(crm, {"email": "x@y.co"})
    assert hubspot.requests == []

"""
Shared test fixtures.

Outbound HTTP never leaves the process: every test app gets an
httpx.MockTransport that routes HubSpot and API Ninjas calls to in-memory
fakes and records each request.
"""

import json
import os
import sys

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from servers.app import create_app  # noqa: E402
from shared.config import Settings  # noqa: E402

HUBSPOT_BASE = "https://hubspot.test"
NINJAS_BASE = "https://ninjas.test/v1"
CONTACTS_PATH = "/crm/v3/objects/contacts"

SAMPLE_MORTGAGE_RESULT = {
    "monthly_payment": {
        "mortgage": 2212.24,
        "property_tax": 291.67,
        "hoa": 0,
        "home_insurance": 125.0,
        "total": 2628.91,
    },
    "annual_payment": {
        "mortgage": 26546.88,
        "property_tax": 3500.0,
        "hoa": 0,
        "home_insurance": 1500.0,
        "total": 31546.88,
    },
    "total_interest_paid": 446406.4,
}


class FakeHubSpot:
    """Minimal stateful stand-in for the HubSpot contacts API, keyed by email."""

    def __init__(self):
        self.contacts: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.create_status: int | None = None
        self.search_status: int = 200
        self.update_status: int = 200
        self.search_body: dict | list | None = None
        self._next_id = 501

    def seed(self, email: str, **properties) -> str:
        contact_id = str(self._next_id)
        self._next_id += 1
        self.contacts[email] = {"id": contact_id, "properties": {**properties, "email": email}}
        return contact_id

    def calls(self, method: str, suffix: str = "") -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.startswith(CONTACTS_PATH + suffix)
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content) if request.content else {}
        path = request.url.path

        if request.method == "POST" and path == CONTACTS_PATH:
            if self.create_status is not None:
                return httpx.Response(self.create_status, json={"message": "forced"})
            email = body["properties"]["email"]
            if email in self.contacts:
                existing = self.contacts[email]["id"]
                return httpx.Response(409, json={
                    "status": "error",
                    "message": f"Contact already exists. Existing ID: {existing}",
                    "category": "CONFLICT",
                })
            props = {k: v for k, v in body["properties"].items() if k != "email"}
            contact_id = self.seed(email, **props)
            return httpx.Response(201, json={"id": contact_id, "properties": body["properties"]})

        if request.method == "POST" and path == CONTACTS_PATH + "/search":
            if self.search_status != 200:
                return httpx.Response(self.search_status, json={"message": "search down"})
            if self.search_body is not None:
                return httpx.Response(200, json=self.search_body)
            email = body["filterGroups"][0]["filters"][0]["value"]
            match = self.contacts.get(email)
            return httpx.Response(200, json={
                "total": 1 if match else 0,
                "results": [match] if match else [],
            })

        if request.method == "PATCH" and path.startswith(CONTACTS_PATH + "/"):
            if self.update_status != 200:
                return httpx.Response(self.update_status, json={"message": "update rejected"})
            contact_id = path.rsplit("/", 1)[1]
            for contact in self.contacts.values():
                if contact["id"] == contact_id:
                    contact["properties"].update(body["properties"])
                    return httpx.Response(200, json=contact)
            return httpx.Response(404, json={"message": "not found"})

        return httpx.Response(404, json={"message": f"unexpected {request.method} {path}"})


class FakeNinjas:
    """API Ninjas stand-in; tests swap the canned answers per endpoint."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {
            "mortgagecalculator": httpx.Response(200, json=SAMPLE_MORTGAGE_RESULT),
            "propertydetails": httpx.Response(200, json={}),
            "mortgagerate": httpx.Response(200, json=[
                {"week": "2026-10-15", "frm_30": 6.27, "frm_15": 5.49},
            ]),
        }

    def calls(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/" + endpoint)]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[1]
        canned = self.responses.get(endpoint)
        if canned is None:
            return httpx.Response(404, json={"error": "unknown endpoint"})
        return httpx.Response(canned.status_code, content=canned.content,
                              headers=canned.headers)


class FakeUpstream:
    def __init__(self):
        self.hubspot = FakeHubSpot()
        self.ninjas = FakeNinjas()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "hubspot.test":
            return self.hubspot.handle(request)
        if request.url.host == "ninjas.test":
            return self.ninjas.handle(request)
        raise AssertionError(f"unexpected outbound call: {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_settings(**overrides) -> Settings:
    values = dict(
        hubspot_token="test-hubspot-token",
        api_ninjas_key="test-ninjas-key",
        hubspot_api_base=HUBSPOT_BASE,
        api_ninjas_base=NINJAS_BASE,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="module")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(upstream, settings):
    app = create_app(settings=settings, transport=upstream.transport)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_client(upstream):
    """Build a client with custom settings (e.g. missing secrets)."""
    clients = []

    def _make(**overrides):
        app = create_app(settings=make_settings(**overrides), transport=upstream.transport)
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)

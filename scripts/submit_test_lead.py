#!/usr/bin/env python3
"""
Smoke Test — Home Value Form → Site API → HubSpot

Generates a random lead (as if typed into the estimate form) and walks it
through a running site API: geo, property preview, lead submission, then
the same email again to exercise the conflict → update path. Finishes with
a mortgage estimate and the current rate.

Usage:
    # Server started with: python -m servers.site_api --port 8000
    python scripts/submit_test_lead.py

    python scripts/submit_test_lead.py --base-url https://staging.example.com
    python scripts/submit_test_lead.py --lead-only
    python scripts/submit_test_lead.py --honeypot   # should succeed with no CRM write

Leads are created in whatever HubSpot portal the server's HUBSPOT_TOKEN
points at; use a sandbox portal.
"""

import argparse
import random
import sys
import time

import httpx

# ---------------------------------------------------------------------------
# Random lead generator (simulates the /estimate form)
# ---------------------------------------------------------------------------

FIRST_NAMES = ["Avery", "Jordan", "Casey", "Riley", "Quinn", "Parker", "Rowan", "Skyler"]
STREETS = ["Pendleton Rd", "College Ave", "Old Greenville Hwy", "Issaqueena Trl",
           "Berkeley Dr", "Tiger Blvd", "Lakeview Cir", "Cherry Rd"]
PROPERTY_TYPES = ["single-family", "townhouse", "condo", "multi-family", "land", "other"]
TIMELINES = ["asap", "1-3months", "3-6months", "6-12months", "curious"]
RELATIONSHIPS = ["homeowner", "co-owner", "family-member", "agent", "other"]


def generate_random_lead(honeypot: bool = False) -> dict:
    first = random.choice(FIRST_NAMES)
    stamp = int(time.time())
    return {
        "address": f"{random.randint(100, 999)} {random.choice(STREETS)}, Clemson, SC 29631",
        "firstName": first,
        "email": f"smoke+{first.lower()}.{stamp}@example.com",
        "phone": f"864555{random.randint(1000, 9999)}",
        "propertyType": random.choice(PROPERTY_TYPES),
        "sellingTimeline": random.choice(TIMELINES),
        "relationship": random.choice(RELATIONSHIPS),
        "lat": round(34.68 + random.uniform(-0.05, 0.05), 6),
        "lng": round(-82.83 + random.uniform(-0.05, 0.05), 6),
        "website": "http://bot.example" if honeypot else "",
    }


def _show(step: str, resp: httpx.Response) -> dict:
    print(f"\n--- {step} ---")
    print(f"  HTTP {resp.status_code}  x-request-id={resp.headers.get('x-request-id')}")
    try:
        body = resp.json()
    except ValueError:
        body = {"raw": resp.text[:300]}
    print(f"  {body}")
    return body


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    parser = argparse.ArgumentParser(description="Site API smoke test")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000",
                        help="Site API base URL (default: http://127.0.0.1:8000)")
    parser.add_argument("--lead-only", action="store_true",
                        help="Only submit the lead, skip lookups and calculators")
    parser.add_argument("--honeypot", action="store_true",
                        help="Fill the hidden field; the server must still answer success")
    args = parser.parse_args()

    lead = generate_random_lead(honeypot=args.honeypot)

    print("=" * 60)
    print("  SELLER LEAD GATEWAY — Smoke Test")
    print(f"  Target: {args.base_url}")
    print("=" * 60)
    print(f"  Name:     {lead['firstName']}")
    print(f"  Email:    {lead['email']}")
    print(f"  Address:  {lead['address']}")
    print(f"  Type:     {lead['propertyType']} / {lead['sellingTimeline']}")

    failures = 0
    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        if not args.lead_only:
            geo = _show("Step 1: Visitor geo", client.get("/geo"))
            lead.update({
                "visitorCity": geo.get("city"),
                "visitorRegion": geo.get("region"),
                "visitorCountry": geo.get("country"),
            })
            _show("Step 2: Property preview",
                  client.post("/property", json={"address": lead["address"]}))

        first = _show("Step 3: Submit lead (create)", client.post("/lead", json=lead))
        failures += first.get("success") is not True

        again = _show("Step 4: Resubmit same email (conflict → update)",
                      client.post("/lead", json={**lead, "sellingTimeline": "asap"}))
        failures += again.get("success") is not True

        if not args.lead_only:
            estimate = _show("Step 5: Mortgage estimate", client.post("/mortgage", json={
                "home_value": 350000,
                "downpayment": 70000,
                "interest_rate": 6.5,
                "duration_years": 30,
                "annual_property_tax": 3500,
                "annual_home_insurance": 1500,
            }))
            failures += "data" not in estimate
            _show("Step 6: Mortgage rate", client.get("/mortgage-rate"))

    print("\n" + "=" * 60)
    print("  SMOKE TEST " + ("PASSED" if not failures else f"FAILED ({failures} step(s))"))
    print("=" * 60)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python
"""Walk through the dashboard analytics and report endpoints.

Usage:
    python examples/dashboard_demo.py

This script demonstrates:
1. Checking readiness (sample mode vs connected Airtable base)
2. Fetching dashboard analytics for several ranges
3. Generating each report type
4. Requesting a custom date range
5. Listing clients and opening one client's invoice history

Prerequisites:
    - API running (invoicesense, or uvicorn invoicesense.main:app --reload --port 3001)
    - Optional: AIRTABLE_API_KEY / AIRTABLE_BASE_ID set, otherwise the
      sample dataset is served
"""

import json
import sys
from datetime import UTC, datetime, timedelta

import httpx

API_BASE = "http://localhost:3001"


def print_section(title: str) -> None:
    """Print a section header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def print_response(response: httpx.Response, label: str = "", full: bool = False) -> dict:
    """Print HTTP response status and, optionally, the body."""
    content_type = response.headers.get("content-type", "")
    data = response.json() if "json" in content_type else {}
    status_mark = "✓" if response.status_code < 400 else "✗"
    print(f"{status_mark} {label} [{response.status_code}]")
    if data and (full or response.status_code >= 400):
        print(json.dumps(data, indent=2, default=str))
    return data


def main() -> int:
    """Run the dashboard demo."""
    print_section("InvoiceSense - Dashboard Demo")

    client = httpx.Client(base_url=API_BASE, timeout=30)

    try:
        ready = client.get("/health/ready")
    except httpx.ConnectError:
        print(f"Cannot connect to API at {API_BASE}")
        print("Start the API with: uvicorn invoicesense.main:app --reload --port 3001")
        return 1

    readiness = print_response(ready, "GET /health/ready")
    print(f"→ Datastore: {readiness.get('datastore')}")

    # ==========================================================================
    # Step 1: Dashboard analytics per range
    # ==========================================================================
    print_section("Step 1: Dashboard Analytics")

    for time_range in ("7d", "30d", "90d", "ytd"):
        response = client.get("/analytics", params={"range": time_range})
        body = print_response(response, f"GET /analytics?range={time_range}")
        if response.status_code != 200:
            return 1
        kpis = body["data"]["kpis"]
        print(
            f"  revenue={kpis['totalRevenue']:>14,.2f}  "
            f"invoices={kpis['totalInvoices']:>4}  "
            f"clients={kpis['totalClients']:>3}  "
            f"growth={kpis['revenueGrowth']:+.2f}%"
        )

    print("\nCurrency distribution (all invoices):")
    for bucket in body["data"]["currencyDistribution"]:
        print(f"  {bucket['currency']:<5} {bucket['amount']:>14,.2f}  {bucket['percentage']}%")

    # ==========================================================================
    # Step 2: Reports
    # ==========================================================================
    print_section("Step 2: Reports")

    for report_type in ("revenue", "client", "invoice", "analytics"):
        response = client.get("/reports", params={"type": report_type, "range": "30d"})
        body = print_response(response, f"GET /reports?type={report_type}")
        if response.status_code == 200:
            print(f"  summary: {json.dumps(body['data']['summary'], default=str)}")

    # ==========================================================================
    # Step 3: Custom range
    # ==========================================================================
    print_section("Step 3: Custom Range")

    today = datetime.now(UTC).date()
    params = {
        "type": "invoice",
        "startDate": str(today - timedelta(days=14)),
        "endDate": str(today),
    }
    response = client.get("/reports", params=params)
    print_response(response, "GET /reports (custom range)", full=True)

    # ==========================================================================
    # Step 4: Clients
    # ==========================================================================
    print_section("Step 4: Clients")

    response = client.get("/clients")
    body = print_response(response, "GET /clients")
    if response.status_code == 200 and body["data"]:
        for profile in body["data"]:
            print(
                f"  {profile['name']}: {profile['totalRevenue']} over "
                f"{profile['invoiceCount']} invoices, last {profile['lastInvoice']}"
            )
        first_id = body["data"][0]["id"]
        response = client.get(f"/clients/{first_id}")
        detail = print_response(response, f"GET /clients/{first_id}")
        if response.status_code == 200:
            print(f"  invoices: {len(detail['data']['invoices'])}")

    response = client.get("/clients/unknown-client")
    print_response(response, "GET /clients/unknown-client")

    # ==========================================================================
    # Step 5: Error envelope
    # ==========================================================================
    print_section("Step 5: Error Envelope")

    response = client.get("/reports", params={"type": "profit"})
    print_response(response, "GET /reports?type=profit")

    print_section("Demo Complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Submit a sample onboarding form and follow the build until it finishes.

Usage:
    API_URL=http://localhost:10000 \
    API_TOKEN="..." \
    DEMO_COMPANY="Acme Dental" \
    DEMO_WEBSITE="https://acmedental.example" \
    python backend/scripts/submit_onboarding.py
"""
from __future__ import annotations

import os
import sys
import time

import httpx

DEFAULT_DESCRIPTION = (
    "Family dental clinic offering cleanings, implants and cosmetic dentistry "
    "to busy professionals across the metro area."
)


def main() -> None:
    api_url = os.environ.get("API_URL", "http://localhost:10000")
    api_token = os.environ.get("API_TOKEN", "")
    headers = {"X-API-TOKEN": api_token} if api_token else {}

    payload = {
        "fullName": os.environ.get("DEMO_NAME", "Jordan Example"),
        "email": os.environ.get("DEMO_EMAIL", "jordan@example.com"),
        "companyName": os.environ.get("DEMO_COMPANY", "Acme Dental"),
        "websiteUrl": os.environ.get("DEMO_WEBSITE", "https://acmedental.example"),
        "businessDescription": os.environ.get("DEMO_DESCRIPTION", DEFAULT_DESCRIPTION),
        "gdprConsent": True,
    }

    print(f"Submitting onboarding form for '{payload['companyName']}'...")
    print(f"API URL: {api_url}")

    try:
        with httpx.Client(timeout=30.0, headers=headers) as client:
            response = client.post(f"{api_url}/onboarding", json=payload)
            response.raise_for_status()
            agent_id = response.json()["agent_id"]
            print(f"✓ Build started for agent {agent_id}")

            last_percent = -1
            while True:
                status = client.get(f"{api_url}/builds/{agent_id}")
                status.raise_for_status()
                snapshot = status.json()
                percent = int(snapshot.get("progress", 0) * 100)
                if percent // 10 != last_percent // 10:
                    print(f"  {percent:3d}%  {snapshot.get('fact', '')}")
                    last_percent = percent
                if snapshot.get("state") in ("done", "cancelled"):
                    break
                time.sleep(1)

            if snapshot.get("timed_out"):
                print(f"! Build timed out before agent {agent_id} appeared; it may still show up shortly")
            else:
                print(f"✓ Agent {agent_id} is ready")
    except httpx.HTTPStatusError as e:
        print(f"ERROR: HTTP {e.response.status_code} - {e.response.text}", file=sys.stderr)
        sys.exit(1)
    except httpx.RequestError as e:
        print(f"ERROR: Failed to connect to {api_url} - {e}", file=sys.stderr)
        print("Make sure the API server is running.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx

from backend.core.exceptions import StoreError
from backend.onboarding.progress import BuildTimings
from backend.onboarding.submission import SubmissionClient

AGENT_ID = "3f1c2b9a-7d4e-4c1a-9b2f-6e8d0a1b2c3d"

SAMPLE_ROW = {
    "agent_id": AGENT_ID,
    "created_at": "2024-05-01T12:00:00+00:00",
    "user_name": "Jordan",
    "company_name": "Bright Smiles Dental",
    "email": "jordan@brightsmiles.example",
    "business_description": "Family dental clinic focused on cosmetic dentistry and implants.",
    "icp_geo": "California",
    "icp_industries": "Healthcare, Dental",
    "icp_employees": 50,
    "icp_locations": 3,
    "icp_revenue": 2_250_000,
    "icp_traits": "Value convenience",
    "icp_title": "Practice Manager",
    "icp_department": "Operations",
    "icp_motivations": "Fewer No-Shows",
    "key_differentiators": "Same-day crowns; Evening hours, Sedation options; Free parking",
    "comm_style": "Warm and reassuring",
    "rationale_icp": "Practices of this size outsource patient acquisition.",
}

VALID_FORM = {
    "fullName": "Jordan Example",
    "email": "jordan@brightsmiles.example",
    "companyName": "Bright Smiles Dental",
    "websiteUrl": "https://brightsmiles.example",
    "businessDescription": "Family dental clinic offering cleanings, implants and cosmetic dentistry.",
}


class FakeAgentStore:
    """In-memory agents table with switchable failures."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows: Dict[str, Dict[str, Any]] = {r["agent_id"]: dict(r) for r in rows or []}
        self.exists_calls = 0
        self.updates: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_exists = 0
        self.fail_fetch = False
        self.fail_update = False

    def agent_exists(self, agent_id: str) -> bool:
        self.exists_calls += 1
        if self.fail_exists:
            self.fail_exists -= 1
            raise StoreError("connection reset", operation="exists", agent_id=agent_id)
        return agent_id in self.rows

    def fetch_agent(self, agent_id: str) -> Optional[Dict[str, Any]]:
        if self.fail_fetch:
            raise StoreError("connection reset", operation="fetch", agent_id=agent_id)
        row = self.rows.get(agent_id)
        return dict(row) if row else None

    def update_agent(self, agent_id: str, fields: Dict[str, Any]) -> None:
        if self.fail_update:
            raise StoreError("permission denied", operation="update", agent_id=agent_id)
        self.updates.append((agent_id, dict(fields)))
        self.rows.setdefault(agent_id, {"agent_id": agent_id}).update(fields)


def automation_webhook(store: FakeAgentStore, requests: Optional[list] = None) -> SubmissionClient:
    """Submission client whose webhook creates the agent row right away."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if requests is not None:
            requests.append(body)
        agent_id = body["agentId"]
        store.rows[agent_id] = {**SAMPLE_ROW, "agent_id": agent_id}
        return httpx.Response(200, json={"agent_id": agent_id})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SubmissionClient("http://automation.test/webhook", client=client)


def fast_timings(**overrides) -> BuildTimings:
    values = dict(
        total_seconds=0.3,
        tick_seconds=0.01,
        early_floor=0.2,
        completion_grace=0.01,
        fact_rotation_seconds=0.05,
        poll_initial_delay=0.02,
        poll_interval=0.02,
    )
    values.update(overrides)
    return BuildTimings(**values)


def failing_webhook(mode: str) -> SubmissionClient:
    """Submission client whose webhook is unreachable ("connect") or broken ("500")."""

    def handler(request: httpx.Request) -> httpx.Response:
        if mode == "connect":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(500, text="workflow crashed")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SubmissionClient("http://automation.test/webhook", client=client)

from __future__ import annotations

import asyncio
import json

import httpx

from backend.onboarding.models import OnboardingForm
from backend.onboarding.submission import SubmissionClient, build_payload

from fakes import AGENT_ID, VALID_FORM

FORM = OnboardingForm.model_validate(VALID_FORM)


def submit_with(handler):
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            submitter = SubmissionClient("http://automation.test/webhook/", client=client)
            return await submitter.submit(AGENT_ID, FORM)

    return asyncio.run(scenario())


def test_payload_shape():
    payload = build_payload(AGENT_ID, FORM)
    assert payload["action"] == "create_agent"
    assert payload["agentId"] == AGENT_ID
    assert payload["formData"]["fullName"] == "Jordan Example"
    assert payload["formData"]["websiteUrl"] == "https://brightsmiles.example"
    assert payload["timestamp"].endswith("+00:00")


def test_delivers_to_onboarding_endpoint():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"agent_id": AGENT_ID})

    outcome = submit_with(handler)

    assert outcome.delivered
    assert outcome.status_code == 200
    assert outcome.ids_match is True
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://automation.test/webhook/onboarding-chat"
    assert json.loads(seen[0].content)["agentId"] == AGENT_ID


def test_mismatched_remote_id_is_reported_not_raised():
    outcome = submit_with(lambda request: httpx.Response(200, json={"agent_id": "someone-else"}))
    assert outcome.delivered
    assert outcome.ids_match is False
    assert outcome.remote_agent_id == "someone-else"


def test_non_json_success_still_counts_as_delivered():
    outcome = submit_with(lambda request: httpx.Response(200, text="Workflow was started"))
    assert outcome.delivered
    assert outcome.ids_match is None


def test_server_error_is_swallowed():
    outcome = submit_with(lambda request: httpx.Response(500, text="boom"))
    assert not outcome.delivered
    assert outcome.status_code == 500
    assert outcome.error == "HTTP 500"


def test_network_error_is_swallowed():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    outcome = submit_with(handler)
    assert not outcome.delivered
    assert outcome.status_code is None
    assert "connection refused" in outcome.error

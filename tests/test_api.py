from __future__ import annotations

import json
import time

from fastapi.testclient import TestClient

from backend.api.deps import get_editor, get_service
from backend.api.main import app
from backend.core import valkey
from backend.core.config import get_settings
from backend.core.valkey import FakeValkey
from backend.onboarding.editor import ProfileEditor
from backend.onboarding.service import OnboardingService

from fakes import AGENT_ID, SAMPLE_ROW, VALID_FORM, FakeAgentStore, automation_webhook, fast_timings


def setup_function():
    global store, service
    get_settings.cache_clear()
    valkey.use_client(FakeValkey())
    store = FakeAgentStore([SAMPLE_ROW])
    service = OnboardingService(store, automation_webhook(store), timings=fast_timings())
    app.dependency_overrides[get_service] = lambda: service
    app.dependency_overrides[get_editor] = lambda: ProfileEditor(store)


def teardown_function():
    app.dependency_overrides.clear()
    get_settings.cache_clear()


def wait_for_state(client, agent_id, state, attempts=100):
    for _ in range(attempts):
        body = client.get(f"/builds/{agent_id}").json()
        if body.get("state") == state:
            return body
        time.sleep(0.02)
    raise AssertionError(f"build {agent_id} never reached {state}")


def test_health():
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_onboarding_build_reaches_done_and_agent_loads():
    with TestClient(app) as client:
        resp = client.post("/onboarding", json=VALID_FORM)
        assert resp.status_code == 202
        agent_id = resp.json()["agent_id"]
        assert resp.json()["status"] == "running"

        final = wait_for_state(client, agent_id, "done")
        assert final["agent_found"] is True
        assert final["timed_out"] is False

        agent = client.get(f"/agents/{agent_id}")
        assert agent.status_code == 200
        assert agent.json()["narrative"].startswith("I'll prioritize Healthcare and Dental companies")


def test_invalid_form_is_rejected_without_submitting():
    with TestClient(app) as client:
        resp = client.post("/onboarding", json={**VALID_FORM, "businessDescription": "Too short"})
    assert resp.status_code == 422
    assert service.submissions == {}
    assert service.outcomes == {}


def test_consent_required_when_configured(monkeypatch):
    monkeypatch.setenv("REQUIRE_GDPR_CONSENT", "true")
    get_settings.cache_clear()
    with TestClient(app) as client:
        refused = client.post("/onboarding", json=VALID_FORM)
        accepted = client.post("/onboarding", json={**VALID_FORM, "gdprConsent": True})
        client.delete(f"/builds/{accepted.json()['agent_id']}")
    assert refused.status_code == 422
    assert accepted.status_code == 202


def test_consent_required_for_eu_visitors():
    german = {"Accept-Language": "de-DE,de;q=0.9"}
    with TestClient(app) as client:
        refused = client.post("/onboarding", json=VALID_FORM, headers=german)
        accepted = client.post("/onboarding", json={**VALID_FORM, "gdprConsent": True}, headers=german)
        elsewhere = client.post("/onboarding", json=VALID_FORM, headers={"Accept-Language": "en-US"})
        for resp in (accepted, elsewhere):
            client.delete(f"/builds/{resp.json()['agent_id']}")
    assert refused.status_code == 422
    assert accepted.status_code == 202
    assert elsewhere.status_code == 202


def test_enrich_endpoint():
    with TestClient(app) as client:
        ok = client.post("/enrich", json={"websiteUrl": "https://www.brightsmiles.example"})
        bad = client.post("/enrich", json={"websiteUrl": "brightsmiles.example"})
    assert ok.status_code == 200
    assert ok.json()["suggested_instagram"] == "@brightsmiles"
    assert bad.status_code == 422


def test_api_token_is_enforced(monkeypatch):
    monkeypatch.setenv("API_TOKEN", "secret")
    get_settings.cache_clear()
    with TestClient(app) as client:
        assert client.get("/options").status_code == 401
        assert client.get("/options", headers={"X-API-TOKEN": "secret"}).status_code == 200


def test_cancel_build():
    service.timings = fast_timings(total_seconds=5)
    with TestClient(app) as client:
        agent_id = client.post("/onboarding", json=VALID_FORM).json()["agent_id"]
        resp = client.delete(f"/builds/{agent_id}")
        assert resp.status_code == 200
        assert resp.json() == {"agent_id": agent_id, "cancelled": True}

        status = client.get(f"/builds/{agent_id}").json()
        assert status["state"] == "cancelled"
        assert status["progress"] == 0.0
        assert client.delete(f"/builds/{agent_id}").status_code == 404


def test_unknown_build_is_404():
    with TestClient(app) as client:
        assert client.get("/builds/nope").status_code == 404


def test_stream_reports_finished_and_unknown_builds():
    with TestClient(app) as client:
        agent_id = client.post("/onboarding", json=VALID_FORM).json()["agent_id"]
        wait_for_state(client, agent_id, "done")

        finished = client.get(f"/builds/{agent_id}/stream")
        events = [json.loads(line[len("data: "):]) for line in finished.text.splitlines() if line.startswith("data: ")]
        assert events[-1]["state"] == "done"

        unknown = client.get("/builds/nope/stream")
        assert '"state": "not_found"' in unknown.text


def test_get_agent_statuses():
    with TestClient(app) as client:
        found = client.get(f"/agents/{AGENT_ID}")
        assert found.status_code == 200
        body = found.json()
        assert body["record"]["company_name"] == "Bright Smiles Dental"
        assert body["draft"]["icp_industries"] == ["Healthcare", "Dental"]
        assert body["company_size"] == "~50 employees • 3 locations • $2.3M revenue"
        assert body["differentiators"] == ["Same-day crowns", "Evening hours", "Sedation options"]
        assert body["has_rationale"] is True

        missing = client.get("/agents/b2a6a2a4-1f1b-4c3c-8d1e-000000000000")
        assert missing.status_code == 404
        assert missing.json()["detail"]["reason"] == "not_found"
        assert missing.json()["detail"]["recoverable"] is True

        store.fail_fetch = True
        failed = client.get(f"/agents/{AGENT_ID}")
        assert failed.status_code == 502
        assert failed.json()["detail"]["reason"] == "store_error"
        assert failed.json()["detail"]["recoverable"] is False


def test_patch_agent_saves_joined_values():
    with TestClient(app) as client:
        draft = client.get(f"/agents/{AGENT_ID}").json()["draft"]
        draft["icp_industries"] = ["Retail", "Healthcare"]
        draft["icp_geo"] = []

        resp = client.patch(f"/agents/{AGENT_ID}", json=draft)

    assert resp.status_code == 200
    assert resp.json()["record"]["icp_industries"] == "Retail, Healthcare"
    assert resp.json()["record"]["icp_geo"] is None
    written = store.updates[-1][1]
    assert written["icp_industries"] == "Retail, Healthcare"
    assert "agent_id" not in written


def test_patch_agent_failure_keeps_stored_row():
    store.fail_update = True
    with TestClient(app) as client:
        draft = client.get(f"/agents/{AGENT_ID}").json()["draft"]
        draft["icp_motivations"] = "Growth"
        resp = client.patch(f"/agents/{AGENT_ID}", json=draft)

    assert resp.status_code == 502
    assert resp.json()["detail"]["reason"] == "save_failed"
    assert store.rows[AGENT_ID]["icp_motivations"] == "Fewer No-Shows"


def test_narrative_preview_and_options():
    with TestClient(app) as client:
        narrative = client.post("/narrative", json={"agent_id": AGENT_ID, "icp_industries": ["SaaS"]})
        preview = client.post(
            "/preview",
            json={"companyName": "Bright Smiles", "businessDescription": "A dental clinic; book an appointment"},
        )
        options = client.get("/options").json()

    assert narrative.json() == {"narrative": "I'll prioritize SaaS companies."}
    body = preview.json()
    assert "Bright Smiles" in body["greeting"]
    assert body["tone"] == "Caring and professional"
    assert "Appointment Booking" in body["expertise"]
    assert {"industries", "geography", "job_titles", "departments", "communication_styles", "company_sizes"} <= set(options)

from __future__ import annotations

from backend.onboarding.draft import split_delimited, to_editable_draft, to_update_payload
from backend.onboarding.editor import LoadStatus, ProfileEditor
from backend.onboarding.models import AgentRecord

from fakes import AGENT_ID, SAMPLE_ROW, FakeAgentStore


def setup_function():
    global store, editor
    store = FakeAgentStore([SAMPLE_ROW])
    editor = ProfileEditor(store)


def test_split_trims_and_drops_empties():
    assert split_delimited(" A , ,B,, C ") == ["A", "B", "C"]
    assert split_delimited("A; B, C", ";,") == ["A", "B", "C"]
    assert split_delimited(None) == []


def test_delimited_fields_survive_a_round_trip():
    record = AgentRecord(agent_id=AGENT_ID, icp_industries="A, B, C", icp_geo="Texas,Ohio")
    payload = to_update_payload(to_editable_draft(record))
    assert payload["icp_industries"] == "A, B, C"
    assert payload["icp_geo"] == "Texas, Ohio"


def test_title_and_department_are_wrapped_whole():
    record = AgentRecord(agent_id=AGENT_ID, icp_title="VP, Sales", icp_department=" ")
    draft = to_editable_draft(record)
    assert draft.icp_title == ["VP, Sales"]
    assert draft.icp_department == []
    assert to_update_payload(draft)["icp_title"] == "VP, Sales"


def test_payload_holds_only_persisted_columns():
    draft = to_editable_draft(AgentRecord.model_validate(SAMPLE_ROW)).model_copy(update={"icp_geo": []})
    payload = to_update_payload(draft)
    assert "agent_id" not in payload
    assert payload["icp_geo"] is None
    assert payload["key_differentiators"] == SAMPLE_ROW["key_differentiators"]
    assert payload["icp_employees"] == 50


def test_load_statuses_are_distinguishable():
    found = editor.load(AGENT_ID)
    assert found.status is LoadStatus.FOUND and found.ok
    assert found.record.company_name == "Bright Smiles Dental"

    missing = editor.load("b2a6a2a4-1f1b-4c3c-8d1e-000000000000")
    assert missing.status is LoadStatus.NOT_FOUND
    assert missing.recoverable

    store.fail_fetch = True
    failed = editor.load(AGENT_ID)
    assert failed.status is LoadStatus.ERROR
    assert not failed.recoverable
    assert "connection reset" in failed.error


def test_malformed_row_is_a_load_error():
    store.rows[AGENT_ID]["icp_employees"] = "lots"
    result = editor.load(AGENT_ID)
    assert result.status is LoadStatus.ERROR
    assert result.error == "stored agent record is malformed"


def test_save_writes_joined_values_and_returns_merged_record():
    current = editor.load(AGENT_ID).record
    draft = to_editable_draft(current).model_copy(update={"icp_industries": ["Retail", "Healthcare"]})

    result = editor.save(AGENT_ID, draft, current=current)

    assert result.ok
    assert store.updates[-1][1]["icp_industries"] == "Retail, Healthcare"
    assert result.record.icp_industries == "Retail, Healthcare"
    assert result.record.created_at == SAMPLE_ROW["created_at"]


def test_failed_save_keeps_current_record():
    current = editor.load(AGENT_ID).record
    draft = to_editable_draft(current).model_copy(update={"icp_motivations": "Growth"})
    store.fail_update = True

    result = editor.save(AGENT_ID, draft, current=current)

    assert not result.ok
    assert "permission denied" in result.error
    assert result.record is current
    assert result.written["icp_motivations"] == "Growth"
    assert store.rows[AGENT_ID]["icp_motivations"] == "Fewer No-Shows"

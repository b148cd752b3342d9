from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from backend.core.config import Settings
from backend.core.exceptions import StoreError
from backend.core.store import AgentStore

from fakes import AGENT_ID, SAMPLE_ROW


def test_agent_exists_selects_one_row():
    client = MagicMock()
    chain = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value.data = [{"agent_id": AGENT_ID}]

    assert AgentStore(client).agent_exists(AGENT_ID)
    client.table.assert_called_with("agents")
    client.table.return_value.select.assert_called_with("agent_id")

    chain.execute.return_value.data = []
    assert not AgentStore(client).agent_exists(AGENT_ID)


def test_fetch_agent_takes_newest_row():
    client = MagicMock()
    select = client.table.return_value.select.return_value
    select.eq.return_value.order.return_value.limit.return_value.execute.return_value.data = [SAMPLE_ROW]

    assert AgentStore(client).fetch_agent(AGENT_ID) == SAMPLE_ROW
    select.eq.return_value.order.assert_called_with("created_at", desc=True)


def test_update_agent_filters_on_id():
    client = MagicMock()
    AgentStore(client, table="agents_v2").update_agent(AGENT_ID, {"icp_geo": "Texas"})

    client.table.assert_called_with("agents_v2")
    client.table.return_value.update.assert_called_once_with({"icp_geo": "Texas"})
    client.table.return_value.update.return_value.eq.assert_called_once_with("agent_id", AGENT_ID)


def test_failures_become_store_errors():
    client = MagicMock()
    client.table.side_effect = RuntimeError("network down")
    store = AgentStore(client)

    with pytest.raises(StoreError) as exc:
        store.fetch_agent(AGENT_ID)
    assert exc.value.operation == "fetch"
    assert exc.value.details == {"operation": "fetch", "agent_id": AGENT_ID}

    with pytest.raises(StoreError):
        store.update_agent(AGENT_ID, {})


def test_from_settings_requires_credentials():
    with pytest.raises(EnvironmentError):
        AgentStore.from_settings(Settings(supabase_key=""))

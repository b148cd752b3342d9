from __future__ import annotations

import json

from backend.core import valkey
from backend.core.valkey import FakeValkey, build_channel, get_build_status, set_build_status


def setup_function():
    valkey.use_client(FakeValkey())


def test_status_is_mirrored_with_types_intact():
    set_build_status("a1", {"agent_id": "a1", "state": "running", "progress": 0.25, "timed_out": None})
    assert get_build_status("a1") == {"agent_id": "a1", "state": "running", "progress": 0.25, "timed_out": None}
    assert get_build_status("unknown") is None


def test_subscribers_only_see_later_events():
    set_build_status("a1", {"state": "running", "progress": 0.1})

    early = valkey.get_client().pubsub()
    early.subscribe(build_channel("a1"))
    set_build_status("a1", {"state": "running", "progress": 0.2})
    late = valkey.get_client().pubsub()
    late.subscribe(build_channel("a1"))
    set_build_status("a1", {"state": "done", "progress": 1.0})

    early_events = []
    message = early.get_message()
    while message is not None:
        early_events.append(json.loads(message["data"])["progress"])
        message = early.get_message()
    assert early_events == [0.2, 1.0]
    assert json.loads(late.get_message()["data"])["state"] == "done"
    assert late.get_message() is None

    late.close()
    set_build_status("a1", {"state": "done", "progress": 1.0})
    assert late.get_message() is None
    assert early.get_message() is not None

from __future__ import annotations

import json
from typing import Dict, Iterator, Optional

import requests
import sseclient

TERMINAL_STATES = {"done", "cancelled", "not_found"}


def iter_build_events(
    api_url: str, agent_id: str, timeout: int = 150, headers: Optional[Dict[str, str]] = None
) -> Iterator[Dict]:
    """
    Yield build snapshots from the Server-Sent Events stream until the build
    is done, cancelled or unknown.
    """
    with requests.get(f"{api_url}/builds/{agent_id}/stream", stream=True, timeout=timeout, headers=headers) as resp:
        resp.raise_for_status()
        client = sseclient.SSEClient(resp)
        for event in client.events():
            if not event.data:
                continue
            payload = json.loads(event.data)
            yield payload
            if payload.get("state") in TERMINAL_STATES:
                break

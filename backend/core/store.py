"""
Supabase access for the agents table.

The external automation service creates one row per submission, keyed by
`agent_id`. This module only reads those rows and applies partial updates
from the profile editor; it never inserts or deletes.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from supabase import Client, create_client

from backend.core.config import Settings, get_settings
from backend.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class AgentStore:
    """Thin, typed wrapper over the `agents` table."""

    def __init__(self, client: Client, table: str = "agents"):
        self.client = client
        self.table = table

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AgentStore":
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise EnvironmentError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        return cls(create_client(settings.supabase_url, settings.supabase_key), settings.agents_table)

    def agent_exists(self, agent_id: str) -> bool:
        """Cheap existence check used while a build is running."""
        try:
            result = (
                self.client.table(self.table)
                .select("agent_id")
                .eq("agent_id", agent_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StoreError(str(exc), operation="exists", agent_id=agent_id) from exc
        return bool(result.data)

    def fetch_agent(self, agent_id: str) -> Optional[Dict[str, Any]]:
        """Most recently created row for `agent_id`, or None."""
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("agent_id", agent_id)
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StoreError(str(exc), operation="fetch", agent_id=agent_id) from exc
        return result.data[0] if result.data else None

    def update_agent(self, agent_id: str, fields: Dict[str, Any]) -> None:
        try:
            (
                self.client.table(self.table)
                .update(fields)
                .eq("agent_id", agent_id)
                .execute()
            )
        except Exception as exc:
            raise StoreError(str(exc), operation="update", agent_id=agent_id) from exc
        logger.info("agent updated", extra={"agent_id": agent_id, "fields": sorted(fields)})

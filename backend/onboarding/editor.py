from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

from backend.core.exceptions import StoreError
from backend.core.store import AgentStore
from backend.onboarding.draft import to_update_payload
from backend.onboarding.models import AgentRecord, EditableDraft

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class LoadResult:
    status: LoadStatus
    agent_id: str
    record: Optional[AgentRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.FOUND

    @property
    def recoverable(self) -> bool:
        # A missing row usually means the automation service is still running.
        return self.status is LoadStatus.NOT_FOUND


@dataclass
class SaveResult:
    ok: bool
    agent_id: str
    written: Dict[str, Any]
    record: Optional[AgentRecord] = None
    error: Optional[str] = None


class ProfileEditor:
    """
    Loads finished agent records and writes editor drafts back.

    Neither operation raises for store failures; callers branch on the
    returned status and keep their draft when a save fails.
    """

    def __init__(self, store: AgentStore):
        self.store = store

    def load(self, agent_id: str) -> LoadResult:
        try:
            row = self.store.fetch_agent(agent_id)
        except StoreError as exc:
            logger.error("agent load failed: %s", exc, extra={"agent_id": agent_id})
            return LoadResult(LoadStatus.ERROR, agent_id, error=str(exc))

        if row is None:
            logger.warning("agent not found", extra={"agent_id": agent_id})
            return LoadResult(LoadStatus.NOT_FOUND, agent_id)

        try:
            record = AgentRecord.model_validate(row)
        except ValidationError as exc:
            logger.error("agent row malformed: %s", exc, extra={"agent_id": agent_id})
            return LoadResult(LoadStatus.ERROR, agent_id, error="stored agent record is malformed")

        logger.info("agent loaded", extra={"agent_id": agent_id})
        return LoadResult(LoadStatus.FOUND, agent_id, record=record)

    def save(self, agent_id: str, draft: EditableDraft, current: Optional[AgentRecord] = None) -> SaveResult:
        payload = to_update_payload(draft)
        try:
            self.store.update_agent(agent_id, payload)
        except StoreError as exc:
            logger.error("agent update failed: %s", exc, extra={"agent_id": agent_id})
            return SaveResult(False, agent_id, payload, record=current, error=str(exc))

        merged = None
        if current is not None:
            merged = current.model_copy(update=payload)
        return SaveResult(True, agent_id, payload, record=merged)

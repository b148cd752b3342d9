from __future__ import annotations

import asyncio
import logging

from backend.core.store import AgentStore

logger = logging.getLogger(__name__)


class AgentPoller:
    """
    Watches the agents table for the row created for one submission.

    The first query waits `initial_delay` (the automation service never
    finishes sooner), then one query runs every `interval` until the row is
    seen or the poller is stopped. `found` never goes back to False.
    """

    def __init__(self, agent_id: str, store: AgentStore, initial_delay: float = 10.0, interval: float = 5.0):
        self.agent_id = agent_id
        self.store = store
        self.initial_delay = initial_delay
        self.interval = interval
        self.found = False
        self.attempts = 0
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        self._stopped = True

    async def poll_once(self) -> bool:
        if self.found or self._stopped:
            return self.found

        self.attempts += 1
        logger.debug("polling for agent (attempt %d)", self.attempts, extra={"agent_id": self.agent_id})
        try:
            exists = await asyncio.to_thread(self.store.agent_exists, self.agent_id)
        except Exception as exc:
            logger.warning("agent poll failed: %s", exc, extra={"agent_id": self.agent_id})
            return False

        if exists and not self._stopped:
            self.found = True
            logger.info("agent found after %d polls", self.attempts, extra={"agent_id": self.agent_id})
        return self.found

    async def run(self) -> bool:
        await asyncio.sleep(self.initial_delay)
        while not self._stopped:
            if await self.poll_once():
                break
            await asyncio.sleep(self.interval)
        return self.found

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Set

from backend.core.exceptions import BuildNotFound
from backend.core.identifiers import generate_agent_id
from backend.core.store import AgentStore
from backend.core.valkey import get_build_status, set_build_status
from backend.onboarding.models import OnboardingForm
from backend.onboarding.poller import AgentPoller
from backend.onboarding.progress import (
    BuildOutcome,
    BuildProgressController,
    BuildProgressState,
    BuildTimings,
)
from backend.onboarding.submission import SubmissionClient, SubmissionOutcome

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Dict[str, Any]], None]

HISTORY_LIMIT = 256


class OnboardingService:
    """
    Runs the build flow for each submission: id generation, progress
    controller, background webhook delivery. Controllers live in this
    process; their snapshots are mirrored through `publish` so status reads
    also work after a build has finished.
    """

    def __init__(
        self,
        store: AgentStore,
        submitter: SubmissionClient,
        timings: Optional[BuildTimings] = None,
        publish: Publisher = set_build_status,
        history_limit: int = HISTORY_LIMIT,
    ):
        self.store = store
        self.submitter = submitter
        self.timings = timings or BuildTimings()
        self.publish = publish
        self.history_limit = history_limit
        # Most recent results only; the Valkey mirror keeps terminal snapshots.
        self.outcomes: OrderedDict[str, BuildOutcome] = OrderedDict()
        self.submissions: OrderedDict[str, SubmissionOutcome] = OrderedDict()
        self._builds: Dict[str, BuildProgressController] = {}
        self._background: Set[asyncio.Task] = set()

    def open_build(self, agent_id: str) -> BuildProgressController:
        existing = self._builds.pop(agent_id, None)
        if existing is not None:
            existing.cancel()
        poller = AgentPoller(
            agent_id,
            self.store,
            initial_delay=self.timings.poll_initial_delay,
            interval=self.timings.poll_interval,
        )
        controller = BuildProgressController(
            agent_id,
            poller,
            on_complete=self._on_complete,
            timings=self.timings,
            on_update=self._on_update,
        )
        self._builds[agent_id] = controller
        return controller

    async def begin(self, form: OnboardingForm) -> str:
        """Start a build for `form` and return its agent id immediately."""
        agent_id = generate_agent_id()
        logger.info("onboarding submitted", extra={"agent_id": agent_id, "company": form.company_name})
        controller = self.open_build(agent_id)
        await controller.start()
        self._spawn(self._deliver(agent_id, form))
        return agent_id

    def controller(self, agent_id: str) -> BuildProgressController:
        try:
            return self._builds[agent_id]
        except KeyError:
            raise BuildNotFound(agent_id) from None

    def status(self, agent_id: str) -> Dict[str, Any]:
        if agent_id in self._builds:
            return self._builds[agent_id].snapshot().to_dict()
        mirrored = get_build_status(agent_id)
        if mirrored is None:
            raise BuildNotFound(agent_id)
        return mirrored

    def cancel(self, agent_id: str) -> bool:
        controller = self._builds.pop(agent_id, None)
        if controller is None:
            raise BuildNotFound(agent_id)
        self.submissions.pop(agent_id, None)
        return controller.cancel()

    async def shutdown(self) -> None:
        for agent_id in list(self._builds):
            self._builds.pop(agent_id).cancel()
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def _deliver(self, agent_id: str, form: OnboardingForm) -> None:
        outcome = await self.submitter.submit(agent_id, form)
        if agent_id in self._builds or agent_id in self.outcomes:
            self._remember(self.submissions, agent_id, outcome)

    def _remember(self, history: OrderedDict[str, Any], agent_id: str, value: Any) -> None:
        history[agent_id] = value
        history.move_to_end(agent_id)
        while len(history) > self.history_limit:
            history.popitem(last=False)

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _on_update(self, snapshot: BuildProgressState) -> None:
        self.publish(snapshot.agent_id, snapshot.to_dict())

    def _on_complete(self, outcome: BuildOutcome) -> None:
        self._remember(self.outcomes, outcome.agent_id, outcome)
        self._builds.pop(outcome.agent_id, None)
        if outcome.timed_out:
            logger.warning("build timed out; agent page will retry the lookup", extra={"agent_id": outcome.agent_id})

"""
Build progress controller.

While the automation service builds an agent, the user watches a progress
bar that fills linearly over a fixed duration. A poller runs alongside it;
if the agent row shows up after the bar passes a small floor, the bar jumps
to 100%. Either way, the completion callback fires once, after a short
grace delay, carrying the agent id.

    idle -> running -> completing -> done
               \\          \\
                +-----------+--> cancelled   (modal closed)
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from backend.core.config import Settings
from backend.core.exceptions import BuildStateError
from backend.onboarding.poller import AgentPoller

logger = logging.getLogger(__name__)

FUN_FACTS = [
    "Analyzing your website and business model...",
    "Researching your industry and competitors...",
    "Training your agent on industry best practices...",
    "Creating personalized conversation flows...",
    "Setting up intelligent lead qualification rules...",
    "Configuring your agent's personality and tone...",
    "Optimizing responses for maximum conversion...",
    "Testing agent responses across different scenarios...",
    "Building your custom knowledge base...",
    "Finalizing deployment settings...",
    "Almost ready! Putting the finishing touches...",
]


class BuildState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETING = "completing"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass
class BuildTimings:
    total_seconds: float = 90.0
    tick_seconds: float = 0.1
    early_floor: float = 0.2
    completion_grace: float = 0.5
    fact_rotation_seconds: float = 7.5
    poll_initial_delay: float = 10.0
    poll_interval: float = 5.0

    def __post_init__(self) -> None:
        for name in ("total_seconds", "tick_seconds", "fact_rotation_seconds", "poll_interval"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")

    @property
    def step(self) -> float:
        return self.tick_seconds / self.total_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "BuildTimings":
        return cls(
            total_seconds=settings.build_total_seconds,
            tick_seconds=settings.build_tick_seconds,
            early_floor=settings.build_early_floor,
            completion_grace=settings.build_completion_grace,
            fact_rotation_seconds=settings.fact_rotation_seconds,
            poll_initial_delay=settings.poll_initial_delay,
            poll_interval=settings.poll_interval,
        )


@dataclass
class BuildOutcome:
    agent_id: str
    found: bool
    timed_out: bool
    attempts: int


@dataclass
class BuildProgressState:
    agent_id: str
    state: BuildState
    progress: float
    fact_index: int
    fact: str
    agent_found: bool
    poll_attempts: int
    timed_out: Optional[bool] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        return data


class BuildProgressController:
    """
    Drives one build attempt. A controller is single-use: a reopened modal
    gets a new instance.
    """

    def __init__(
        self,
        agent_id: str,
        poller: AgentPoller,
        on_complete: Optional[Callable[[BuildOutcome], None]] = None,
        timings: Optional[BuildTimings] = None,
        on_update: Optional[Callable[[BuildProgressState], None]] = None,
        facts: Sequence[str] = FUN_FACTS,
    ):
        self.agent_id = agent_id
        self.poller = poller
        self.on_complete = on_complete
        self.on_update = on_update
        self.timings = timings or BuildTimings()
        self.facts = list(facts)

        self.state = BuildState.IDLE
        self.progress = 0.0
        self.fact_index = 0
        self.timed_out: Optional[bool] = None

        self._tasks: List[asyncio.Task] = []
        self._completion_scheduled = False
        self._completed = False
        self._outcome: Optional[BuildOutcome] = None
        self._finished: Optional[asyncio.Event] = None
        self._last_percent = -1

    @property
    def agent_found(self) -> bool:
        return self.state is not BuildState.CANCELLED and self.poller.found

    @property
    def poll_attempts(self) -> int:
        return 0 if self.state is BuildState.CANCELLED else self.poller.attempts

    @property
    def outcome(self) -> Optional[BuildOutcome]:
        return self._outcome

    def snapshot(self) -> BuildProgressState:
        return BuildProgressState(
            agent_id=self.agent_id,
            state=self.state,
            progress=round(self.progress, 4),
            fact_index=self.fact_index,
            fact=self.facts[self.fact_index] if self.facts else "",
            agent_found=self.agent_found,
            poll_attempts=self.poll_attempts,
            timed_out=self.timed_out,
        )

    async def start(self) -> None:
        if self.state is not BuildState.IDLE:
            raise BuildStateError(f"build {self.agent_id} already {self.state.value}")

        self.progress = 0.0
        self.fact_index = 0
        self.state = BuildState.RUNNING
        self._finished = asyncio.Event()
        self._tasks = [
            asyncio.create_task(self._run_ticker()),
            asyncio.create_task(self._run_facts()),
            asyncio.create_task(self._run_poller()),
        ]
        logger.info("build started", extra={"agent_id": self.agent_id})
        self._notify(force=True)

    def tick(self) -> float:
        """Advance one step and apply the completion rules."""
        if self.state is not BuildState.RUNNING:
            return self.progress

        progress = min(self.progress + self.timings.step, 1.0)
        if self.poller.found and progress > self.timings.early_floor:
            logger.info("agent found past floor; completing early", extra={"agent_id": self.agent_id})
            self.progress = 1.0
            self._begin_completion(timed_out=False)
        elif progress >= 1.0:
            self.progress = 1.0
            self._begin_completion(timed_out=not self.poller.found)
        else:
            self.progress = progress
            self._notify()
        return self.progress

    def cancel(self) -> bool:
        """Tear down every timer and the poller. No completion fires afterwards."""
        if self.state not in (BuildState.RUNNING, BuildState.COMPLETING):
            return False

        self.poller.stop()
        self._cancel_tasks()
        self.state = BuildState.CANCELLED
        self.progress = 0.0
        self.fact_index = 0
        self.timed_out = None
        logger.info("build cancelled", extra={"agent_id": self.agent_id})
        self._notify(force=True)
        if self._finished is not None:
            self._finished.set()
        return True

    async def wait(self) -> Optional[BuildOutcome]:
        """Block until the build is done (outcome) or cancelled (None)."""
        if self._finished is None:
            raise BuildStateError(f"build {self.agent_id} was never started")
        await self._finished.wait()
        return self._outcome

    def _begin_completion(self, timed_out: bool) -> None:
        if self._completion_scheduled:
            return
        self._completion_scheduled = True
        self.state = BuildState.COMPLETING
        self.timed_out = timed_out
        self.poller.stop()
        if timed_out:
            logger.warning("build reached 100% without finding the agent", extra={"agent_id": self.agent_id})
        self._notify(force=True)
        self._tasks.append(asyncio.create_task(self._finish_after_grace()))

    async def _finish_after_grace(self) -> None:
        await asyncio.sleep(self.timings.completion_grace)
        self._finish()

    def _finish(self) -> None:
        if self._completed or self.state is not BuildState.COMPLETING:
            return
        self._completed = True
        self.state = BuildState.DONE
        self._outcome = BuildOutcome(
            agent_id=self.agent_id,
            found=self.poller.found,
            timed_out=bool(self.timed_out),
            attempts=self.poller.attempts,
        )
        self._cancel_tasks()
        self._notify(force=True)
        if self._finished is not None:
            self._finished.set()
        logger.info(
            "build complete", extra={"agent_id": self.agent_id, "found": self._outcome.found}
        )
        if self.on_complete is not None:
            try:
                self.on_complete(self._outcome)
            except Exception:
                logger.exception("build completion callback failed", extra={"agent_id": self.agent_id})

    def _cancel_tasks(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in self._tasks:
            if task is not current and not task.done():
                task.cancel()
        self._tasks = []

    def _notify(self, force: bool = False) -> None:
        if self.on_update is None:
            return
        percent = int(self.progress * 100)
        if not force and percent == self._last_percent:
            return
        self._last_percent = percent
        try:
            self.on_update(self.snapshot())
        except Exception:
            logger.exception("build update hook failed", extra={"agent_id": self.agent_id})

    async def _run_ticker(self) -> None:
        while self.state is BuildState.RUNNING:
            await asyncio.sleep(self.timings.tick_seconds)
            self.tick()

    async def _run_facts(self) -> None:
        if not self.facts:
            return
        while True:
            await asyncio.sleep(self.timings.fact_rotation_seconds)
            if self.state not in (BuildState.RUNNING, BuildState.COMPLETING):
                return
            self.fact_index = (self.fact_index + 1) % len(self.facts)
            self._notify(force=True)

    async def _run_poller(self) -> None:
        found = await self.poller.run()
        if found and self.state is BuildState.RUNNING:
            self._notify(force=True)

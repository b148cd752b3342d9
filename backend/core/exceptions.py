"""
Exception hierarchy for the onboarding engine.

Catch `OnboardingError` to handle anything raised by this package. The
orchestration core swallows transient failures itself; these types mostly
surface at the store boundary and in the API layer.
"""
from __future__ import annotations

from typing import Optional


class OnboardingError(Exception):
    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


class StoreError(OnboardingError):
    """A query or update against the agents table failed."""

    def __init__(self, message: str, *, operation: str, agent_id: Optional[str] = None):
        super().__init__(message, details={"operation": operation, "agent_id": agent_id})
        self.operation = operation
        self.agent_id = agent_id


class BuildStateError(OnboardingError):
    """Illegal transition requested on a build progress controller."""


class BuildNotFound(OnboardingError):
    def __init__(self, agent_id: str):
        super().__init__(f"no build in progress for {agent_id}", details={"agent_id": agent_id})
        self.agent_id = agent_id

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException

from backend.core.config import get_settings
from backend.core.store import AgentStore
from backend.onboarding.editor import ProfileEditor
from backend.onboarding.progress import BuildTimings
from backend.onboarding.service import OnboardingService
from backend.onboarding.submission import SubmissionClient

_store: Optional[AgentStore] = None
_service: Optional[OnboardingService] = None


def verify_token(x_api_token: Optional[str] = Header(default=None)) -> None:
    expected = get_settings().api_token
    if expected and x_api_token != expected:
        raise HTTPException(status_code=401, detail="invalid API token")


def get_store() -> AgentStore:
    global _store
    if _store is None:
        try:
            _store = AgentStore.from_settings()
        except EnvironmentError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
    return _store


def get_editor() -> ProfileEditor:
    return ProfileEditor(get_store())


def get_service() -> OnboardingService:
    global _service
    if _service is None:
        settings = get_settings()
        _service = OnboardingService(
            store=get_store(),
            submitter=SubmissionClient(
                settings.automation_base_url,
                settings.automation_endpoint,
                timeout=settings.automation_timeout,
            ),
            timings=BuildTimings.from_settings(settings),
        )
    return _service


async def shutdown_service() -> None:
    global _service
    if _service is not None:
        await _service.shutdown()
        _service = None

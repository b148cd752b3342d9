from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from backend.onboarding.models import OnboardingForm

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    agent_id: str
    delivered: bool
    status_code: Optional[int] = None
    remote_agent_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ids_match(self) -> Optional[bool]:
        if self.remote_agent_id is None:
            return None
        return self.remote_agent_id == self.agent_id


def build_payload(agent_id: str, form: OnboardingForm) -> Dict[str, Any]:
    return {
        "action": "create_agent",
        "agentId": agent_id,
        "formData": form.to_wire(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class SubmissionClient:
    """
    Fire-and-forget delivery of onboarding data to the automation webhook.

    `submit` never raises: the build flow continues whatever happens here,
    since completion is detected by polling the agents table.
    """

    def __init__(
        self,
        base_url: str,
        endpoint: str = "/onboarding-chat",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        self.timeout = httpx.Timeout(timeout)
        self._client = client

    async def submit(self, agent_id: str, form: OnboardingForm) -> SubmissionOutcome:
        payload = build_payload(agent_id, form)
        logger.info("submitting onboarding data", extra={"agent_id": agent_id, "url": self.url})
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("webhook request failed: %s", exc, extra={"agent_id": agent_id})
            return SubmissionOutcome(agent_id, delivered=False, error=str(exc))

        if not response.is_success:
            logger.error(
                "webhook returned %s: %s",
                response.status_code,
                response.text[:500],
                extra={"agent_id": agent_id},
            )
            return SubmissionOutcome(
                agent_id, delivered=False, status_code=response.status_code, error=f"HTTP {response.status_code}"
            )

        outcome = SubmissionOutcome(agent_id, delivered=True, status_code=response.status_code)
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("agent_id") is not None:
            outcome.remote_agent_id = str(body["agent_id"])

        if outcome.ids_match is False:
            logger.warning(
                "webhook returned a different agent_id",
                extra={"agent_id": agent_id, "remote_agent_id": outcome.remote_agent_id},
            )
        else:
            logger.info("webhook accepted submission", extra={"agent_id": agent_id})
        return outcome

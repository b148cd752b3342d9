from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.api.deps import get_service
from backend.core.config import get_settings
from backend.core.exceptions import BuildNotFound
from backend.core.valkey import build_channel, get_client
from backend.onboarding.models import AgentPreview, OnboardingForm, WebsiteEnrichment
from backend.onboarding.preview import enrich_website, generate_agent_preview, is_eu_locale
from backend.onboarding.service import OnboardingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["onboarding"])

TERMINAL_STATES = {"done", "cancelled"}


class PreviewRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    company_name: Optional[str] = None
    business_description: Optional[str] = None


class EnrichRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    website_url: str


@router.post("/onboarding", status_code=202)
async def submit_onboarding(
    form: OnboardingForm,
    service: OnboardingService = Depends(get_service),
    accept_language: Optional[str] = Header(default=None),
) -> Dict[str, str]:
    consent_required = get_settings().require_gdpr_consent or is_eu_locale(accept_language)
    if consent_required and not form.gdpr_consent:
        raise HTTPException(status_code=422, detail="GDPR consent is required")
    agent_id = await service.begin(form)
    return {"agent_id": agent_id, "status": "running"}


@router.post("/preview")
async def preview(payload: PreviewRequest) -> AgentPreview:
    return generate_agent_preview(payload.company_name, payload.business_description)


@router.post("/enrich")
async def enrich(payload: EnrichRequest) -> WebsiteEnrichment:
    enrichment = enrich_website(payload.website_url)
    if enrichment is None:
        raise HTTPException(status_code=422, detail="websiteUrl must be an http(s) URL")
    return enrichment


@router.get("/builds/{agent_id}")
async def build_status(agent_id: str, service: OnboardingService = Depends(get_service)) -> Dict[str, Any]:
    try:
        return service.status(agent_id)
    except BuildNotFound:
        raise HTTPException(status_code=404, detail="build not found")


@router.delete("/builds/{agent_id}")
async def cancel_build(agent_id: str, service: OnboardingService = Depends(get_service)) -> Dict[str, Any]:
    try:
        cancelled = service.cancel(agent_id)
    except BuildNotFound:
        raise HTTPException(status_code=404, detail="build not found")
    return {"agent_id": agent_id, "cancelled": cancelled}


@router.get("/builds/{agent_id}/stream")
async def stream_build(agent_id: str, service: OnboardingService = Depends(get_service)):
    """Server-Sent Events with build snapshots until the build is done or cancelled."""

    async def event_generator():
        pubsub = get_client().pubsub()
        try:
            pubsub.subscribe(build_channel(agent_id))
            try:
                current = service.status(agent_id)
            except BuildNotFound:
                yield f"data: {json.dumps({'agent_id': agent_id, 'state': 'not_found'})}\n\n"
                return
            yield f"data: {json.dumps(current)}\n\n"
            if current.get("state") in TERMINAL_STATES:
                return

            while True:
                message = pubsub.get_message(timeout=0.0)
                if message and message.get("type") == "message":
                    payload = message.get("data")
                    if isinstance(payload, (bytes, bytearray)):
                        payload = payload.decode()
                    if payload:
                        yield f"data: {payload}\n\n"
                        try:
                            if json.loads(payload).get("state") in TERMINAL_STATES:
                                break
                        except ValueError:
                            logger.warning("unparseable build event", extra={"agent_id": agent_id})
                    continue
                await asyncio.sleep(0.1)
        finally:
            pubsub.close()

    return StreamingResponse(event_generator(), media_type="text/event-stream")

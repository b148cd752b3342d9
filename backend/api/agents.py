from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from backend.api.deps import get_editor
from backend.onboarding.draft import to_editable_draft
from backend.onboarding.editor import LoadResult, LoadStatus, ProfileEditor
from backend.onboarding.models import AgentRecord, EditableDraft
from backend.onboarding.narrative import (
    build_business_summary,
    build_narrative,
    format_company_size,
    parse_key_differentiators,
)
from backend.onboarding.options import editor_options

router = APIRouter(prefix="", tags=["agents"])

NOT_FOUND_MESSAGE = "Your agent is still being built. Give it a minute and try again."
LOAD_FAILED_MESSAGE = "Failed to load your agent data. Please try again."


def agent_view(record: AgentRecord) -> Dict[str, Any]:
    return {
        "record": record.model_dump(),
        "draft": to_editable_draft(record).model_dump(),
        "narrative": build_narrative(record),
        "summary": build_business_summary(record),
        "company_size": format_company_size(record.icp_employees, record.icp_locations, record.icp_revenue),
        "differentiators": parse_key_differentiators(record.key_differentiators),
        "has_rationale": record.has_rationale,
    }


def _raise_for_load(result: LoadResult) -> None:
    if result.status is LoadStatus.NOT_FOUND:
        raise HTTPException(
            status_code=404,
            detail={"reason": "not_found", "recoverable": result.recoverable, "message": NOT_FOUND_MESSAGE},
        )
    raise HTTPException(
        status_code=502,
        detail={"reason": "store_error", "recoverable": result.recoverable, "message": LOAD_FAILED_MESSAGE},
    )


@router.get("/agents/{agent_id}")
def get_agent(agent_id: str, editor: ProfileEditor = Depends(get_editor)) -> Dict[str, Any]:
    result = editor.load(agent_id)
    if not result.ok:
        _raise_for_load(result)
    return agent_view(result.record)


@router.patch("/agents/{agent_id}")
def update_agent(agent_id: str, draft: EditableDraft, editor: ProfileEditor = Depends(get_editor)) -> Dict[str, Any]:
    current = editor.load(agent_id)
    if not current.ok:
        _raise_for_load(current)

    draft = draft.model_copy(update={"agent_id": agent_id})
    saved = editor.save(agent_id, draft, current=current.record)
    if not saved.ok:
        raise HTTPException(
            status_code=502,
            detail={"reason": "save_failed", "recoverable": True, "message": saved.error},
        )
    return agent_view(saved.record)


@router.post("/narrative")
def preview_narrative(draft: EditableDraft) -> Dict[str, str]:
    return {"narrative": build_narrative(draft)}


@router.get("/options")
def options() -> Dict[str, Any]:
    return editor_options()

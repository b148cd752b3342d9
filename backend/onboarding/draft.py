"""
Conversion between stored agent rows and editor drafts.

Multi-value columns are stored as delimited strings. Drafts hold them as
lists; writing a draft back always joins with ", ".
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence, Union

from backend.onboarding.models import AgentRecord, EditableDraft

Delimited = Union[str, Sequence[str], None]

JOIN_SEPARATOR = ", "

LIST_FIELDS = ("icp_industries", "icp_geo", "icp_title", "icp_department")
_IDENTITY_FIELDS = {"agent_id"}


def split_delimited(value: Delimited, pattern: str = ",") -> List[str]:
    """Split on any character in `pattern`, trim items, drop empties."""
    if not value:
        return []
    if isinstance(value, str):
        parts = re.split(f"[{re.escape(pattern)}]", value)
    else:
        parts = list(value)
    return [p.strip() for p in parts if p and p.strip()]


def _wrap_single(value: str | None) -> List[str]:
    # Title and department are single-valued columns; the draft list holds the whole string.
    return [value.strip()] if value and value.strip() else []


def to_editable_draft(record: AgentRecord) -> EditableDraft:
    fields = {name: getattr(record, name) for name in EditableDraft.model_fields if name not in LIST_FIELDS}
    return EditableDraft(
        **fields,
        icp_industries=split_delimited(record.icp_industries),
        icp_geo=split_delimited(record.icp_geo),
        icp_title=_wrap_single(record.icp_title),
        icp_department=_wrap_single(record.icp_department),
    )


def join_items(items: Sequence[str]) -> str:
    return JOIN_SEPARATOR.join(item.strip() for item in items if item and item.strip())


def to_update_payload(draft: EditableDraft) -> Dict[str, Any]:
    """Persistable column values for `draft`, collections re-joined."""
    payload = draft.model_dump(exclude=_IDENTITY_FIELDS)
    for name in LIST_FIELDS:
        payload[name] = join_items(payload[name]) or None
    return payload

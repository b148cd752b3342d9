"""
Human-readable rendering of an agent's ideal customer profile.

Everything here is pure: the same record or draft always yields the same
text. `build_narrative` backs both the read-only profile and the editor's
live preview.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, Union

from backend.onboarding.draft import Delimited, split_delimited, to_editable_draft
from backend.onboarding.models import AgentRecord, EditableDraft

_PLACEHOLDER_GEO = ("unknown", "various")


def format_list(items: Sequence[str]) -> str:
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def format_industries(value: Delimited) -> str:
    return format_list(split_delimited(value))


def industry_phrase(value: Delimited) -> str:
    industries = format_industries(value)
    return f"{industries} companies" if industries else "businesses"


def is_meaningful_geo(geo: Optional[str]) -> bool:
    if not geo or not geo.strip():
        return False
    lowered = geo.lower()
    return not any(marker in lowered for marker in _PLACEHOLDER_GEO)


def format_revenue_millions(revenue: float) -> str:
    # Half-up on the exact binary value of the quotient.
    millions = Decimal(revenue / 1_000_000).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"${millions}M"


def _locations_text(locations: int) -> str:
    return f"{locations} location{'s' if locations > 1 else ''}"


def format_company_size(
    employees: Optional[int] = None,
    locations: Optional[int] = None,
    revenue: Optional[float] = None,
) -> str:
    parts = []
    if employees:
        parts.append(f"~{employees:,} employees")
    if locations:
        parts.append(_locations_text(locations))
    if revenue:
        parts.append(f"{format_revenue_millions(revenue)} revenue")
    return " • ".join(parts)


def parse_key_differentiators(value: Optional[str], limit: int = 3) -> List[str]:
    return split_delimited(value, ";,")[:limit]


def truncate_style(style: Optional[str], max_length: int = 120) -> str:
    if not style:
        return ""
    if len(style) <= max_length:
        return style
    return style[:max_length].strip() + "..."


def _size_details(draft: EditableDraft) -> List[str]:
    details = []
    if draft.icp_employees and draft.icp_employees > 0:
        details.append(f"around {draft.icp_employees:,} employees")
    if draft.icp_locations and draft.icp_locations > 0:
        details.append(_locations_text(draft.icp_locations))
    if draft.icp_revenue and draft.icp_revenue > 0:
        details.append(f"{format_revenue_millions(draft.icp_revenue)} annual revenue")
    return details


def _contact_sentence(title: str, department: str) -> str:
    if title and department:
        return f"My ideal contact is a {title} in {department}. "
    if title:
        return f"My ideal contact is a {title}. "
    return f"My ideal contact is someone in {department}. "


def _traits_text(traits: str) -> str:
    lowered = traits.lower()
    if lowered.startswith("value") or lowered.startswith("they"):
        return traits
    return f"value {lowered}"


def build_narrative(profile: Union[AgentRecord, EditableDraft]) -> str:
    """Render the ICP paragraph for a stored record or an in-progress draft."""
    draft = to_editable_draft(profile) if isinstance(profile, AgentRecord) else profile

    narrative = "I'll prioritize " + industry_phrase(draft.icp_industries)

    geo = ", ".join(draft.icp_geo)
    if is_meaningful_geo(geo):
        narrative += f" in {geo}"
    narrative += ". "

    details = _size_details(draft)
    if details:
        narrative += f"I focus on companies with {format_list(details)}. "

    title = ", ".join(draft.icp_title)
    department = ", ".join(draft.icp_department)
    if title or department:
        narrative += _contact_sentence(title, department)

    if draft.icp_motivations and draft.icp_motivations.strip():
        narrative += f"They're motivated by {draft.icp_motivations.lower()}. "

    if draft.icp_traits and draft.icp_traits.strip():
        narrative += f"They {_traits_text(draft.icp_traits)}. "

    return narrative.strip()


def build_business_summary(record: AgentRecord) -> str:
    summary = record.business_description or "Your business description will appear here."
    if record.comm_style:
        summary += f" I'll keep my tone {truncate_style(record.comm_style)}."
    return summary

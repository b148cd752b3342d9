from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class OnboardingForm(BaseModel):
    """Business information collected by the onboarding form (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    full_name: str = Field(min_length=2)
    email: str
    company_name: str = Field(min_length=2)
    website_url: str
    instagram_url: Optional[str] = None
    business_description: str = Field(min_length=50)
    gdpr_consent: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("website_url")
    @classmethod
    def _valid_website(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Please enter a valid website URL")
        return value

    @field_validator("instagram_url")
    @classmethod
    def _valid_instagram(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if not (value.startswith("http") and "instagram.com/" in value):
            raise ValueError("Instagram URL must start with http and include instagram.com/")
        return value

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class AgentRecord(BaseModel):
    """A row of the agents table as written by the automation service."""

    model_config = ConfigDict(extra="allow")

    agent_id: str
    created_at: Optional[str] = None
    user_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    business_description: Optional[str] = None
    icp_geo: Optional[str] = None
    icp_industries: Optional[str] = None
    icp_employees: Optional[int] = None
    icp_locations: Optional[int] = None
    icp_revenue: Optional[float] = None
    icp_traits: Optional[str] = None
    icp_title: Optional[str] = None
    icp_department: Optional[str] = None
    icp_motivations: Optional[str] = None
    icp_why: Optional[str] = None
    key_differentiators: Optional[str] = None
    comm_style: Optional[str] = None
    rationale_business_description: Optional[str] = None
    rationale_icp: Optional[str] = None
    rationale_diff: Optional[str] = None
    rationale_comms: Optional[str] = None

    @property
    def has_rationale(self) -> bool:
        return any(
            (self.rationale_business_description, self.rationale_icp, self.rationale_diff, self.rationale_comms)
        )


class EditableDraft(BaseModel):
    """
    Working copy of an AgentRecord for the editor.

    The delimited columns (industries, geography, title, department) are held
    as lists so they can back multi-selects; everything else keeps the
    record's representation.
    """

    agent_id: str
    user_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    business_description: Optional[str] = None
    icp_geo: List[str] = Field(default_factory=list)
    icp_industries: List[str] = Field(default_factory=list)
    icp_employees: Optional[int] = None
    icp_locations: Optional[int] = None
    icp_revenue: Optional[float] = None
    icp_traits: Optional[str] = None
    icp_title: List[str] = Field(default_factory=list)
    icp_department: List[str] = Field(default_factory=list)
    icp_motivations: Optional[str] = None
    icp_why: Optional[str] = None
    key_differentiators: Optional[str] = None
    comm_style: Optional[str] = None


class AgentPreview(BaseModel):
    greeting: str
    tone: str
    expertise: List[str]


class WebsiteEnrichment(BaseModel):
    """Suggestions derived from the website URL, offered only for empty form fields."""

    suggested_instagram: str
    suggested_linkedin: str
    suggested_description: str

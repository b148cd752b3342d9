"""
Helpers behind the onboarding form: the live agent preview, suggestions
derived from the website URL, Instagram handle clean-up and the EU locale
check that decides whether the consent box is shown.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from backend.onboarding.models import AgentPreview, WebsiteEnrichment

_INSTAGRAM_PREFIX = re.compile(r"^(https?://)?(www\.)?(instagram\.com/)?@?")

# Primary browser language prefixes treated as EU visitors.
EU_LANGUAGES = ("de", "fr", "es-es", "it", "nl", "pt", "pl", "ro", "cs", "hu")

_BUSINESS_TYPES = [
    (("restaurant",), "restaurant"),
    (("clinic", "dental"), "healthcare practice"),
    (("agency",), "agency"),
    (("store", "shop"), "retail business"),
    (("consultant",), "consultancy"),
]

_TONES = {
    "restaurant": "Warm and welcoming",
    "healthcare practice": "Caring and professional",
    "agency": "Expert and consultative",
}

_EXPERTISE = [
    (("lead",), "Lead Generation"),
    (("customer", "client"), "Customer Service"),
    (("book", "appointment"), "Appointment Booking"),
    (("product", "service"), "Product Information"),
]


def sanitize_instagram_handle(value: str) -> str:
    return _INSTAGRAM_PREFIX.sub("", value, count=1).rstrip("/")


def generate_agent_preview(company_name: Optional[str], description: Optional[str]) -> AgentPreview:
    company = company_name or "your company"
    text = (description or "").lower()

    business_type = "business"
    for keywords, label in _BUSINESS_TYPES:
        if any(k in text for k in keywords):
            business_type = label
            break

    expertise = [label for keywords, label in _EXPERTISE if any(k in text for k in keywords)]

    return AgentPreview(
        greeting=(
            f"Hi there! I'm the AI assistant for {company}. I'd love to help you learn more about "
            f"how we can serve your needs. What brings you to our {business_type} today?"
        ),
        tone=_TONES.get(business_type, "Professional and helpful"),
        expertise=(expertise or ["Business Inquiries"])[:3],
    )


def enrich_website(url: Optional[str]) -> Optional[WebsiteEnrichment]:
    """Suggest social handles and a starter description from the site's domain."""
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    brand = parsed.hostname.replace("www.", "", 1).split(".")[0]
    return WebsiteEnrichment(
        suggested_instagram=f"@{brand}",
        suggested_linkedin=f"company/{brand}",
        suggested_description=(
            f"We are {brand}, a growing business focused on delivering exceptional value to our customers. "
            "We help our target audience solve their key challenges through our products and services."
        ),
    )


def instagram_url(handle: str) -> str:
    if handle.startswith("http"):
        return handle
    return f"https://instagram.com/{handle.lstrip('@')}"


def fill_empty_fields(values: Dict[str, Any], enrichment: WebsiteEnrichment) -> Dict[str, Any]:
    """Copy of the camelCase form `values` with suggestions in the fields the user left blank."""
    filled = dict(values)
    if not filled.get("instagramUrl") and enrichment.suggested_instagram:
        filled["instagramUrl"] = instagram_url(enrichment.suggested_instagram)
    if not filled.get("businessDescription") and enrichment.suggested_description:
        filled["businessDescription"] = enrichment.suggested_description
    return filled


def is_eu_locale(accept_language: Optional[str]) -> bool:
    if not accept_language:
        return False
    primary = accept_language.split(",")[0].split(";")[0].strip().lower()
    return any(primary.startswith(lang) for lang in EU_LANGUAGES)

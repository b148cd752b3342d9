import os
from typing import Optional

import streamlit as st
from dotenv import load_dotenv

from backend.onboarding.models import WebsiteEnrichment
from backend.onboarding.preview import fill_empty_fields, is_eu_locale, sanitize_instagram_handle
from components.api import cancel_build, check_api_health, fetch_enrichment, fetch_preview, headers, start_onboarding
from components.build_monitor import iter_build_events
from components.validation import validate_form

load_dotenv()

API_URL = os.getenv("API_URL", "http://localhost:10000")
API_TOKEN = os.getenv("API_TOKEN", "")
REQUIRE_GDPR_CONSENT = os.getenv("REQUIRE_GDPR_CONSENT", "").lower() in ("1", "true", "yes", "on")

st.set_page_config(page_title="Create Your AI Sales Agent", layout="wide", page_icon="🤖")


def close_build(api_url: str, api_token: Optional[str]) -> None:
    agent_id = st.session_state.get("building_agent_id")
    if agent_id:
        cancel_build(api_url, api_token, agent_id)
    st.session_state["building_agent_id"] = None


def enrich_from_website(api_url: str, api_token: Optional[str]) -> None:
    """Fill Instagram and description suggestions into fields that are still empty."""
    url = st.session_state.get("websiteUrl", "")
    if not url.startswith("http"):
        return
    result = fetch_enrichment(api_url, api_token, url)
    if not result.ok:
        return
    current = {key: st.session_state.get(key) for key in ("instagramUrl", "businessDescription")}
    for key, value in fill_empty_fields(current, WebsiteEnrichment.model_validate(result.data)).items():
        if value != current[key]:
            st.session_state[key] = value


# Initialize session state
accept_language = st.context.headers.get("Accept-Language")
show_consent = REQUIRE_GDPR_CONSENT or is_eu_locale(accept_language)
if "building_agent_id" not in st.session_state:
    st.session_state["building_agent_id"] = None
if "submit_error" not in st.session_state:
    st.session_state["submit_error"] = None

col1, col2 = st.columns([3, 1])
with col1:
    st.title("🤖 Create Your AI Sales Agent")
    st.caption("Tell us about your business and we'll create a personalized AI agent that converts visitors into customers.")
with col2:
    if check_api_health(API_URL):
        st.success("API ✅")
    else:
        st.error("API ❌")

with st.sidebar:
    st.header("⚙️ Configuration")
    api_url = st.text_input("API URL", API_URL, help="Backend API endpoint")
    api_token = st.text_input("API Token", value=API_TOKEN, type="password",
                              help="Optional API token for authentication")

building_agent_id = st.session_state.get("building_agent_id")

if building_agent_id:
    # Build progress "modal"
    st.subheader("⚡ Building Your AI Agent")
    st.write("Hang tight – your agent will be ready in about 75 seconds")
    progress_bar = st.progress(0, text="Progress 0%")
    fact_placeholder = st.empty()
    st.button("✖️ Close", on_click=close_build, args=(api_url, api_token))
    st.caption("We're personalizing everything based on your business details")

    final = None
    try:
        for snapshot in iter_build_events(api_url, building_agent_id, headers=headers(api_token)):
            percent = int(round(float(snapshot.get("progress", 0)) * 100))
            progress_bar.progress(min(percent, 100), text=f"Progress {percent}%")
            if snapshot.get("fact"):
                fact_placeholder.info(snapshot["fact"])
            final = snapshot
    except Exception as e:
        st.warning(f"Lost connection to the build stream ({e}); opening your agent anyway.")
        final = {"state": "done", "agent_id": building_agent_id}

    if final and final.get("state") in ("done", "not_found"):
        st.session_state["building_agent_id"] = None
        st.session_state["agent_id"] = building_agent_id
        st.query_params["agentId"] = building_agent_id
        st.switch_page("pages/1_agent.py")
    elif final and final.get("state") == "cancelled":
        st.session_state["building_agent_id"] = None
        st.rerun()
else:
    form_col, preview_col = st.columns([3, 2])

    with form_col:
        st.subheader("👤 About You")
        full_name = st.text_input("Full Name *", key="fullName")
        email = st.text_input("Email *", key="email")

        st.subheader("🏢 Your Business")
        company_name = st.text_input("Company Name *", key="companyName")
        website_url = st.text_input("Website URL *", key="websiteUrl", placeholder="https://example.com",
                                    on_change=enrich_from_website, args=(api_url, api_token))
        instagram_url = st.text_input("Instagram URL", key="instagramUrl",
                                      placeholder="https://instagram.com/yourbrand")
        if instagram_url:
            st.caption(f"Handle: @{sanitize_instagram_handle(instagram_url)}")
        business_description = st.text_area("Business Description *", key="businessDescription", height=160,
                                            help="At least 50 characters")
        st.caption(f"{len(business_description)} characters")

        gdpr_consent = False
        if show_consent:
            gdpr_consent = st.checkbox("I agree to the processing of my data to build my agent", key="gdprConsent")

        values = {
            "fullName": full_name,
            "email": email,
            "companyName": company_name,
            "websiteUrl": website_url,
            "instagramUrl": instagram_url or None,
            "businessDescription": business_description,
            "gdprConsent": gdpr_consent if show_consent else None,
        }
        errors = validate_form(values, require_consent=show_consent)
        touched = {k for k, v in values.items() if v}
        for field_name, message in errors.items():
            if field_name in touched:
                st.error(f"{field_name}: {message}")

        if st.button("🚀 Create My Agent", type="primary", use_container_width=True, disabled=bool(errors)):
            result = start_onboarding(
                api_url, api_token, {k: v for k, v in values.items() if v is not None}, accept_language=accept_language
            )
            if result.ok:
                st.session_state["building_agent_id"] = result.data["agent_id"]
                st.session_state["submit_error"] = None
                st.rerun()
            else:
                st.session_state["submit_error"] = result.message or "Could not start the build."

        if st.session_state.get("submit_error"):
            st.error(f"❌ {st.session_state['submit_error']}")

    with preview_col:
        st.subheader("💬 Agent Greeting Preview")
        preview = fetch_preview(api_url, api_token, company_name, business_description)
        if preview.ok:
            st.info(preview.data.get("greeting", ""))
            st.write(f"**Tone:** {preview.data.get('tone', '')}")
            st.write("**Expertise:** " + " · ".join(preview.data.get("expertise", [])))
        else:
            st.caption("Preview unavailable")
        st.caption("This preview updates as you fill out the form")

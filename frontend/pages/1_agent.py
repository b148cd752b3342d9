import os
from typing import Any, Dict, List, Optional

import streamlit as st
from dotenv import load_dotenv

from backend.core.identifiers import is_agent_id
from components.api import fetch_agent, fetch_options, preview_narrative, save_agent

load_dotenv()

API_URL = os.getenv("API_URL", "http://localhost:10000")
API_TOKEN = os.getenv("API_TOKEN", "")
AGENT_NAME = "Sofia"

st.set_page_config(page_title="Your AI Agent", layout="wide", page_icon="✨")


def _with_current(options: List[str], current: List[str]) -> List[str]:
    # Stored values may not be in the preset lists; keep them selectable.
    return options + [value for value in current if value not in options]


def back_to_onboarding(message: str, retry: bool = False) -> None:
    st.error(f"❌ {message}")
    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("⬅️ Back to Onboarding", use_container_width=True):
            st.session_state.pop("agent_view", None)
            st.switch_page("app.py")
    if retry:
        with col2:
            if st.button("🔄 Try Again", use_container_width=True):
                st.session_state.pop("agent_view", None)
                st.rerun()
    st.stop()


def collect_draft(agent_id: str, draft: Dict[str, Any], options: Dict[str, Any]) -> Dict[str, Any]:
    updated = dict(draft)
    updated["agent_id"] = agent_id

    st.markdown("**About your business**")
    updated["business_description"] = st.text_area(
        "Business Description", value=draft.get("business_description") or "", key="edit_business_description"
    )
    styles = options.get("communication_styles", [])
    current_style = draft.get("comm_style") or ""
    style_options = _with_current([""] + styles, [current_style])
    updated["comm_style"] = st.selectbox(
        "Communication Style",
        options=style_options,
        index=style_options.index(current_style),
        key="edit_comm_style",
    ) or None
    updated["key_differentiators"] = st.text_area(
        "Key Differentiators", value=draft.get("key_differentiators") or "", key="edit_key_differentiators",
        help="Separate items with semicolons",
    ) or None

    st.markdown("**Ideal customer profile**")
    updated["icp_industries"] = st.multiselect(
        "Industries",
        _with_current(options.get("industries", []), draft.get("icp_industries", [])),
        default=draft.get("icp_industries", []),
        key="edit_icp_industries",
    )
    updated["icp_geo"] = st.multiselect(
        "Geography",
        _with_current(options.get("geography", []), draft.get("icp_geo", [])),
        default=draft.get("icp_geo", []),
        key="edit_icp_geo",
    )

    col1, col2 = st.columns(2)
    with col1:
        presets = options.get("company_sizes", [])
        size_values = [None] + [p["employees"] for p in presets]
        labels = {p["employees"]: p["label"] for p in presets}
        current_employees = draft.get("icp_employees")
        if current_employees not in size_values:
            size_values.append(current_employees)
        updated["icp_employees"] = st.selectbox(
            "Company Size",
            options=size_values,
            index=size_values.index(current_employees),
            format_func=lambda v: "Select company size..." if v is None else labels.get(v, f"{v} employees"),
            key="edit_icp_employees",
        )
    with col2:
        revenue = draft.get("icp_revenue")
        millions = st.number_input(
            "Revenue ($M)", min_value=0.0, step=0.1,
            value=float(revenue) / 1_000_000 if revenue else 0.0, key="edit_icp_revenue",
        )
        updated["icp_revenue"] = millions * 1_000_000 if millions else None

    updated["icp_title"] = st.multiselect(
        "Job Titles",
        _with_current(options.get("job_titles", []), draft.get("icp_title", [])),
        default=draft.get("icp_title", []),
        key="edit_icp_title",
    )
    updated["icp_department"] = st.multiselect(
        "Departments",
        _with_current(options.get("departments", []), draft.get("icp_department", [])),
        default=draft.get("icp_department", []),
        key="edit_icp_department",
    )
    updated["icp_motivations"] = st.text_input(
        "Motivations", value=draft.get("icp_motivations") or "", key="edit_icp_motivations"
    ) or None
    updated["icp_traits"] = st.text_input(
        "Traits", value=draft.get("icp_traits") or "", key="edit_icp_traits"
    ) or None
    return updated


with st.sidebar:
    st.header("⚙️ Configuration")
    api_url = st.text_input("API URL", API_URL, help="Backend API endpoint")
    api_token = st.text_input("API Token", value=API_TOKEN, type="password")

agent_id: Optional[str] = st.query_params.get("agentId") or st.session_state.get("agent_id")
if not agent_id:
    back_to_onboarding("No agent ID provided. Please complete the onboarding process.")
if not is_agent_id(agent_id):
    back_to_onboarding("That link doesn't look like a valid agent ID.")

if st.session_state.get("agent_view", {}).get("record", {}).get("agent_id") != agent_id:
    with st.spinner("Loading your agent..."):
        result = fetch_agent(api_url, api_token, agent_id)
    if not result.ok:
        if result.reason == "not_found":
            back_to_onboarding(result.message or "Your agent is still being built.", retry=True)
        back_to_onboarding(result.message or "Failed to load your agent data. Please try again.", retry=True)
    st.session_state["agent_view"] = result.data

view: Dict[str, Any] = st.session_state["agent_view"]
record: Dict[str, Any] = view["record"]

st.title(f"👋 Hi {record.get('user_name') or 'there'}! I'm {AGENT_NAME}, your new AI sales agent.")
st.caption("I'm online 24/7 and ready to turn visitors into leads. Here's what I already know:")

col1, col2 = st.columns(2)
with col1:
    st.subheader("Here's what I understand about your business:")
    st.write(view["summary"])
    if view["differentiators"]:
        st.markdown(" ".join(f"`{d}`" for d in view["differentiators"]))

with col2:
    st.subheader("Who I'll focus on first:")
    st.write(view["narrative"])
    title, department = record.get("icp_title"), record.get("icp_department")
    if title or department:
        st.write(f"👤 {title}, {department}" if title and department else f"👤 {title or f'{department} team member'}")
    if record.get("icp_industries"):
        st.write(f"🏭 {record['icp_industries']}")
    if view["draft"].get("icp_geo") and record.get("icp_geo") and not any(
        marker in record["icp_geo"].lower() for marker in ("unknown", "various")
    ):
        st.write(f"📍 {record['icp_geo']}")
    if view["company_size"]:
        st.write(f"📊 {view['company_size']}")
    if (record.get("icp_motivations") or "").strip():
        st.write(f"🎯 {record['icp_motivations']}")
    if (record.get("icp_traits") or "").strip():
        st.write(f"💡 {record['icp_traits']}")

if view["has_rationale"]:
    with st.expander("✨ Why I made these choices"):
        for label, key in (
            ("Business", "rationale_business_description"),
            ("Ideal customer", "rationale_icp"),
            ("Differentiators", "rationale_diff"),
            ("Communication", "rationale_comms"),
        ):
            if record.get(key):
                st.markdown(f"**{label}:** {record[key]}")
        st.caption("This analysis was automatically generated based on your website, social media, and business information.")

st.divider()

if st.session_state.pop("close_editor", False):
    st.session_state["editor_open"] = False

if st.toggle("✏️ Edit my agent", key="editor_open"):
    options = st.session_state.setdefault("editor_options", fetch_options(api_url, api_token))
    draft = collect_draft(agent_id, view["draft"], options)

    preview = preview_narrative(api_url, api_token, draft)
    if preview.ok:
        st.info(preview.data["narrative"])

    if st.button("💾 Save Changes", type="primary"):
        with st.spinner("Saving..."):
            saved = save_agent(api_url, api_token, agent_id, draft)
        if saved.ok:
            st.session_state["agent_view"] = saved.data
            st.session_state["close_editor"] = True
            st.success("✅ Agent updated")
            st.rerun()
        else:
            st.error(f"❌ Could not save your changes: {saved.message or saved.reason}. Your edits are kept; try again.")

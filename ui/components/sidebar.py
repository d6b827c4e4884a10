"""Sidebar: global search, storage status and reset."""

from __future__ import annotations

import streamlit as st

from ui import api
from ui.components.common import safe_fetch, submit


def render() -> None:
    """Render the shared sidebar."""
    with st.sidebar:
        st.header("🧠 MindScribe")

        query = st.text_input("Search everything", key="global_search")
        if query:
            _render_results(query)

        st.divider()
        _render_storage()


def _render_results(query: str) -> None:
    results = safe_fetch(api.search, None, query)
    if not results:
        return
    if results["tooShort"]:
        st.caption("Type at least 2 characters.")
        return
    if not results["notes"] and not results["tasks"]:
        st.caption("No matches.")
        return
    for note in results["notes"]:
        st.markdown(f"📝 {note['titleHtml']}", unsafe_allow_html=True)
    for task in results["tasks"]:
        st.markdown(f"✅ {task['titleHtml']}", unsafe_allow_html=True)


def _render_storage() -> None:
    st.subheader("Storage")
    health = safe_fetch(api.get_health, {})
    usage = safe_fetch(api.get_storage_usage, {})

    if health.get("status") == "degraded":
        st.warning(f"Last save failed: {health.get('last_storage_error')}")
    elif health:
        st.success(f"Healthy ({health.get('backend')})")

    if usage:
        st.caption(f"{usage['usedMb']} MB used")
        if usage.get("percent") is not None:
            st.progress(min(usage["percent"] / 100, 1.0))

    if st.button("Reset to sample data", use_container_width=True):
        st.session_state.confirm_reset = True
    if st.session_state.get("confirm_reset"):
        st.warning("This deletes everything you have saved.")
        col_yes, col_no = st.columns(2)
        if col_yes.button("Delete", type="primary"):
            st.session_state.confirm_reset = False
            if submit(api.reset_storage, success="Storage reset"):
                st.rerun()
        if col_no.button("Cancel"):
            st.session_state.confirm_reset = False
            st.rerun()

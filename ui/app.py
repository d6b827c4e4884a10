"""MindScribe — Streamlit interface.

Run with:
    streamlit run ui/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` imports resolve
# regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

st.set_page_config(
    page_title="MindScribe",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="expanded",
)

from ui.components import (  # noqa: E402
    bookmarks,
    calendar,
    dashboard,
    notes,
    sidebar,
    tasks,
)

# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

page = st.navigation(
    [
        st.Page(dashboard.render, title="Dashboard", icon="🏠", default=True, url_path="dashboard"),
        st.Page(notes.render, title="Notes", icon="📝", url_path="notes"),
        st.Page(tasks.render, title="Tasks", icon="✅", url_path="tasks"),
        st.Page(calendar.render, title="Calendar", icon="📅", url_path="calendar"),
        st.Page(bookmarks.render, title="Bookmarks", icon="🔖", url_path="bookmarks"),
    ]
)

# Sidebar is shared across all pages
sidebar.render()

# Render the selected page
page.run()

st.divider()
st.caption("MindScribe | Your notes, tasks and calendar in one place")

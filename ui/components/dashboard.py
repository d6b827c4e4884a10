"""Dashboard page: counters, recent notes, today's agenda and charts."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.express as px
import streamlit as st

from ui import api
from ui.components.common import badge, safe_fetch, submit

# Consistent color palette across all charts
_PRIORITY_COLORS: dict[str, str] = {
    "High": "#e74c3c",
    "Medium": "#f1c40f",
    "Low": "#2ecc71",
}

_CHART_LAYOUT: dict[str, Any] = {
    "paper_bgcolor": "rgba(0,0,0,0)",
    "plot_bgcolor": "rgba(0,0,0,0)",
    "font": {"size": 12},
    "margin": {"t": 30, "b": 50, "l": 60, "r": 20},
}


def render() -> None:
    """Render the dashboard."""
    st.title("🏠 Dashboard")

    data = safe_fetch(api.get_view, None, "dashboard")
    if not data:
        return

    _render_stats(data["stats"])
    st.divider()

    col_left, col_right = st.columns(2)
    with col_left:
        _render_recent_notes(data["recentNotes"])
    with col_right:
        _render_agenda(data["todayEvents"], data["weekEvents"], data["upcomingEvents"])

    st.divider()

    col_tasks, col_chart = st.columns([2, 1])
    with col_tasks:
        _render_tasks(data["tasks"])
    with col_chart:
        _render_priority_chart(data["tasks"])

    st.caption("Data refreshes on each page load.")


def _render_stats(stats: dict[str, int]) -> None:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Notes", stats.get("notes", 0))
    col2.metric("Pending Tasks", stats.get("pending", 0), delta=f"{stats.get('overdue', 0)} overdue", delta_color="inverse")
    col3.metric("Bookmarks", stats.get("bookmarks", 0))
    col4.metric("Projects", stats.get("projects", 0))


def _render_recent_notes(notes: list[dict[str, Any]]) -> None:
    st.subheader("Recent Notes")
    if not notes:
        st.info("No notes yet.")
        return
    for note in notes:
        with st.container(border=True):
            st.markdown(f"**{note['title']}**  {badge(note['category'], note['color'])}")
            st.caption(f"{note['excerpt']}  \n_{note['relativeTime']}_")


def _render_agenda(
    today: list[dict[str, Any]],
    week: list[dict[str, Any]],
    upcoming: list[dict[str, Any]],
) -> None:
    st.subheader("Today")
    st.caption(f"{len(week)} event(s) this week")
    if not today:
        st.info("Nothing scheduled today.")
    for event in today:
        st.markdown(f"- {badge(event['category'], event['color'])} **{event['title']}**")

    st.subheader("Upcoming")
    if not upcoming:
        st.caption("No upcoming events.")
        return
    df = pd.DataFrame(upcoming)
    df["start"] = pd.to_datetime(df["start"]).dt.strftime("%b %d %H:%M")
    st.dataframe(
        df[["start", "title", "category"]].rename(
            columns={"start": "When", "title": "Event", "category": "Category"}
        ),
        use_container_width=True,
        hide_index=True,
    )


def _render_tasks(tasks: list[dict[str, Any]]) -> None:
    st.subheader("Tasks")
    if not tasks:
        st.info("No tasks yet.")
        return
    for task in tasks:
        label = f"{task['title']}  {badge(task['priority'], task['color'])}"
        if task["overdue"]:
            label += "  :red[overdue]"
        checked = st.checkbox(label, value=task["completed"], key=f"dash_task_{task['id']}")
        if checked != task["completed"]:
            if submit(api.toggle_task, task["id"]):
                st.rerun()


def _render_priority_chart(tasks: list[dict[str, Any]]) -> None:
    """Donut chart of open tasks by priority."""
    st.subheader("Open by Priority")
    open_tasks = [t for t in tasks if not t["completed"]]
    if not open_tasks:
        st.info("All caught up.")
        return

    counts = pd.DataFrame(open_tasks)["priority"].value_counts()
    fig = px.pie(
        names=counts.index,
        values=counts.values,
        color=counts.index,
        color_discrete_map=_PRIORITY_COLORS,
        hole=0.4,
        height=300,
    )
    fig.update_traces(textinfo="label+value", textfont_size=13)
    fig.update_layout(**_CHART_LAYOUT, showlegend=False)
    st.plotly_chart(fig, use_container_width=True)

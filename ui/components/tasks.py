"""Tasks page: pending, overdue and completed lists with quick entry."""

from __future__ import annotations

from datetime import datetime, time
from typing import Any

import streamlit as st

from ui import api
from ui.components.common import badge, safe_fetch, submit

_PRIORITIES = ["Low", "Medium", "High"]


def render() -> None:
    """Render the tasks page."""
    st.title("✅ Tasks")

    query = st.text_input("Search tasks", placeholder="At least 2 characters")
    data = safe_fetch(api.get_view, None, "tasks", q=query or None)
    if not data:
        return

    _render_new_task()

    tab_pending, tab_overdue, tab_today, tab_done = st.tabs(
        [
            f"Pending ({len(data['pending'])})",
            f"Overdue ({len(data['overdue'])})",
            f"Due today ({len(data['dueToday'])})",
            f"Completed ({len(data['completed'])})",
        ]
    )
    with tab_pending:
        _render_list(data["pending"], "pending")
    with tab_overdue:
        _render_list(data["overdue"], "overdue")
    with tab_today:
        _render_list(data["dueToday"], "today")
    with tab_done:
        _render_list(data["completed"], "done")


def _render_new_task() -> None:
    with st.form("new_task", clear_on_submit=True):
        col_title, col_date, col_priority = st.columns([3, 1, 1])
        title = col_title.text_input("Task", max_chars=200)
        due = col_date.date_input("Due")
        priority = col_priority.selectbox("Priority", _PRIORITIES, index=1)
        if st.form_submit_button("Add task"):
            body = {
                "title": title,
                "dueDate": datetime.combine(due, time(23, 59)).astimezone().isoformat(),
                "priority": priority,
            }
            if submit(api.create, "tasks", body, success="Task added"):
                st.rerun()


def _render_list(tasks: list[dict[str, Any]], tab: str) -> None:
    if not tasks:
        st.caption("Nothing here.")
        return
    for task in tasks:
        col_check, col_due, col_delete = st.columns([6, 2, 1])
        with col_check:
            label = f"{task['title']}  {badge(task['priority'], task['color'])}"
            checked = st.checkbox(
                label, value=task["completed"], key=f"task_{tab}_{task['id']}"
            )
            if checked != task["completed"]:
                if submit(api.toggle_task, task["id"]):
                    st.rerun()
        with col_due:
            due = datetime.fromisoformat(task["dueDate"])
            st.caption(("⚠️ " if task["overdue"] else "") + due.strftime("%b %d"))
        with col_delete:
            if st.button("🗑️", key=f"del_task_{tab}_{task['id']}"):
                if submit(api.delete, "tasks", task["id"], success="Task deleted"):
                    st.rerun()

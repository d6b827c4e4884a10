"""Calendar page: month grid with navigation and event entry."""

from __future__ import annotations

from datetime import datetime, time
from typing import Any

import streamlit as st

from ui import api
from ui.components.common import badge, safe_fetch, submit

_WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
_CATEGORIES = ["Work", "Personal", "Meeting", "Appointment", "Other"]


def render() -> None:
    """Render the calendar page."""
    data = safe_fetch(api.get_calendar, None)
    if not data:
        return

    st.title(f"📅 {data['title']}")
    _render_navigation()
    _render_grid(data["calendar"]["weeks"])
    st.divider()

    col_today, col_new = st.columns(2)
    with col_today:
        st.subheader("Today's Events")
        if not data["todayEvents"]:
            st.info("Nothing scheduled today.")
        for event in data["todayEvents"]:
            _render_event(event)
    with col_new:
        _render_new_event(data["categories"])


def _render_navigation() -> None:
    col_prev, col_today, col_next = st.columns([1, 1, 1])
    if col_prev.button("◀ Previous", use_container_width=True):
        _go("previous")
    if col_today.button("Today", use_container_width=True):
        _go("today")
    if col_next.button("Next ▶", use_container_width=True):
        _go("next")


def _go(direction: str) -> None:
    if safe_fetch(api.move_calendar, None, direction):
        st.rerun()


def _render_grid(weeks: list[list[dict[str, Any]]]) -> None:
    header = st.columns(7)
    for col, name in zip(header, _WEEKDAYS):
        col.markdown(f"**{name}**")

    for week in weeks:
        cols = st.columns(7)
        for col, day in zip(cols, week):
            with col.container(border=True, height=110):
                number = str(day["day"])
                if day["isToday"]:
                    number = f":blue-background[**{number}**]"
                elif not day["isCurrentMonth"]:
                    number = f":gray[{number}]"
                st.markdown(number)
                for event in day["events"][:2]:
                    st.caption(event["title"])
                if len(day["events"]) > 2:
                    st.caption(f"+{len(day['events']) - 2} more")


def _render_event(event: dict[str, Any]) -> None:
    start = datetime.fromisoformat(event["start"]).astimezone()
    end = datetime.fromisoformat(event["end"]).astimezone()
    col_text, col_delete = st.columns([5, 1])
    col_text.markdown(
        f"{badge(event['category'], event['color'])} **{event['title']}**  \n"
        f"{start:%H:%M} – {end:%H:%M}"
    )
    if event["description"]:
        col_text.markdown(event["descriptionHtml"], unsafe_allow_html=True)
    if col_delete.button("🗑️", key=f"del_event_{event['id']}"):
        if submit(api.delete, "events", event["id"], success="Event deleted"):
            st.rerun()


def _render_new_event(categories: list[str]) -> None:
    st.subheader("New Event")
    with st.form("new_event", clear_on_submit=True):
        title = st.text_input("Title", max_chars=200)
        day = st.date_input("Date")
        col_start, col_end = st.columns(2)
        start = col_start.time_input("Start", value=time(9, 0))
        end = col_end.time_input("End", value=time(10, 0))
        category = st.selectbox("Category", categories or _CATEGORIES, index=1)
        description = st.text_area("Description")
        if st.form_submit_button("Add event"):
            body = {
                "title": title,
                "start": datetime.combine(day, start).astimezone().isoformat(),
                "end": datetime.combine(day, end).astimezone().isoformat(),
                "category": category,
                "description": description,
            }
            if submit(api.create, "events", body, success="Event added"):
                st.rerun()

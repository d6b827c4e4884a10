"""Notes page: filter, search, create, edit and delete notes."""

from __future__ import annotations

from typing import Any

import streamlit as st

from mindscribe.text import parse_tags
from ui import api
from ui.components.common import badge, safe_fetch, submit

_CATEGORIES = ["Research", "Meeting", "Personal", "Project", "Idea"]
_SORTS: dict[str, tuple[str, bool]] = {
    "Recently updated": ("updatedAt", False),
    "Oldest first": ("createdAt", True),
    "Title A-Z": ("title", True),
    "Title Z-A": ("title", False),
}


def render() -> None:
    """Render the notes page."""
    st.title("📝 Notes")

    col_query, col_category, col_sort = st.columns([2, 1, 1])
    query = col_query.text_input("Search notes", placeholder="At least 2 characters")
    category = col_category.selectbox("Category", ["All", *_CATEGORIES])
    sort_label = col_sort.selectbox("Sort", list(_SORTS))
    sort, ascending = _SORTS[sort_label]

    data = safe_fetch(
        api.get_view,
        None,
        "notes",
        q=query or None,
        category=category,
        tag=st.session_state.get("note_tag"),
        sort=sort,
        ascending=ascending,
    )
    if not data:
        return

    _render_tags(data["tags"])
    _render_new_note()
    st.divider()

    if not data["notes"]:
        st.info("No notes match these filters.")
    for note in data["notes"]:
        _render_note(note)


def _render_tags(tags: list[str]) -> None:
    if not tags:
        return
    current = st.session_state.get("note_tag")
    options = ["All", *tags]
    chosen = st.radio(
        "Tag",
        options,
        index=options.index(current) if current in options else 0,
        horizontal=True,
    )
    st.session_state.note_tag = None if chosen == "All" else chosen


def _render_new_note() -> None:
    with st.expander("➕ New note"):
        with st.form("new_note", clear_on_submit=True):
            title = st.text_input("Title", max_chars=200)
            category = st.selectbox("Category", _CATEGORIES, index=2)
            content = st.text_area("Content", height=150)
            tags = st.text_input("Tags", placeholder="comma, separated")
            if st.form_submit_button("Save note"):
                body = {
                    "title": title,
                    "category": category,
                    "content": content,
                    "tags": parse_tags(tags),
                }
                if submit(api.create, "notes", body, success="Note saved"):
                    st.rerun()


def _render_note(note: dict[str, Any]) -> None:
    with st.container(border=True):
        col_title, col_actions = st.columns([5, 1])
        with col_title:
            st.markdown(
                f"#### {note['titleHtml']}", unsafe_allow_html=True
            )
            tags = " ".join(f"`{t}`" for t in note["tags"])
            st.caption(f"{badge(note['category'], note['color'])} {tags} · {note['relativeTime']}")
        with col_actions:
            if st.button("🗑️", key=f"del_note_{note['id']}", help="Delete note"):
                if submit(api.delete, "notes", note["id"], success="Note deleted"):
                    st.rerun()

        st.markdown(note["contentHtml"], unsafe_allow_html=True)

        with st.expander("Edit"):
            with st.form(f"edit_note_{note['id']}"):
                title = st.text_input("Title", value=note["title"], max_chars=200)
                category = st.selectbox(
                    "Category", _CATEGORIES, index=_CATEGORIES.index(note["category"])
                )
                content = st.text_area("Content", value=note["content"], height=150)
                tags = st.text_input("Tags", value=", ".join(note["tags"]))
                if st.form_submit_button("Update"):
                    body = {
                        "title": title,
                        "category": category,
                        "content": content,
                        "tags": parse_tags(tags),
                    }
                    if submit(api.update, "notes", note["id"], body, success="Note updated"):
                        st.rerun()

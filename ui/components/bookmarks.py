"""Bookmarks page: saved links grouped by tag."""

from __future__ import annotations

import streamlit as st

from mindscribe.text import parse_tags
from ui import api
from ui.components.common import safe_fetch, submit


def render() -> None:
    """Render the bookmarks page."""
    st.title("🔖 Bookmarks")

    col_query, col_tag = st.columns([2, 1])
    query = col_query.text_input("Search bookmarks")
    tag = col_tag.text_input("Tag")

    data = safe_fetch(api.get_view, None, "bookmarks", q=query or None, tag=tag or None)
    if not data:
        return

    with st.expander("➕ New bookmark"):
        with st.form("new_bookmark", clear_on_submit=True):
            title = st.text_input("Title", max_chars=200)
            url = st.text_input("URL", placeholder="https://")
            tags = st.text_input("Tags", placeholder="comma, separated")
            description = st.text_area("Description")
            if st.form_submit_button("Save bookmark"):
                body = {
                    "title": title,
                    "url": url,
                    "tags": parse_tags(tags),
                    "description": description,
                }
                if submit(api.create, "bookmarks", body, success="Bookmark saved"):
                    st.rerun()

    if data["tags"]:
        st.caption("Tags: " + " ".join(f"`{t}`" for t in data["tags"]))

    if not data["bookmarks"]:
        st.info("No bookmarks yet.")
    for bookmark in data["bookmarks"]:
        col_link, col_delete = st.columns([6, 1])
        col_link.markdown(
            f"**[{bookmark['title']}]({bookmark['url']})** · {bookmark['domain']}"
        )
        if bookmark["description"]:
            col_link.markdown(bookmark["descriptionHtml"], unsafe_allow_html=True)
        if col_delete.button("🗑️", key=f"del_bookmark_{bookmark['id']}"):
            if submit(api.delete, "bookmarks", bookmark["id"], success="Bookmark deleted"):
                st.rerun()

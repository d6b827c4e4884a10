"""Text helpers used when building view models."""

from __future__ import annotations

import html
import re
from typing import Optional

_URL_RE = re.compile(r"(https?://[^\s<]+)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_HEADING_RES = [
    (re.compile(r"^### (.*?)$", re.MULTILINE), "h3"),
    (re.compile(r"^## (.*?)$", re.MULTILINE), "h2"),
    (re.compile(r"^# (.*?)$", re.MULTILINE), "h1"),
]
_LIST_ITEM_RE = re.compile(r"^[-•] (.*?)$", re.MULTILINE)

CATEGORY_COLORS: dict[str, str] = {
    "Research": "blue",
    "Meeting": "purple",
    "Personal": "green",
    "Project": "yellow",
    "Idea": "indigo",
    "Work": "blue",
    "Appointment": "red",
    "Other": "gray",
}

PRIORITY_COLORS: dict[str, str] = {"Low": "green", "Medium": "yellow", "High": "red"}


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, "gray")


def priority_color(priority: str) -> str:
    return PRIORITY_COLORS.get(priority, "gray")


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + suffix


def highlight(text: str, term: Optional[str]) -> str:
    """Escape ``text`` and wrap case-insensitive matches of ``term`` in a span.

    Matching runs on the raw text, so a term never lands inside an entity.
    """
    if not text:
        return ""
    if not term:
        return html.escape(text)
    parts: list[str] = []
    last = 0
    for match in re.finditer(re.escape(term), text, re.IGNORECASE):
        parts.append(html.escape(text[last : match.start()]))
        parts.append(f'<span class="search-highlight">{html.escape(match.group())}</span>')
        last = match.end()
    parts.append(html.escape(text[last:]))
    return "".join(parts)


def text_to_html(text: str) -> str:
    """Escape, turn newlines into <br> and bare URLs into links."""
    if not text:
        return ""
    escaped = html.escape(text, quote=False)
    linked = _URL_RE.sub(
        r'<a href="\1" target="_blank" rel="noopener noreferrer">\1</a>', escaped
    )
    return linked.replace("\n", "<br>")


def format_note(content: str) -> str:
    """Light markdown: headings, bold, italics and dash lists."""
    if not content:
        return ""
    out = html.escape(content, quote=False)
    for pattern, tag in _HEADING_RES:
        out = pattern.sub(rf"<{tag}>\1</{tag}>", out)
    out = _LIST_ITEM_RE.sub(r"<li>\1</li>", out)
    out = _BOLD_RE.sub(r"<strong>\1</strong>", out)
    out = _ITALIC_RE.sub(r"<em>\1</em>", out)
    out = out.replace("\n", "<br>")
    if "<li>" in out:
        out = f"<ul>{out}</ul>"
    return out


def parse_tags(raw: str) -> list[str]:
    """Split a comma-separated tag string."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]

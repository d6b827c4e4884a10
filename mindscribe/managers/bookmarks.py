"""Bookmarks collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlsplit

from mindscribe.managers.base import EntityManager
from mindscribe.models import Bookmark, BookmarkDraft, BookmarkPatch
from mindscribe.samples import SAMPLE_BOOKMARKS


def domain_of(url: str) -> str:
    """Host part of ``url`` without a leading ``www.``."""
    host = urlsplit(url if "//" in url else f"//{url}").hostname or ""
    return host.removeprefix("www.")


class BookmarksManager(EntityManager[Bookmark, BookmarkDraft, BookmarkPatch]):
    model = Bookmark
    draft_model = BookmarkDraft
    entity_name = "bookmark"
    collection = "bookmarks"
    default_title = "Untitled Bookmark"
    default_sort = ("created_at", False)

    def sample_data(self) -> list[dict[str, Any]]:
        return [dict(bookmark) for bookmark in SAMPLE_BOOKMARKS]

    def defaults(self, now: datetime) -> dict[str, Any]:
        return {"title": self.default_title, "url": "", "category": "Other"}

    def by_domain(self, host: Optional[str]) -> list[Bookmark]:
        if not host:
            return self.get_all()
        wanted = host.casefold().removeprefix("www.")
        return self._select(lambda b: domain_of(b.url).casefold() == wanted)

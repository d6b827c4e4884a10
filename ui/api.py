"""Thin HTTP client for the MindScribe API.

All functions return parsed JSON (dicts/lists) or raise on failure.
Uses requests (synchronous) since Streamlit reruns are synchronous.
"""

from __future__ import annotations

import os
from typing import Any, Optional

import requests

BASE_URL = os.getenv("MINDSCRIBE_API_URL", "http://localhost:8000")
_TIMEOUT = 10  # seconds


def _get(path: str, **params: Any) -> Any:
    query = {k: v for k, v in params.items() if v is not None}
    resp = requests.get(f"{BASE_URL}{path}", params=query, timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def _send(method: str, path: str, body: Optional[dict[str, Any]] = None) -> Any:
    resp = requests.request(method, f"{BASE_URL}{path}", json=body, timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


# --- Views ---


def get_view(name: str, **params: Any) -> dict[str, Any]:
    """GET /views/{name} — dashboard, notes, tasks, calendar or bookmarks."""
    return _get(f"/views/{name}", **params)


def get_calendar(month: Optional[int] = None, year: Optional[int] = None) -> dict[str, Any]:
    """GET /calendar — the requested month, or the one the cursor is on."""
    return _get("/calendar", month=month, year=year)


def move_calendar(direction: str) -> dict[str, Any]:
    """POST /calendar/{direction} — previous, next or today."""
    return _send("POST", f"/calendar/{direction}")


def search(query: str) -> dict[str, Any]:
    """GET /search — notes and tasks matching the query."""
    return _get("/search", q=query)


def get_health() -> dict[str, Any]:
    """GET /health — storage status and collection sizes."""
    return _get("/health")


def get_storage_usage() -> dict[str, Any]:
    """GET /storage/usage — approximate bytes stored."""
    return _get("/storage/usage")


def reset_storage() -> dict[str, Any]:
    """DELETE /storage — clear everything and reload the samples."""
    return _send("DELETE", "/storage")


# --- Collections ---


def create(collection: str, body: dict[str, Any]) -> dict[str, Any]:
    """POST /{collection} — create a note, task, event, bookmark or project."""
    return _send("POST", f"/{collection}", body)


def update(collection: str, entity_id: str, body: dict[str, Any]) -> dict[str, Any]:
    """PATCH /{collection}/{id} — change only the given fields."""
    return _send("PATCH", f"/{collection}/{entity_id}", body)


def delete(collection: str, entity_id: str) -> dict[str, Any]:
    """DELETE /{collection}/{id}."""
    return _send("DELETE", f"/{collection}/{entity_id}")


def toggle_task(task_id: str) -> dict[str, Any]:
    """POST /tasks/{id}/toggle — flip completion."""
    return _send("POST", f"/tasks/{task_id}/toggle")

"""Seed MindScribe with realistic data for screenshots.

Creates a handful of notes, tasks, events, bookmarks and projects through
the HTTP API, so the data ends up in whichever backend the server uses.
Requires the API to be running (python -m mindscribe.main).

Usage:
    python scripts/seed_data.py [--base-url http://localhost:8000] [--reset]
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta
from typing import Any

import requests

DEFAULT_BASE_URL = "http://localhost:8000"
TIMEOUT = 10


def _at(days: int, hour: int, minute: int = 0) -> str:
    """Local timestamp ``days`` from today at ``hour:minute``, as ISO 8601."""
    base = datetime.now().replace(hour=hour, minute=minute, second=0, microsecond=0)
    return (base + timedelta(days=days)).astimezone().isoformat()


def build_records() -> list[tuple[str, dict[str, Any], str]]:
    """Each entry: (collection, body, description)."""
    return [
        # --- Notes (3) ---
        (
            "notes",
            {
                "title": "Quarterly Planning",
                "category": "Meeting",
                "content": "# Q3 goals\n- Ship the calendar view\n- **Cut** page load time in half",
                "tags": ["planning", "q3"],
            },
            "Note — quarterly planning",
        ),
        (
            "notes",
            {
                "title": "Reading List",
                "category": "Research",
                "content": "Papers to read: *Attention Is All You Need*, ReAct, Toolformer.",
                "tags": ["reading", "papers"],
            },
            "Note — reading list",
        ),
        (
            "notes",
            {
                "title": "Side Project Ideas",
                "category": "Idea",
                "content": "A habit tracker that syncs with the calendar.",
                "tags": ["ideas"],
            },
            "Note — project ideas",
        ),
        # --- Tasks (3) ---
        (
            "tasks",
            {"title": "Send meeting recap", "dueDate": _at(0, 17), "priority": "High"},
            "Task — due today",
        ),
        (
            "tasks",
            {"title": "Renew passport", "dueDate": _at(-2, 12), "priority": "Medium"},
            "Task — overdue",
        ),
        (
            "tasks",
            {"title": "Plan weekend hike", "dueDate": _at(5, 9), "priority": "Low"},
            "Task — next week",
        ),
        # --- Events (3) ---
        (
            "events",
            {
                "title": "Design review",
                "start": _at(0, 14),
                "end": _at(0, 15),
                "category": "Work",
                "description": "Walk through the new dashboard.",
            },
            "Event — today",
        ),
        (
            "events",
            {
                "title": "Dentist",
                "start": _at(3, 10),
                "end": _at(3, 11),
                "category": "Appointment",
            },
            "Event — later this week",
        ),
        (
            "events",
            {
                "title": "Book club",
                "start": _at(9, 19),
                "end": _at(9, 21),
                "category": "Personal",
            },
            "Event — next month or so",
        ),
        # --- Bookmarks & projects ---
        (
            "bookmarks",
            {
                "title": "FastAPI docs",
                "url": "https://fastapi.tiangolo.com/",
                "tags": ["python", "docs"],
            },
            "Bookmark — FastAPI docs",
        ),
        (
            "projects",
            {"name": "Home Renovation", "description": "Kitchen first, then the garden."},
            "Project — home renovation",
        ),
    ]


def check_health(base_url: str) -> bool:
    """Verify the API is reachable."""
    try:
        resp = requests.get(f"{base_url}/health", timeout=TIMEOUT)
        return resp.status_code == 200
    except requests.RequestException as e:
        print(f"  Health check failed: {e}")
        return False


def main() -> None:
    """Create every seed record sequentially."""
    parser = argparse.ArgumentParser(description="Seed data for screenshots")
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"MindScribe API base URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear stored data (and reload the samples) before seeding",
    )
    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    print(f"\n  Seeding data via {base_url}")
    print("  " + "=" * 58)

    if not check_health(base_url):
        print("  FAIL: API is not reachable. Is `python -m mindscribe.main` running?")
        sys.exit(1)
    print("  OK: API is healthy.\n")

    if args.reset:
        requests.delete(f"{base_url}/storage", timeout=TIMEOUT).raise_for_status()
        print("  Storage reset.\n")

    records = build_records()
    created = 0
    for i, (collection, body, description) in enumerate(records, 1):
        try:
            resp = requests.post(f"{base_url}/{collection}", json=body, timeout=TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as e:
            print(f"  [{i}/{len(records)}] {description}: ERROR {e}")
            continue
        created += 1
        print(f"  [{i}/{len(records)}] {description}: {resp.json()['id']}")

    health = requests.get(f"{base_url}/health", timeout=TIMEOUT).json()
    print("  " + "=" * 58)
    print(f"  Done! {created}/{len(records)} records created.")
    print(f"  Collection sizes: {health['counts']}")
    print()
    print("    - Streamlit UI: http://localhost:8501")
    print("    - API Docs:     http://localhost:8000/docs")
    print()


if __name__ == "__main__":
    main()

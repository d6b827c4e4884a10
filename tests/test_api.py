"""HTTP tests for mindscribe.main using FastAPI's TestClient."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mindscribe.main import create_app, serve_static
from mindscribe.services import Services

from tests.conftest import FlakyBackend


@pytest.fixture()
def client(services: Services) -> TestClient:
    return TestClient(create_app(services))


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestNotesAPI:
    def test_list(self, client: TestClient) -> None:
        resp = client.get("/notes")
        assert resp.status_code == 200
        assert [n["id"] for n in resp.json()] == ["note1", "note2", "note4", "note3"]

    def test_list_filters(self, client: TestClient) -> None:
        assert [n["id"] for n in client.get("/notes", params={"category": "Meeting"}).json()] == [
            "note2"
        ]
        assert [n["id"] for n in client.get("/notes", params={"tag": "ui"}).json()] == ["note4"]
        assert [n["id"] for n in client.get("/notes", params={"q": "novels"}).json()] == ["note3"]

    def test_list_sorted_by_title(self, client: TestClient) -> None:
        resp = client.get("/notes", params={"sort": "title", "ascending": "true"})
        assert [n["id"] for n in resp.json()] == ["note3", "note4", "note2", "note1"]

    def test_create(self, client: TestClient) -> None:
        resp = client.post(
            "/notes", json={"title": "Groceries", "category": "Personal", "tags": ["home"]}
        )
        assert resp.status_code == 201
        note = resp.json()
        assert note["title"] == "Groceries"
        assert note["createdAt"] == note["updatedAt"] == "2023-11-14T12:00:00Z"
        assert client.get(f"/notes/{note['id']}").json() == note

    def test_create_requires_title(self, client: TestClient) -> None:
        resp = client.post("/notes", json={"title": "   ", "content": "x"})
        assert resp.status_code == 422
        assert len(client.get("/notes").json()) == 4

    def test_create_rejects_unknown_category(self, client: TestClient) -> None:
        assert client.post("/notes", json={"title": "T", "category": "Chores"}).status_code == 422

    def test_patch_is_partial(self, client: TestClient) -> None:
        resp = client.patch("/notes/note2", json={"content": "Rewritten"})
        assert resp.status_code == 200
        note = resp.json()
        assert note["content"] == "Rewritten"
        assert note["title"] == "Q2 Marketing Strategy"
        assert note["tags"] == ["Marketing"]

    def test_missing_note(self, client: TestClient) -> None:
        assert client.get("/notes/nope").status_code == 404
        assert client.patch("/notes/nope", json={"title": "x"}).status_code == 404
        assert client.delete("/notes/nope").status_code == 404

    def test_delete(self, client: TestClient) -> None:
        assert client.delete("/notes/note1").json() == {"deleted": "note1"}
        assert client.get("/notes/note1").status_code == 404


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TestTasksAPI:
    def test_default_order_is_due_date(self, client: TestClient) -> None:
        assert [t["id"] for t in client.get("/tasks").json()] == ["task3", "task1", "task2"]

    def test_status_filter(self, client: TestClient) -> None:
        assert [t["id"] for t in client.get("/tasks?status=completed").json()] == ["task3"]
        assert [t["id"] for t in client.get("/tasks?status=today").json()] == ["task1"]
        assert client.get("/tasks?status=overdue").json() == []
        assert client.get("/tasks?status=someday").status_code == 422

    def test_priority_descending(self, client: TestClient) -> None:
        resp = client.get("/tasks", params={"sort": "priority", "ascending": "false"})
        assert [t["priority"] for t in resp.json()] == ["High", "Medium", "Low"]

    def test_priority_filter(self, client: TestClient) -> None:
        assert [t["id"] for t in client.get("/tasks?priority=Low").json()] == ["task3"]

    def test_create_with_camel_case_due_date(self, client: TestClient) -> None:
        resp = client.post(
            "/tasks", json={"title": "File taxes", "dueDate": "2024-04-15T17:00:00Z"}
        )
        assert resp.status_code == 201
        task = resp.json()
        assert task["dueDate"] == "2024-04-15T17:00:00Z"
        assert task["priority"] == "Medium"
        assert task["completed"] is False

    def test_toggle(self, client: TestClient) -> None:
        assert client.post("/tasks/task1/toggle").json()["completed"] is True
        assert client.post("/tasks/task1/toggle").json()["completed"] is False
        assert client.post("/tasks/nope/toggle").status_code == 404

    def test_invalid_priority(self, client: TestClient) -> None:
        assert client.patch("/tasks/task1", json={"priority": "Urgent"}).status_code == 422


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEventsAPI:
    def test_by_date(self, client: TestClient) -> None:
        resp = client.get("/events", params={"date": "2023-11-14"})
        assert [e["id"] for e in resp.json()] == ["event1", "event2"]

    def test_by_month(self, client: TestClient) -> None:
        assert len(client.get("/events?month=10&year=2023").json()) == 4
        assert client.get("/events?month=11&year=2023").json() == []
        assert client.get("/events?month=12").status_code == 422

    def test_by_category(self, client: TestClient) -> None:
        resp = client.get("/events", params={"category": "Personal"})
        assert [e["id"] for e in resp.json()] == ["event3", "event4"]

    def test_create_rejects_backwards_window(self, client: TestClient) -> None:
        resp = client.post(
            "/events",
            json={
                "title": "Backwards",
                "start": "2024-01-01T10:00:00Z",
                "end": "2024-01-01T09:00:00Z",
            },
        )
        assert resp.status_code == 422
        assert len(client.get("/events").json()) == 4

    def test_create(self, client: TestClient) -> None:
        resp = client.post(
            "/events",
            json={
                "title": "Lunch",
                "start": "2023-11-20T12:00:00Z",
                "end": "2023-11-20T13:00:00Z",
                "category": "Meeting",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["updatedAt"] == "2023-11-14T12:00:00Z"

    def test_patch_checks_merged_window(self, client: TestClient) -> None:
        # event1 starts at 14:00; moving only the end before that is invalid
        resp = client.patch("/events/event1", json={"end": "2023-11-14T13:00:00Z"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "End time cannot be before start time"
        assert client.get("/events/event1").json()["end"] == "2023-11-14T15:30:00Z"

    def test_patch(self, client: TestClient) -> None:
        resp = client.patch("/events/event1", json={"end": "2023-11-14T16:00:00Z"})
        assert resp.status_code == 200
        assert resp.json()["start"] == "2023-11-14T14:00:00Z"


# ---------------------------------------------------------------------------
# Bookmarks & projects
# ---------------------------------------------------------------------------


class TestBookmarksAndProjects:
    def test_bookmark_lifecycle(self, client: TestClient) -> None:
        created = client.post(
            "/bookmarks",
            json={"title": "Python", "url": "https://www.python.org", "tags": ["lang"]},
        )
        assert created.status_code == 201
        bookmark_id = created.json()["id"]

        assert [b["id"] for b in client.get("/bookmarks?domain=python.org").json()] == [
            bookmark_id
        ]
        assert client.patch(f"/bookmarks/{bookmark_id}", json={"title": "Py"}).json()[
            "title"
        ] == "Py"
        assert client.delete(f"/bookmarks/{bookmark_id}").status_code == 200

    def test_bookmark_url_validated(self, client: TestClient) -> None:
        resp = client.post("/bookmarks", json={"title": "Bad", "url": "javascript:alert(1)"})
        assert resp.status_code == 422

    def test_projects_sorted_by_name(self, client: TestClient) -> None:
        client.post("/projects", json={"name": "Zeta"})
        client.post("/projects", json={"name": "alpha"})
        assert [p["name"] for p in client.get("/projects").json()] == ["alpha", "Zeta"]

    def test_project_requires_name(self, client: TestClient) -> None:
        assert client.post("/projects", json={"description": "x"}).status_code == 422


# ---------------------------------------------------------------------------
# Views, search, storage
# ---------------------------------------------------------------------------


class TestViewsAPI:
    def test_dashboard(self, client: TestClient) -> None:
        data = client.get("/views/dashboard").json()
        assert data["view"] == "dashboard"
        assert data["stats"]["notes"] == 4

    def test_unknown_view(self, client: TestClient) -> None:
        assert client.get("/views/settings").json()["view"] == "dashboard"

    def test_calendar_view(self, client: TestClient) -> None:
        data = client.get("/views/calendar?month=10&year=2023").json()
        assert data["title"] == "November 2023"

    def test_calendar_endpoint(self, client: TestClient) -> None:
        data = client.get("/calendar", params={"month": 0, "year": 2024}).json()
        assert data["previous"] == {"month": 11, "year": 2023}
        assert client.get("/calendar?month=-1").status_code == 422

    @pytest.mark.parametrize(
        "params",
        [{"month": 11, "year": 9999}, {"month": 0, "year": 1}, {"month": 0, "year": 0}],
    )
    def test_years_outside_date_range_rejected(
        self, client: TestClient, params: dict[str, int]
    ) -> None:
        assert client.get("/calendar", params=params).status_code == 422
        assert client.get("/views/calendar", params=params).status_code == 422
        assert client.get("/events", params=params).status_code == 422

    def test_events_date_outside_range_rejected(self, client: TestClient) -> None:
        assert client.get("/events", params={"date": "9999-12-31"}).status_code == 422

    def test_calendar_follows_cursor(self, client: TestClient) -> None:
        assert client.get("/calendar").json()["title"] == "November 2023"
        assert client.post("/calendar/next").json()["title"] == "December 2023"
        assert client.get("/calendar").json()["title"] == "December 2023"
        assert client.post("/calendar/today").json()["title"] == "November 2023"
        assert client.post("/calendar/sideways").status_code == 422

    def test_cursor_stops_at_last_supported_year(
        self, client: TestClient, services: Services
    ) -> None:
        services.cursor.set(11, 9998)
        response = client.post("/calendar/next")
        assert response.status_code == 422
        assert (services.cursor.month, services.cursor.year) == (11, 9998)

    def test_search(self, client: TestClient) -> None:
        assert client.get("/search?q=a").json()["tooShort"] is True
        data = client.get("/search?q=meeting").json()
        assert "note2" in [n["id"] for n in data["notes"]]
        assert [t["id"] for t in data["tasks"]] == ["task2"]


class TestStorageAPI:
    def test_usage(self, client: TestClient) -> None:
        data = client.get("/storage/usage").json()
        assert data["usedBytes"] > 0
        assert data["quotaMb"] == 5.0

    def test_reset_restores_samples(self, client: TestClient) -> None:
        client.post("/notes", json={"title": "Temporary"})
        client.delete("/tasks/task1")

        data = client.delete("/storage").json()
        assert data["cleared"] is True
        assert data["counts"]["notes"] == 4
        assert data["counts"]["tasks"] == 3

    def test_health(self, client: TestClient) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["backend"] == "FlakyBackend"
        assert data["counts"] == {
            "notes": 4,
            "tasks": 3,
            "events": 4,
            "bookmarks": 0,
            "projects": 0,
        }

    def test_failed_save_degrades_health(
        self, client: TestClient, backend: FlakyBackend
    ) -> None:
        backend.fail = True
        resp = client.post("/notes", json={"title": "Unsaved"})

        # The change is kept in memory even though it was not persisted
        assert resp.status_code == 201
        assert len(client.get("/notes").json()) == 5

        health = client.get("/health").json()
        assert health["status"] == "degraded"
        assert health["storage_failures"] == 1
        assert health["last_storage_error"].startswith("notes:")

    def test_reset_clears_degraded_state(
        self, client: TestClient, backend: FlakyBackend
    ) -> None:
        backend.fail = True
        client.post("/notes", json={"title": "Unsaved"})
        backend.fail = False
        client.delete("/storage")
        assert client.get("/health").json()["status"] == "healthy"

    def test_metrics(self, client: TestClient) -> None:
        client.get("/notes")
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "mindscribe_http_requests_total" in resp.text
        assert "mindscribe_storage_operations_total" in resp.text


# ---------------------------------------------------------------------------
# Static files
# ---------------------------------------------------------------------------


class TestStatic:
    def test_index(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")

    def test_missing_file_serves_404_page(self, client: TestClient) -> None:
        resp = client.get("/static/nope.css")
        assert resp.status_code == 404
        assert "Page not found" in resp.text

    def test_content_type_by_extension(self, tmp_path: Path) -> None:
        (tmp_path / "site.css").write_text("body {}", encoding="utf-8")
        (tmp_path / "blob.bin").write_bytes(b"\x00\x01")
        assert serve_static("site.css", root=tmp_path).headers["content-type"].startswith(
            "text/css"
        )
        assert (
            serve_static("blob.bin", root=tmp_path).headers["content-type"]
            == "application/octet-stream"
        )

    def test_path_traversal_is_not_found(self, tmp_path: Path) -> None:
        root = tmp_path / "static"
        root.mkdir()
        (tmp_path / "secret.txt").write_text("hidden", encoding="utf-8")
        resp = serve_static("../secret.txt", root=root)
        assert resp.status_code == 404
        assert b"hidden" not in resp.body

    def test_fallback_without_404_page(self, tmp_path: Path) -> None:
        resp = serve_static("missing.html", root=tmp_path)
        assert resp.status_code == 404
        assert resp.body == b"404 Not Found"

    def test_read_error_is_500(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "index.html").write_text("<h1>hi</h1>", encoding="utf-8")

        def denied(self: Path) -> bytes:
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", denied)
        resp = serve_static("index.html", root=tmp_path)
        assert resp.status_code == 500
        assert resp.body == b"Server Error: PermissionError"

"""FastAPI application for MindScribe.

Endpoints:
  GET/POST          /notes, /tasks, /events, /bookmarks, /projects
  GET/PATCH/DELETE  /<collection>/{id}
  POST              /tasks/{id}/toggle  — Flip a task's completion
  GET               /views/{name}       — dashboard, notes, tasks, calendar, bookmarks
  GET               /calendar           — Month grid (?month=0-11&year=)
  POST              /calendar/{direction} — previous, next or today
  GET               /search             — Notes and tasks matching ?q=
  GET               /storage/usage      — Approximate stored bytes
  DELETE            /storage            — Clear everything and re-seed
  GET               /health             — Storage status and collection sizes
  GET               /metrics            — Prometheus metrics
  GET               /, /static/{path}   — Static files
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Annotated, Any, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from mindscribe.calendar_grid import MAX_YEAR, MIN_YEAR
from mindscribe.config import settings
from mindscribe.metrics import HTTP_DURATION, HTTP_REQUESTS
from mindscribe.models import BookmarkPatch, EventPatch, NotePatch, ProjectPatch, TaskPatch
from mindscribe.schemas import (
    BookmarkCreate,
    EventCreate,
    NoteCreate,
    ProjectCreate,
    TaskCreate,
    check_event_window,
)
from mindscribe.services import Services, build_services

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".txt": "text/plain",
}

# Endpoints excluded from HTTP metrics
_METRICS_EXCLUDE = {"/metrics", "/openapi.json", "/docs", "/redoc"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Wrap each request with timing and counting."""
        if request.url.path in _METRICS_EXCLUDE:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Label by route template so ids don't explode cardinality
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_DURATION.labels(endpoint=endpoint).observe(elapsed)
        return response


def get_services(request: Request) -> Services:
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]
Month = Annotated[Optional[int], Query(ge=0, le=11)]
Year = Annotated[Optional[int], Query(ge=MIN_YEAR, le=MAX_YEAR)]


def _found(entity: Any, kind: str, entity_id: str) -> dict[str, Any]:
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{kind} {entity_id} not found")
    return entity.to_json()


def _deleted(ok: bool, kind: str, entity_id: str) -> dict[str, Any]:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{kind} {entity_id} not found")
    return {"deleted": entity_id}


def _matching(ordered: list[Any], *subsets: list[Any]) -> list[dict]:
    """Entities of ``ordered`` present in every subset, as JSON."""
    keep = {item.id for item in ordered}
    for subset in subsets:
        keep &= {item.id for item in subset}
    return [item.to_json() for item in ordered if item.id in keep]


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the API. Services are created from settings on startup if not given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: build services unless injected."""
        if getattr(app.state, "services", None) is None:
            logger.info("Loading collections (backend=%s)...", settings.storage_backend)
            app.state.services = build_services(settings)
        yield
        logger.info("MindScribe API shut down.")

    app = FastAPI(title="MindScribe", version="1.0.0", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Notes ---

    @app.get("/notes")
    def list_notes(
        svc: ServicesDep,
        q: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        sort: Optional[str] = None,
        ascending: Optional[bool] = None,
    ) -> list[dict[str, Any]]:
        """Notes, optionally searched, filtered and sorted."""
        with svc.lock:
            notes = svc.notes
            return _matching(
                notes.sort(sort, ascending),
                notes.search(q),
                notes.filter_by_category(category),
                notes.filter_by_tag(tag),
            )

    @app.post("/notes", status_code=201)
    def create_note(body: NoteCreate, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.notes.create(body).to_json()

    @app.get("/notes/{note_id}")
    def get_note(note_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.notes.get_by_id(note_id), "Note", note_id)

    @app.patch("/notes/{note_id}")
    def update_note(note_id: str, body: NotePatch, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.notes.update(note_id, body), "Note", note_id)

    @app.delete("/notes/{note_id}")
    def delete_note(note_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _deleted(svc.notes.delete(note_id), "Note", note_id)

    # --- Tasks ---

    @app.get("/tasks")
    def list_tasks(
        svc: ServicesDep,
        status: Literal["all", "pending", "completed", "overdue", "today"] = "all",
        priority: Optional[str] = None,
        q: Optional[str] = None,
        sort: Optional[str] = None,
        ascending: Optional[bool] = None,
    ) -> list[dict[str, Any]]:
        """Tasks by status bucket, priority and search query."""
        with svc.lock:
            tasks = svc.tasks
            bucket = {
                "all": tasks.get_all,
                "pending": tasks.pending,
                "completed": tasks.completed,
                "overdue": tasks.overdue,
                "today": tasks.due_today,
            }[status]()
            return _matching(
                tasks.sort(sort, ascending), bucket, tasks.by_priority(priority), tasks.search(q)
            )

    @app.post("/tasks", status_code=201)
    def create_task(body: TaskCreate, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.tasks.create(body).to_json()

    @app.get("/tasks/{task_id}")
    def get_task(task_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.tasks.get_by_id(task_id), "Task", task_id)

    @app.patch("/tasks/{task_id}")
    def update_task(task_id: str, body: TaskPatch, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.tasks.update(task_id, body), "Task", task_id)

    @app.post("/tasks/{task_id}/toggle")
    def toggle_task(task_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.tasks.toggle_completion(task_id), "Task", task_id)

    @app.delete("/tasks/{task_id}")
    def delete_task(task_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _deleted(svc.tasks.delete(task_id), "Task", task_id)

    # --- Events ---

    @app.get("/events")
    def list_events(
        svc: ServicesDep,
        on: Annotated[Optional[date], Query(alias="date")] = None,
        month: Month = None,
        year: Year = None,
        category: Optional[str] = None,
        q: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Events for a day or a month, optionally by category and query."""
        if on is not None and not MIN_YEAR <= on.year <= MAX_YEAR:
            raise HTTPException(
                status_code=422,
                detail=f"date must fall between years {MIN_YEAR} and {MAX_YEAR}",
            )
        with svc.lock:
            events = svc.events
            subsets = [events.by_category(category), events.search(q)]
            if on is not None:
                subsets.append(events.events_on_date(on))
            if month is not None:
                subsets.append(events.events_in_month(month, year or events.today().year))
            return _matching(events.sort(), *subsets)

    @app.post("/events", status_code=201)
    def create_event(body: EventCreate, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.events.create(body).to_json()

    @app.get("/events/{event_id}")
    def get_event(event_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.events.get_by_id(event_id), "Event", event_id)

    @app.patch("/events/{event_id}")
    def update_event(event_id: str, body: EventPatch, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            current = svc.events.get_by_id(event_id)
            if current is None:
                raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
            try:
                check_event_window(body.start or current.start, body.end or current.end)
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e)) from e
            return _found(svc.events.update(event_id, body), "Event", event_id)

    @app.delete("/events/{event_id}")
    def delete_event(event_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _deleted(svc.events.delete(event_id), "Event", event_id)

    # --- Bookmarks ---

    @app.get("/bookmarks")
    def list_bookmarks(
        svc: ServicesDep,
        q: Optional[str] = None,
        tag: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        with svc.lock:
            bookmarks = svc.bookmarks
            return _matching(
                bookmarks.sort(),
                bookmarks.search(q),
                bookmarks.filter_by_tag(tag),
                bookmarks.by_domain(domain),
            )

    @app.post("/bookmarks", status_code=201)
    def create_bookmark(body: BookmarkCreate, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.bookmarks.create(body).to_json()

    @app.get("/bookmarks/{bookmark_id}")
    def get_bookmark(bookmark_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.bookmarks.get_by_id(bookmark_id), "Bookmark", bookmark_id)

    @app.patch("/bookmarks/{bookmark_id}")
    def update_bookmark(
        bookmark_id: str, body: BookmarkPatch, svc: ServicesDep
    ) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.bookmarks.update(bookmark_id, body), "Bookmark", bookmark_id)

    @app.delete("/bookmarks/{bookmark_id}")
    def delete_bookmark(bookmark_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _deleted(svc.bookmarks.delete(bookmark_id), "Bookmark", bookmark_id)

    # --- Projects ---

    @app.get("/projects")
    def list_projects(svc: ServicesDep) -> list[dict[str, Any]]:
        with svc.lock:
            return [p.to_json() for p in svc.projects.sort()]

    @app.post("/projects", status_code=201)
    def create_project(body: ProjectCreate, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.projects.create(body).to_json()

    @app.patch("/projects/{project_id}")
    def update_project(
        project_id: str, body: ProjectPatch, svc: ServicesDep
    ) -> dict[str, Any]:
        with svc.lock:
            return _found(svc.projects.update(project_id, body), "Project", project_id)

    @app.delete("/projects/{project_id}")
    def delete_project(project_id: str, svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return _deleted(svc.projects.delete(project_id), "Project", project_id)

    # --- Views ---

    @app.get("/views/{name}")
    def render_view(
        name: str,
        svc: ServicesDep,
        q: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        sort: Optional[str] = None,
        ascending: Optional[bool] = None,
        month: Month = None,
        year: Year = None,
    ) -> dict[str, Any]:
        """Render a named view; unknown names give the dashboard."""
        params: dict[str, Any] = {
            "notes": {
                "category": category,
                "tag": tag,
                "query": q,
                "sort": sort,
                "ascending": ascending,
            },
            "tasks": {"query": q},
            "calendar": {"month": month, "year": year},
            "bookmarks": {"tag": tag, "query": q},
        }.get(name, {})
        with svc.lock:
            return svc.renderer.render(name, **params)

    @app.get("/calendar")
    def calendar(
        svc: ServicesDep,
        month: Month = None,
        year: Year = None,
    ) -> dict[str, Any]:
        """Month grid; without parameters, the month the cursor is on."""
        with svc.lock:
            cursor = svc.cursor
            return svc.renderer.calendar_view(
                month=cursor.month if month is None else month,
                year=cursor.year if year is None else year,
            )

    @app.post("/calendar/{direction}")
    def move_calendar(
        direction: Literal["previous", "next", "today"], svc: ServicesDep
    ) -> dict[str, Any]:
        """Step the calendar cursor and return the month it lands on."""
        with svc.lock:
            cursor = svc.cursor
            step = {"previous": cursor.previous, "next": cursor.next, "today": cursor.today}
            try:
                month, year = step[direction]()
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))
            return svc.renderer.calendar_view(month=month, year=year)

    @app.get("/search")
    def search(svc: ServicesDep, q: str = "") -> dict[str, Any]:
        with svc.lock:
            return svc.renderer.search(q)

    # --- Storage / health ---

    @app.get("/storage/usage")
    def storage_usage(svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return svc.renderer.storage_usage()

    @app.delete("/storage")
    def reset_storage(svc: ServicesDep) -> dict[str, Any]:
        """Clear every stored collection and reload the samples."""
        with svc.lock:
            cleared = svc.reset()
            return {"cleared": cleared, "counts": _counts(svc)}

    @app.get("/health")
    def health(svc: ServicesDep) -> dict[str, Any]:
        with svc.lock:
            return {
                "status": "degraded" if svc.health.degraded else "healthy",
                "backend": type(svc.storage.backend).__name__,
                "counts": _counts(svc),
                "storage_failures": svc.health.failures,
                "last_storage_error": svc.health.last_error,
            }

    @app.get("/metrics")
    def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # --- Static files ---

    @app.get("/", include_in_schema=False)
    def index() -> Response:
        return serve_static("index.html")

    @app.get("/static/{path:path}", include_in_schema=False)
    def static_file(path: str) -> Response:
        return serve_static(path)

    return app


def _counts(svc: Services) -> dict[str, int]:
    return {manager.collection: manager.count for manager in svc.managers}


def serve_static(relative: str, root: Path = STATIC_DIR) -> Response:
    """Serve a file under ``root`` with a content type chosen by extension."""
    base = root.resolve()
    target = (base / relative).resolve()
    if not target.is_relative_to(base) or not target.is_file():
        return _not_found(base)
    try:
        content = target.read_bytes()
    except OSError as e:
        logger.error("Failed to read %s: %s", target, e)
        return Response(f"Server Error: {type(e).__name__}", status_code=500)
    media_type = MIME_TYPES.get(target.suffix.lower(), "application/octet-stream")
    return Response(content=content, media_type=media_type)


def _not_found(base: Path) -> Response:
    page = base / "404.html"
    try:
        body = page.read_bytes()
    except OSError:
        body = b"404 Not Found"
    return Response(content=body, status_code=404, media_type="text/html")


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

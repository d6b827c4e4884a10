"""Projects collection (dashboard counter and grouping)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mindscribe.managers.base import EntityManager
from mindscribe.models import Project, ProjectDraft, ProjectPatch
from mindscribe.samples import SAMPLE_PROJECTS


class ProjectsManager(EntityManager[Project, ProjectDraft, ProjectPatch]):
    model = Project
    draft_model = ProjectDraft
    entity_name = "project"
    collection = "projects"
    title_field = "name"
    default_title = "Untitled Project"
    default_sort = ("name", True)

    def sample_data(self) -> list[dict[str, Any]]:
        return [dict(project) for project in SAMPLE_PROJECTS]

    def defaults(self, now: datetime) -> dict[str, Any]:
        return {"name": self.default_title}

"""Tasks collection with due-date and completion views."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from mindscribe.dates import day_window
from mindscribe.managers.base import EntityManager
from mindscribe.models import PRIORITIES, Task, TaskDraft, TaskPatch
from mindscribe.samples import SAMPLE_TASKS

logger = logging.getLogger(__name__)


class TasksManager(EntityManager[Task, TaskDraft, TaskPatch]):
    model = Task
    draft_model = TaskDraft
    entity_name = "task"
    collection = "tasks"
    default_title = "Untitled Task"
    default_sort = ("due_date", True)

    priorities = PRIORITIES

    def sample_data(self) -> list[dict[str, Any]]:
        return [dict(task) for task in SAMPLE_TASKS]

    def defaults(self, now: datetime) -> dict[str, Any]:
        return {
            "title": self.default_title,
            "due_date": now,
            "priority": "Medium",
            "completed": False,
        }

    def pending(self) -> list[Task]:
        return self._select(lambda t: not t.completed)

    def completed(self) -> list[Task]:
        return self._select(lambda t: t.completed)

    def overdue(self) -> list[Task]:
        """Open tasks whose due date is already in the past."""
        now = self.now()
        return self._select(lambda t: not t.completed and t.due_date < now)

    def due_today(self) -> list[Task]:
        """Open tasks due within today's local calendar day."""
        start, end = day_window(self.today(), self.tz)
        return self._select(lambda t: not t.completed and start <= t.due_date < end)

    def by_priority(self, priority: Optional[str]) -> list[Task]:
        if not priority:
            return self.get_all()
        wanted = priority.casefold()
        return self._select(lambda t: t.priority.casefold() == wanted)

    def toggle_completion(self, task_id: str) -> Optional[Task]:
        """Flip ``completed``. None if the id is unknown."""
        task = self.get_by_id(task_id)
        if task is None:
            return None
        return self.update(task_id, TaskPatch(completed=not task.completed))

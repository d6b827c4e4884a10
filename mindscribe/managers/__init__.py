"""Entity managers, one per stored collection."""

from mindscribe.managers.base import EntityManager, merge_patch
from mindscribe.managers.bookmarks import BookmarksManager
from mindscribe.managers.events import EventsManager
from mindscribe.managers.notes import NotesManager
from mindscribe.managers.projects import ProjectsManager
from mindscribe.managers.tasks import TasksManager

__all__ = [
    "BookmarksManager",
    "EntityManager",
    "EventsManager",
    "NotesManager",
    "ProjectsManager",
    "TasksManager",
    "merge_patch",
]

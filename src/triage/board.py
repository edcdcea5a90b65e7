"""
Board State
===========

Client-side view of every list and its tasks. Reordering is applied to the
view before the remote call returns and is rolled back to the previous view
if the call fails, so the visible order never silently diverges from the
remote one.
"""

from __future__ import annotations

import dataclasses
import threading

import structlog

from .engine import TriageEngine
from .errors import ReorderFailure
from .models import Task, TaskListWithTasks

log = structlog.get_logger(__name__)


def compute_reorder(
    tasks: list[Task], task_id: str, over_task_id: str
) -> tuple[list[Task], str | None] | None:
    """
    Move ``task_id`` to the index currently held by ``over_task_id``.

    Returns the new order and the id of the task that now precedes the moved
    one (None when it lands first), or None when nothing changes.
    """
    ids = [task.id for task in tasks]
    if task_id not in ids or over_task_id not in ids:
        return None
    old_index = ids.index(task_id)
    new_index = ids.index(over_task_id)
    if old_index == new_index:
        return None

    reordered = list(tasks)
    reordered.insert(new_index, reordered.pop(old_index))
    previous_id = reordered[new_index - 1].id if new_index > 0 else None
    return reordered, previous_id


class Board:
    """Holds the visible lists and applies optimistic reorders."""

    def __init__(self, engine: TriageEngine, tasklists: list[TaskListWithTasks]):
        self.engine = engine
        self._lock = threading.RLock()
        self._tasklists = list(tasklists)

    @classmethod
    def load(cls, engine: TriageEngine) -> Board:
        return cls(engine, engine.fetch_tasklists_with_tasks())

    @property
    def tasklists(self) -> list[TaskListWithTasks]:
        with self._lock:
            return list(self._tasklists)

    def tasks_in(self, list_id: str) -> list[Task]:
        with self._lock:
            for tasklist in self._tasklists:
                if tasklist.id == list_id:
                    return list(tasklist.tasks)
        return []

    def reorder(self, list_id: str, task_id: str, over_task_id: str) -> list[Task]:
        """
        Drop ``task_id`` onto ``over_task_id`` within one list.

        Raises:
            ReorderFailure: if the remote reposition failed; the view has
                already been restored to its state before the call.
        """
        with self._lock:
            rollback = [
                dataclasses.replace(tasklist, tasks=list(tasklist.tasks))
                for tasklist in self._tasklists
            ]
            previous_id = None
            changed = False
            updated = []
            for tasklist in self._tasklists:
                if tasklist.id == list_id:
                    outcome = compute_reorder(tasklist.tasks, task_id, over_task_id)
                    if outcome is not None:
                        reordered, previous_id = outcome
                        tasklist = dataclasses.replace(tasklist, tasks=reordered)
                        changed = True
                updated.append(tasklist)

            if not changed:
                return self.tasks_in(list_id)
            self._tasklists = updated

        try:
            self.engine.reorder_task(list_id, task_id, previous_id)
        except Exception as e:
            log.exception("Failed to reorder task; restoring order", list_id=list_id, task_id=task_id)
            with self._lock:
                self._tasklists = rollback
            raise ReorderFailure(f"Failed to reorder task {task_id}: {e}") from e

        return self.tasks_in(list_id)

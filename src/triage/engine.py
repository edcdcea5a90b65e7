"""
Triage Engine
=============

This module defines the TriageEngine, which reconciles the routing catalog
against the live remote lists and performs the bulk operations: inbox sync,
explicit moves, archiving, quick add and reordering.

Every operation starts from a fresh credential check and a fresh list
resolution; nothing is cached between calls. Remote calls are issued one at
a time.

Moves are insert-then-delete with no transaction. A failure between the two
calls leaves the item in both lists, never in neither. A failure while
handling one item is logged and the loop moves on to the next item.
"""

from __future__ import annotations

import threading
from typing import Iterable

import structlog

from common.config import Settings
from common.tasks_client import TasksClient

from .catalog import build_routing_catalog
from .dates import normalize_completed, normalize_due_date
from .errors import ItemOperationFailure, ResolutionFailure
from .intent import describe_intent, parse_task_intent
from .models import (
    DEFAULT_KEY,
    ROUTING_KEYS,
    STATUS_COMPLETED,
    STATUS_NEEDS_ACTION,
    MoveResult,
    ParsedIntent,
    ResolvedListMap,
    RoutingKey,
    RoutingRule,
    SnapshotResult,
    SyncResult,
    Task,
    TaskListSummary,
    TaskListWithTasks,
)
from .projection import project_tasks
from .resolver import find_default_list, resolve_list_map, summarize_lists

log = structlog.get_logger(__name__)


def _join_notes(*parts: str | None) -> str:
    return "\n".join(part for part in parts if part)


def build_insert_body(
    *,
    title: str,
    notes: str | None,
    status: str | None,
    due: str | None,
    completed: str | None,
) -> dict:
    """Build the insert payload, normalizing dates and stamping completion."""
    status = STATUS_COMPLETED if status == STATUS_COMPLETED else STATUS_NEEDS_ACTION
    body = {
        "title": title,
        "notes": notes or None,
        "status": status,
        "due": normalize_due_date(due),
    }
    if status == STATUS_COMPLETED:
        body["completed"] = normalize_completed(completed)
    return body


class TriageEngine:
    """
    Orchestrates triage operations against the remote task-list service.
    """

    def __init__(
        self,
        client: TasksClient,
        settings: Settings,
        catalog: Iterable[RoutingRule] | None = None,
    ):
        self.client = client
        self.settings = settings
        self.catalog = tuple(catalog) if catalog is not None else build_routing_catalog(settings)

    # --- resolution -------------------------------------------------------

    def _fetch_lists(self) -> list[TaskListSummary]:
        return summarize_lists(self.client.list_tasklists())

    def resolve(self, lists: list[TaskListSummary] | None = None) -> ResolvedListMap:
        """Resolve the routing map from the complete current listing."""
        if lists is None:
            lists = self._fetch_lists()
        return resolve_list_map(lists, self.catalog, self.settings.DEFAULT_TASKLIST_ID)

    def _prepare(self) -> tuple[list[TaskListSummary], ResolvedListMap]:
        self.client.ensure_authorized()
        lists = self._fetch_lists()
        return lists, self.resolve(lists)

    def _is_cancelled(self, cancel: threading.Event | None) -> bool:
        return cancel is not None and cancel.is_set()

    # --- inbox sync -------------------------------------------------------

    def sync_default_list(self, cancel: threading.Event | None = None) -> SyncResult:
        """
        Route every item of the default list to the list its title points at.

        Items whose destination is unresolved or is the default list itself
        are inspected but left in place.
        """
        _, resolved = self._prepare()
        default_id = resolved[DEFAULT_KEY]
        items = self.client.list_tasks(default_id)

        moved = 0
        inspected = 0
        for item in items:
            if self._is_cancelled(cancel):
                log.warning("Sync cancelled", moved=moved, inspected=inspected)
                break
            inspected += 1

            task_id = item.get("id")
            title = item.get("title")
            if not task_id or not title:
                continue

            intent = parse_task_intent(title, self.catalog)
            destination_id = resolved.get(intent.target_list)
            if not destination_id or destination_id == default_id:
                continue

            try:
                self._move_inbox_item(item, intent, default_id, destination_id)
            except ItemOperationFailure:
                log.exception(
                    "Failed to move task; leaving it in place",
                    task_id=task_id,
                    source_list_id=default_id,
                    destination_list_id=destination_id,
                )
                continue
            moved += 1

        log.info("Default list synced", moved=moved, inspected=inspected)
        return SyncResult(moved=moved, inspected=inspected)

    def _move_inbox_item(
        self,
        item: dict,
        intent: ParsedIntent,
        source_id: str,
        destination_id: str,
    ) -> None:
        body = build_insert_body(
            title=item["title"],
            notes=_join_notes(item.get("notes"), describe_intent(intent)),
            status=item.get("status"),
            due=item.get("due"),
            completed=item.get("completed"),
        )
        self._insert_then_delete(item["id"], body, source_id, destination_id)

    def _insert_then_delete(
        self, task_id: str, body: dict, source_id: str, destination_id: str
    ) -> None:
        try:
            self.client.insert_task(destination_id, body)
        except Exception as e:
            raise ItemOperationFailure(task_id, f"insert failed: {e}") from e
        try:
            self.client.delete_task(source_id, task_id)
        except Exception as e:
            raise ItemOperationFailure(
                task_id, f"inserted into {destination_id} but delete failed: {e}"
            ) from e

    # --- explicit move ----------------------------------------------------

    def move_tasks_to_list(
        self,
        destination_list_id: str,
        tasks: Iterable[Task],
        cancel: threading.Event | None = None,
    ) -> MoveResult:
        """
        Move the selected tasks into a destination the caller chose.

        Raises:
            ResolutionFailure: if the destination is not a current remote list.
        """
        lists, _ = self._prepare()
        if not any(remote.id == destination_list_id for remote in lists):
            raise ResolutionFailure(f"Destination list {destination_list_id!r} not found")

        moved = 0
        for task in tasks:
            if self._is_cancelled(cancel):
                log.warning("Move cancelled", moved=moved)
                break
            if not task.id or not task.list_id:
                continue

            body = build_insert_body(
                title=task.title,
                notes=task.notes,
                status=task.status,
                due=task.due,
                completed=task.completed,
            )
            try:
                self._insert_then_delete(task.id, body, task.list_id, destination_list_id)
            except ItemOperationFailure:
                log.exception(
                    "Failed to move task; leaving it in place",
                    task_id=task.id,
                    source_list_id=task.list_id,
                    destination_list_id=destination_list_id,
                )
                continue
            moved += 1

        log.info("Moved tasks", moved=moved, destination_list_id=destination_list_id)
        return MoveResult(moved=moved)

    # --- archive ----------------------------------------------------------

    def bulk_archive_completed(self) -> int:
        """Clear completed items in every resolved list; returns lists cleared."""
        _, resolved = self._prepare()

        keys: list[RoutingKey] = [rule.key for rule in self.catalog] + [DEFAULT_KEY]
        cleared: list[str] = []
        for key in keys:
            list_id = resolved.get(key)
            if not list_id:
                log.debug("Routing key unresolved; skipping archive", key=key)
                continue
            if list_id in cleared:
                continue
            self.client.clear_completed(list_id)
            cleared.append(list_id)

        log.info("Archived completed tasks", lists_cleared=len(cleared))
        return len(cleared)

    def clear_completed_in_list(self, list_id: str) -> None:
        """Clear completed items in a single list."""
        self.client.ensure_authorized()
        self.client.clear_completed(list_id)
        log.info("Cleared completed tasks", list_id=list_id)

    # --- quick add --------------------------------------------------------

    def quick_add_task(
        self,
        title: str,
        notes: str | None = None,
        list_key: RoutingKey | None = None,
    ) -> dict:
        """
        Create an item, routed by its title unless ``list_key`` is given.
        Falls back to the default list when the key is unresolved.
        """
        if list_key is not None and list_key not in ROUTING_KEYS:
            raise ValueError(f"Unknown routing key: {list_key!r}")
        _, resolved = self._prepare()
        intent = parse_task_intent(title, self.catalog)
        target_key = list_key or intent.target_list
        target_id = resolved.get(target_key) or resolved[DEFAULT_KEY]

        audit = describe_intent(ParsedIntent(target_list=target_key, urgency=intent.urgency))
        created = self.client.insert_task(
            target_id,
            {
                "title": title,
                "notes": _join_notes(notes, audit),
                "status": STATUS_NEEDS_ACTION,
            },
        )
        log.info("Quick-added task", list_id=target_id, target_list=target_key)
        return created

    # --- reorder ----------------------------------------------------------

    def reorder_task(
        self, list_id: str, task_id: str, previous_task_id: str | None = None
    ) -> None:
        """
        Reposition a task after ``previous_task_id``, or first when None.
        Exactly one remote call is issued after resolution.
        """
        self._prepare()
        self.client.move_task(list_id, task_id, previous_task_id)
        log.info(
            "Reordered task",
            list_id=list_id,
            task_id=task_id,
            previous_task_id=previous_task_id,
        )

    # --- read-only views --------------------------------------------------

    def fetch_tasklists_with_tasks(self) -> list[TaskListWithTasks]:
        """Every remote list with its projected tasks."""
        self.client.ensure_authorized()
        lists = self._fetch_lists()
        default_id = find_default_list(lists, self.settings.DEFAULT_TASKLIST_ID)

        result = []
        for remote in lists:
            items = self.client.list_tasks(remote.id)
            result.append(
                TaskListWithTasks(
                    id=remote.id,
                    title=remote.title,
                    is_default=remote.id == default_id,
                    tasks=project_tasks(items, remote.id, self.catalog),
                )
            )
        return result

    def fetch_default_task_snapshot(self, limit: int | None = None) -> SnapshotResult:
        """
        A short preview of the default list. Failures become an empty result
        with a message instead of an exception.
        """
        if limit is None:
            limit = self.settings.SNAPSHOT_LIMIT
        if limit < 0:
            raise ValueError("limit must be non-negative")
        if limit == 0:
            return SnapshotResult(tasks=[])
        try:
            _, resolved = self._prepare()
            default_id = resolved[DEFAULT_KEY]
            items = self.client.list_tasks(
                default_id, max_results=limit, show_completed=True, show_hidden=False
            )
            tasks = project_tasks(items, default_id, self.catalog)[:limit]
        except Exception as e:
            log.warning("Failed to load default list snapshot", error=str(e))
            return SnapshotResult(tasks=[], error=f"Unable to load tasks: {e}")
        return SnapshotResult(tasks=tasks)

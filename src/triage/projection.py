"""
Task Projection
===============

Shapes raw remote items into `Task` values enriched with the derived
classification. Records missing an id or a title are partial and dropped.
"""

from __future__ import annotations

from typing import Iterable

from .intent import parse_task_intent
from .models import STATUS_COMPLETED, STATUS_NEEDS_ACTION, RoutingRule, Task, TaskListWithTasks

FOCUS_MARKER = "🔥"


def project_tasks(
    items: Iterable[dict],
    list_id: str,
    catalog: Iterable[RoutingRule],
) -> list[Task]:
    """Project remote items of one list into tasks."""
    catalog = tuple(catalog)
    tasks = []
    for item in items:
        task_id = item.get("id")
        title = item.get("title")
        if not task_id or not title:
            continue
        intent = parse_task_intent(title, catalog)
        status = item.get("status")
        tasks.append(
            Task(
                id=task_id,
                title=title,
                list_id=list_id,
                target_list=intent.target_list,
                urgency=intent.urgency,
                status=STATUS_COMPLETED if status == STATUS_COMPLETED else STATUS_NEEDS_ACTION,
                notes=item.get("notes") or None,
                due=item.get("due") or None,
                updated=item.get("updated") or None,
                completed=item.get("completed") or None,
                position=item.get("position") or None,
            )
        )
    return tasks


def focus_tasks(tasklists: Iterable[TaskListWithTasks]) -> list[tuple[Task, str]]:
    """Open tasks flagged with the focus marker, paired with their list title."""
    return [
        (task, tasklist.title)
        for tasklist in tasklists
        for task in tasklist.tasks
        if task.status != STATUS_COMPLETED and FOCUS_MARKER in task.title
    ]

"""
Domain types shared by the classifier, resolver, engine and projections.

Remote records stay plain dicts (as returned by the API client) until they
are projected into `Task` values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal, Union

RoutingKey = Literal["default", "family", "home_improvement", "home_maintenance", "square"]
UrgencyLevel = Literal["high", "medium", "low"]
TaskStatus = Literal["needsAction", "completed"]

DEFAULT_KEY: RoutingKey = "default"
ROUTING_KEYS: tuple[RoutingKey, ...] = (
    "default",
    "family",
    "home_improvement",
    "home_maintenance",
    "square",
)

STATUS_NEEDS_ACTION: TaskStatus = "needsAction"
STATUS_COMPLETED: TaskStatus = "completed"

Matcher = Union[str, re.Pattern]

# Maps each routing key to the concrete remote list id it resolved to.
ResolvedListMap = dict[str, str]


@dataclass(frozen=True)
class RoutingRule:
    key: RoutingKey
    label: str
    tasklist_id: str | None
    matchers: tuple[Matcher, ...]


@dataclass(frozen=True)
class ParsedIntent:
    target_list: RoutingKey
    urgency: UrgencyLevel


@dataclass(frozen=True)
class Task:
    """A remote item enriched with its derived classification."""

    id: str
    title: str
    list_id: str
    target_list: RoutingKey
    urgency: UrgencyLevel
    status: TaskStatus = STATUS_NEEDS_ACTION
    notes: str | None = None
    due: str | None = None
    updated: str | None = None
    completed: str | None = None
    position: str | None = None


@dataclass(frozen=True)
class TaskListSummary:
    id: str
    title: str
    is_default: bool = False


@dataclass(frozen=True)
class TaskListWithTasks:
    id: str
    title: str
    is_default: bool = False
    tasks: list[Task] = field(default_factory=list)


@dataclass(frozen=True)
class SyncResult:
    moved: int
    inspected: int


@dataclass(frozen=True)
class MoveResult:
    moved: int


@dataclass(frozen=True)
class SnapshotResult:
    tasks: list[Task]
    error: str | None = None

"""
List Resolution
===============

Binds routing keys to concrete remote list ids using the live listing. The
map is rebuilt for every top-level operation because lists can be created,
renamed or deleted remotely at any time.

Matching for a rule: the configured id equals the remote id, or the rule
label equals the remote title (case-insensitive). The first remote list in
listing order wins. A rule whose configured id is stale falls through to the
label match; that is accepted best-effort behaviour.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from .catalog import DEFAULT_LIST_SENTINEL, DEFAULT_LIST_TITLE
from .errors import ResolutionFailure
from .models import DEFAULT_KEY, ResolvedListMap, RoutingRule, TaskListSummary

log = structlog.get_logger(__name__)


def _normalize_title(value: str) -> str:
    return " ".join(value.lower().split())


def summarize_lists(items: Iterable[dict]) -> list[TaskListSummary]:
    """Convert raw remote list resources, dropping entries without an id."""
    summaries = []
    for item in items:
        list_id = item.get("id")
        if not list_id:
            continue
        summaries.append(TaskListSummary(id=list_id, title=item.get("title") or ""))
    return summaries


def _find_rule_list(rule: RoutingRule, lists: list[TaskListSummary]) -> str | None:
    label = _normalize_title(rule.label)
    # A label match on an earlier list beats an id match on a later one.
    for remote in lists:
        if rule.tasklist_id and remote.id == rule.tasklist_id:
            return remote.id
        if _normalize_title(remote.title) == label:
            return remote.id
    return None


def find_default_list(lists: list[TaskListSummary], default_list_id: str) -> str | None:
    """
    Return the id of the default list, or None.

    Accepted identities: the configured default id, the ``@default``
    sentinel, or the title "My Tasks" (case-insensitive).
    """
    for remote in lists:
        if remote.id in (default_list_id, DEFAULT_LIST_SENTINEL):
            return remote.id
        if _normalize_title(remote.title) == DEFAULT_LIST_TITLE:
            return remote.id
    return None


def resolve_list_map(
    lists: list[TaskListSummary],
    catalog: Iterable[RoutingRule],
    default_list_id: str,
) -> ResolvedListMap:
    """
    Build the routing key to list id map for one operation.

    Keys without a matching remote list are left out of the map.

    Raises:
        ResolutionFailure: if the default list cannot be found.
    """
    resolved: ResolvedListMap = {}
    for rule in catalog:
        list_id = _find_rule_list(rule, lists)
        if list_id is None:
            log.debug("No remote list for routing key", key=rule.key, label=rule.label)
            continue
        resolved[rule.key] = list_id

    default_id = find_default_list(lists, default_list_id)
    if default_id is None:
        raise ResolutionFailure(
            f"Default task list not found (configured id {default_list_id!r})"
        )
    resolved[DEFAULT_KEY] = default_id
    return resolved

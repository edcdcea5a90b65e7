"""
Triage domain package.

This package contains:

- the routing catalog and the rule-based intent classifier
- list resolution against the live remote lists
- the triage engine (sync, move, archive, quick add, reorder)
- task projections and the optimistic board view
- the long-running triage daemon entrypoint
"""

from .board import Board, compute_reorder
from .engine import TriageEngine
from .errors import (
    AuthenticationMissing,
    ItemOperationFailure,
    ReorderFailure,
    ResolutionFailure,
    TriageError,
)
from .intent import describe_intent, parse_task_intent
from .resolver import resolve_list_map

__all__ = [
    "AuthenticationMissing",
    "Board",
    "ItemOperationFailure",
    "ReorderFailure",
    "ResolutionFailure",
    "TriageEngine",
    "TriageError",
    "compute_reorder",
    "describe_intent",
    "parse_task_intent",
    "resolve_list_map",
]

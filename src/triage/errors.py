"""
Exception classes for the triage engine.
"""

from common.credentials import AuthenticationMissing


class TriageError(Exception):
    """Base exception for triage errors."""


class ResolutionFailure(TriageError):
    """Raised when a required list cannot be found among the remote lists."""


class ItemOperationFailure(TriageError):
    """Raised when a remote call fails while processing a single item."""

    def __init__(self, task_id: str, message: str):
        super().__init__(f"{task_id}: {message}")
        self.task_id = task_id


class ReorderFailure(TriageError):
    """Raised when a reposition call fails after the local order was changed."""


__all__ = [
    "AuthenticationMissing",
    "ItemOperationFailure",
    "ReorderFailure",
    "ResolutionFailure",
    "TriageError",
]

"""
Pytest configuration.

Why this exists:

The project uses a ``src/`` layout (package code lives in ``src/common`` and
``src/triage``). Normally, developers run tests after installing the package
(e.g. ``pip install -e .``).

On some macOS/Python 3.13 setups, editable installs in dot-prefixed virtualenv
folders (like ``.venv``) can result in the generated ``.pth`` file being marked
as hidden, and Python's ``site`` module will skip hidden ``.pth`` files. When
that happens, ``import triage`` fails even though the source tree is present.

This file makes tests robust in that scenario by adding ``src/`` to ``sys.path``
only when the package cannot be imported normally.
"""

from __future__ import annotations

import itertools
import os
import sys
from pathlib import Path

import pytest


def _ensure_src_on_path() -> None:
    try:
        import triage  # noqa: F401
        return
    except ModuleNotFoundError:
        pass

    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


_ensure_src_on_path()


class FakeTasksClient:
    """In-memory stand-in for TasksClient that records every mutation."""

    def __init__(self, lists, items=None, token="token"):
        self.lists = [dict(item) for item in lists]
        self.items = {list_id: [dict(i) for i in values] for list_id, values in (items or {}).items()}
        self.token = token
        self.calls = []
        self.fail_insert_titles = set()
        self.fail_delete_ids = set()
        self.fail_move = False
        self._ids = itertools.count(1000)

    def ensure_authorized(self):
        from common.credentials import AuthenticationMissing

        if not self.token:
            raise AuthenticationMissing("Not authenticated")

    def list_tasklists(self):
        self.calls.append(("list_tasklists",))
        return [dict(item) for item in self.lists]

    def list_tasks(self, list_id, *, max_results=None, show_completed=None, show_hidden=None):
        self.calls.append(("list_tasks", list_id, max_results))
        items = [dict(i) for i in self.items.get(list_id, [])]
        return items[:max_results] if max_results is not None else items

    def insert_task(self, list_id, body):
        self.calls.append(("insert_task", list_id, body))
        if body.get("title") in self.fail_insert_titles:
            raise RuntimeError("insert failed")
        created = dict(body, id=f"new-{next(self._ids)}")
        self.items.setdefault(list_id, []).append(created)
        return created

    def delete_task(self, list_id, task_id):
        self.calls.append(("delete_task", list_id, task_id))
        if task_id in self.fail_delete_ids:
            raise RuntimeError("delete failed")
        self.items[list_id] = [i for i in self.items.get(list_id, []) if i.get("id") != task_id]

    def clear_completed(self, list_id):
        self.calls.append(("clear_completed", list_id))
        self.items[list_id] = [
            i for i in self.items.get(list_id, []) if i.get("status") != "completed"
        ]

    def move_task(self, list_id, task_id, previous=None):
        self.calls.append(("move_task", list_id, task_id, previous))
        if self.fail_move:
            raise RuntimeError("move failed")
        return {"id": task_id}

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def settings(mocker):
    """Settings with no routing overrides and a fake token."""
    from common.config import Settings

    mocker.patch.dict(
        os.environ,
        {"TASKS_ACCESS_TOKEN": "test_token"},
        clear=True,
    )
    return Settings()


@pytest.fixture
def remote_lists():
    return [
        {"id": "L-inbox", "title": "My Tasks"},
        {"id": "L-family", "title": "Family"},
        {"id": "L-square", "title": "Square"},
    ]


@pytest.fixture
def fake_client(remote_lists):
    return FakeTasksClient(remote_lists)

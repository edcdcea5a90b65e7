"""
Google Tasks API Client
=======================

This module provides a client for interacting with the Google Tasks v1 REST
API. It encapsulates all the logic for making authenticated requests,
draining paginated listings, and performing the list/item mutations the
triage engine relies on: insert, delete, clear completed, and reposition.

Calls are made exactly once. A failed request raises a
``requests.exceptions.RequestException`` and the caller decides whether the
failure is fatal or only affects a single item.
"""

from __future__ import annotations

from typing import Generator

import requests

from .config import Settings
from .credentials import AuthenticationMissing, CredentialProvider, SettingsCredentialProvider


class TasksClient:
    """A client for interacting with the Google Tasks API."""

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialProvider | None = None,
    ):
        """Initializes the client with a session; auth is applied lazily."""
        self.settings = settings
        self._credentials = credentials or SettingsCredentialProvider(settings)
        self._session = requests.Session()

    def ensure_authorized(self) -> None:
        """
        Fetch the current bearer credential and attach it to the session.

        Raises:
            AuthenticationMissing: if the credential provider has no token.
        """
        token = self._credentials.get_bearer_credential()
        if not token:
            raise AuthenticationMissing("Not authenticated")
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _url(self, path: str) -> str:
        return f"{self.settings.TASKS_API_URL}{path}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.settings.REQUEST_TIMEOUT)
        response = self._session.request(method, self._url(path), **kwargs)
        response.raise_for_status()
        return response

    def _list_all(self, path: str, params: dict | None = None) -> Generator[dict, None, None]:
        """
        Generator that follows ``nextPageToken`` and yields every item.
        """
        params = dict(params or {})
        while True:
            page = self._request("GET", path, params=params).json()
            yield from page.get("items", []) or []
            token = page.get("nextPageToken")
            if not token:
                return
            params["pageToken"] = token

    def list_tasklists(self) -> list[dict]:
        """Return every task list owned by the user, across all pages."""
        return list(self._list_all("/users/@me/lists", {"maxResults": 100}))

    def list_tasks(
        self,
        list_id: str,
        *,
        max_results: int | None = None,
        show_completed: bool | None = None,
        show_hidden: bool | None = None,
    ) -> list[dict]:
        """
        Return the items of a list.

        With ``max_results`` a single page is fetched; otherwise every page
        is drained.
        """
        params: dict = {}
        if show_completed is not None:
            params["showCompleted"] = str(show_completed).lower()
        if show_hidden is not None:
            params["showHidden"] = str(show_hidden).lower()
        path = f"/lists/{list_id}/tasks"
        if max_results is not None:
            params["maxResults"] = max_results
            page = self._request("GET", path, params=params).json()
            return list(page.get("items", []) or [])
        return list(self._list_all(path, params))

    def insert_task(self, list_id: str, body: dict) -> dict:
        """Create an item in a list and return the created resource."""
        payload = {key: value for key, value in body.items() if value is not None}
        return self._request("POST", f"/lists/{list_id}/tasks", json=payload).json()

    def delete_task(self, list_id: str, task_id: str) -> None:
        """Delete an item from a list."""
        self._request("DELETE", f"/lists/{list_id}/tasks/{task_id}")

    def clear_completed(self, list_id: str) -> None:
        """Hide every completed item in a list."""
        self._request("POST", f"/lists/{list_id}/clear")

    def move_task(self, list_id: str, task_id: str, previous: str | None = None) -> dict:
        """
        Reposition an item so it follows ``previous``; ``None`` moves it first.
        """
        params = {"previous": previous} if previous else None
        response = self._request(
            "POST", f"/lists/{list_id}/tasks/{task_id}/move", params=params
        )
        return response.json() if response.content else {}

"""
Bearer Credentials
==================

Session and token lifecycle are owned elsewhere; this module only asks for
the current bearer token. A provider returns ``None`` when nothing is
available, and the API client turns that into `AuthenticationMissing`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .config import Settings


class AuthenticationMissing(Exception):
    """Raised when no bearer credential is available for the remote service."""


class CredentialProvider(ABC):
    """Abstract source of bearer credentials."""

    @abstractmethod
    def get_bearer_credential(self) -> str | None:
        """Return the current bearer token, or None when signed out."""


class SettingsCredentialProvider(CredentialProvider):
    """Reads the token from ``TASKS_ACCESS_TOKEN``."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_bearer_credential(self) -> str | None:
        return self.settings.TASKS_ACCESS_TOKEN


class StaticCredentialProvider(CredentialProvider):
    """Wraps a token the caller already holds."""

    def __init__(self, token: str | None):
        self._token = token

    def get_bearer_credential(self) -> str | None:
        return self._token

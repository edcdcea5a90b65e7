"""
Configuration module for the TaskPulse triage daemon.

This module centralizes the loading and validation of all configuration
parameters from environment variables. It provides a single `Settings`
class that acts as a container for all configurable values, ensuring
that they are defined in one place and can be easily imported and used
throughout the application.
"""

import os
from typing import Literal


def _get_optional_env(var_name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""
    value = os.getenv(var_name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_bool_env(var_name: str, default: bool) -> bool:
    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    A container for all configuration settings, loaded from environment variables.

    Routing overrides are optional: a destination without an identifier is
    resolved by its label against the live remote lists.
    """

    # --- Google Tasks API Configuration ---
    TASKS_API_URL: str
    TASKS_ACCESS_TOKEN: str | None
    REQUEST_TIMEOUT: int

    # --- Routing Overrides ---
    DEFAULT_TASKLIST_ID: str
    FAMILY_TASKLIST_ID: str | None
    HOME_IMPROVEMENT_TASKLIST_ID: str | None
    HOME_MAINTENANCE_TASKLIST_ID: str | None
    SQUARE_TASKLIST_ID: str | None

    # --- Daemon Configuration ---
    POLL_INTERVAL: int
    SNAPSHOT_LIMIT: int
    ARCHIVE_COMPLETED: bool

    # --- Logging ---
    LOG_LEVEL: str
    LOG_FORMAT: Literal["console", "json"]

    def __init__(self):
        """
        Loads settings from environment variables and performs validation.
        """
        # --- Google Tasks API Configuration ---
        self.TASKS_API_URL = os.getenv(
            "TASKS_API_URL", "https://tasks.googleapis.com/tasks/v1"
        ).rstrip("/")
        self.TASKS_ACCESS_TOKEN = _get_optional_env("TASKS_ACCESS_TOKEN")
        self.REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", 30))

        # --- Routing Overrides ---
        self.DEFAULT_TASKLIST_ID = _get_optional_env("DEFAULT_TASKLIST_ID") or "@default"
        self.FAMILY_TASKLIST_ID = _get_optional_env("FAMILY_TASKLIST_ID")
        self.HOME_IMPROVEMENT_TASKLIST_ID = _get_optional_env("HOME_IMPROVEMENT_TASKLIST_ID")
        self.HOME_MAINTENANCE_TASKLIST_ID = _get_optional_env("HOME_MAINTENANCE_TASKLIST_ID")
        self.SQUARE_TASKLIST_ID = _get_optional_env("SQUARE_TASKLIST_ID")

        # --- Daemon Configuration ---
        self.POLL_INTERVAL = max(1, int(os.getenv("POLL_INTERVAL", 300)))
        self.SNAPSHOT_LIMIT = max(1, int(os.getenv("SNAPSHOT_LIMIT", 10)))
        self.ARCHIVE_COMPLETED = _get_bool_env("ARCHIVE_COMPLETED", False)

        # --- Logging ---
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()
        if self.LOG_FORMAT not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")

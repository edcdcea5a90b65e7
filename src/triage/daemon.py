"""
TaskPulse Triage Daemon
=======================

This script periodically triages the default Google Tasks list: each item is
classified by its title and moved into the list it belongs to. When
``ARCHIVE_COMPLETED`` is enabled, completed items are cleared from every
routed list on the same pass.
"""

from __future__ import annotations

import structlog

from common.config import Settings
from common.daemon_loop import run_polling_loop
from common.logging_config import configure_logging
from common.tasks_client import TasksClient

from .engine import TriageEngine


def run_pass(engine: TriageEngine, settings: Settings) -> dict:
    """One triage pass; returns counters for logging."""
    result = engine.sync_default_list()
    summary = {"moved": result.moved, "inspected": result.inspected}
    if settings.ARCHIVE_COMPLETED:
        summary["lists_cleared"] = engine.bulk_archive_completed()
    return summary


def main() -> None:
    """Main loop for the triage daemon."""
    log = structlog.get_logger(__name__)

    try:
        settings = Settings()
        configure_logging(settings)
    except ValueError as e:
        log.error("Configuration error", error=e)
        return

    log.info(
        "Starting triage daemon",
        api_url=settings.TASKS_API_URL,
        default_tasklist_id=settings.DEFAULT_TASKLIST_ID,
        poll_interval=settings.POLL_INTERVAL,
        archive_completed=settings.ARCHIVE_COMPLETED,
    )

    client = TasksClient(settings)
    engine = TriageEngine(client, settings)
    try:
        run_polling_loop(
            daemon_name="triage",
            run_once=lambda: run_pass(engine, settings),
            poll_interval_seconds=settings.POLL_INTERVAL,
        )
    finally:
        client.close()


if __name__ == "__main__":
    main()

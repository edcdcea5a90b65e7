"""
Daemon Loop Utilities
=====================

The triage daemon re-runs the same pass on an interval:

- Run one pass (sync the inbox, optionally archive completed items).
- Sleep for the poll interval.
- Keep running forever (until SIGINT / Ctrl-C).

Passes run one after another on the calling thread. Every remote call made
by a pass is sequential, so two passes never overlap inside one process.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

log = structlog.get_logger(__name__)


def run_polling_loop(
    *,
    daemon_name: str,
    run_once: Callable[[], object],
    poll_interval_seconds: int,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Run ``run_once`` forever, sleeping ``poll_interval_seconds`` in between.

    Args:
        daemon_name:
            Name used in log messages.
        run_once:
            One pass of work. Exceptions are logged and the loop continues.
        poll_interval_seconds:
            How long to sleep between passes.
        sleep:
            Injectable sleep function (primarily for tests).
    """
    poll_interval_seconds = max(1, int(poll_interval_seconds))

    while True:
        try:
            result = run_once()
            log.info("Pass complete", daemon=daemon_name, result=result)
            sleep(poll_interval_seconds)
        except KeyboardInterrupt:
            log.info("Ctrl-C received; exiting", daemon=daemon_name)
            break
        except Exception:
            log.exception(
                "Pass failed; sleeping",
                daemon=daemon_name,
                poll_interval_seconds=poll_interval_seconds,
            )
            try:
                sleep(poll_interval_seconds)
            except KeyboardInterrupt:
                log.info("Ctrl-C received; exiting", daemon=daemon_name)
                break

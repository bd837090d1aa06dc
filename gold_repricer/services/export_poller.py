from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from ..models.config_models import MarketplaceConfig
from ..models.export_job import ExportJob, ExportStatus
from .marketplace import MarketplaceError

"""Export polling as an explicit state machine.

poll_once() performs a single status check and returns the next state;
wait_for_export() drives it with an injected ``sleep`` scheduler until the
job is terminal or the poll budget runs out. fetch_export() chains request ->
wait -> download for the CLI.
"""

__all__ = [
    "ExportClient",
    "ExportStateError",
    "ExportTimeoutError",
    "fetch_export",
    "next_state",
    "poll_once",
    "wait_for_export",
]

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ExportStatus, frozenset[ExportStatus]] = {
    ExportStatus.REQUESTED: frozenset(
        {ExportStatus.REQUESTED, ExportStatus.PROCESSING, ExportStatus.PROCESSED, ExportStatus.FAILED}
    ),
    ExportStatus.PROCESSING: frozenset(
        {ExportStatus.PROCESSING, ExportStatus.PROCESSED, ExportStatus.FAILED}
    ),
    ExportStatus.PROCESSED: frozenset(),
    ExportStatus.FAILED: frozenset(),
}


class ExportStateError(Exception):
    """Raised for a transition the export lifecycle does not allow."""


class ExportTimeoutError(Exception):
    """Raised when the export is still pending after the poll budget."""


class ExportSource(Protocol):
    def poll_export(self) -> ExportJob:
        ...


class ExportClient(ExportSource, Protocol):
    """Full export workflow: request, poll, download (MarketplaceClient)."""

    def request_export(self) -> ExportJob:
        ...

    def download_export(self, url: str, destination: Path) -> Path:
        ...


def next_state(current: ExportJob, observed: ExportJob) -> ExportJob:
    """Validate the move from ``current`` to ``observed`` and return it."""
    if observed.status not in ALLOWED_TRANSITIONS[current.status]:
        raise ExportStateError(
            f"invalid export transition {current.status.value} -> {observed.status.value}"
        )
    return observed


def poll_once(source: ExportSource, job: ExportJob) -> ExportJob:
    """One status check. Terminal jobs are returned unchanged."""
    if job.is_terminal:
        return job
    return next_state(job, source.poll_export())


def wait_for_export(
    source: ExportSource,
    job: ExportJob,
    *,
    interval: float,
    max_polls: int,
    sleep: Callable[[float], None] = time.sleep,
) -> ExportJob:
    """Poll until ``job`` reaches a terminal state.

    Args:
        source: Anything with poll_export() (MarketplaceClient)
        job: Current job, normally REQUESTED
        interval: Seconds between polls
        max_polls: Poll budget
        sleep: Scheduler used between polls

    Returns:
        The terminal job (PROCESSED or FAILED)

    Raises:
        ExportTimeoutError: Still pending after max_polls checks
    """
    for attempt in range(1, max_polls + 1):
        job = poll_once(source, job)
        if job.is_terminal:
            return job
        if attempt == max_polls:
            break
        logger.info(
            f"export {job.status.value}, checking again in {interval:g}s ({attempt}/{max_polls})"
        )
        sleep(interval)
    raise ExportTimeoutError(f"export not ready after {max_polls} polls")


def fetch_export(
    client: ExportClient,
    config: MarketplaceConfig,
    destination: Path,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Path:
    """Request an export, wait for it and download it to ``destination``.

    Raises:
        MarketplaceError: Request rejected, export failed, transport error
        ExportTimeoutError: Poll budget exhausted
    """
    job = client.request_export()
    if job.status is ExportStatus.FAILED:
        raise MarketplaceError(f"export request rejected: {job.message}")

    job = wait_for_export(
        client, job, interval=config.poll_interval_seconds, max_polls=config.max_polls, sleep=sleep
    )
    if job.status is ExportStatus.FAILED:
        raise MarketplaceError(f"export failed: {job.message}")
    return client.download_export(job.file_url, destination)

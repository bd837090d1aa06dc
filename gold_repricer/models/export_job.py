from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""ExportJob domain model and ExportStatus enum.

The marketplace builds inventory exports asynchronously. A job moves through

    requested -> processing -> (processed | failed)

and may jump straight from requested to a terminal state. processed and
failed are terminal. Transitions are enforced in services/export_poller.py.
"""

__all__ = [
    "ExportJob",
    "ExportStatus",
]


class ExportStatus(Enum):
    """Lifecycle of a marketplace excel export.

    - REQUESTED: export request accepted (or one was already pending)
    - PROCESSING: marketplace is still building the file
    - PROCESSED: file ready, file_url set
    - FAILED: request rejected or export errored
    """
    REQUESTED = "requested"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({ExportStatus.PROCESSED, ExportStatus.FAILED})


@dataclass(frozen=True)
class ExportJob:
    status: ExportStatus
    file_url: str | None = None  # download link, PROCESSED only
    message: str | None = None   # server message, mostly for FAILED

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

"""Convergence loop — undo pending changes until the workspace is clean.

Every pass queries status afresh and undoes each reported change in the
order the client reported it. The loop ends on the first empty status.
Without an iteration cap a change that can never be undone keeps the loop
running forever; pass ``max_iterations`` to fail with
``ConvergenceTimeoutError`` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from plastic_auto.cm.status import StatusReader
from plastic_auto.cm.undo import ChangeUndoer
from plastic_auto.errors import ConfigError, ConvergenceTimeoutError
from plastic_auto.models import Change, Status

logger = logging.getLogger(__name__)


class StatusProvider(Protocol):
    def read(self, working_dir: str | Path) -> Status: ...


class Undoer(Protocol):
    def undo(self, change: Change, working_dir: str | Path) -> None: ...


class Updater(Protocol):
    def update(self, working_dir: str | Path) -> None: ...


@dataclass
class ConvergenceResult:
    """Counts of external calls made by one convergence run."""

    status_queries: int = 0
    undo_calls: int = 0


def ensure_clean(
    working_dir: str | Path,
    status_provider: StatusProvider | None = None,
    undoer: Undoer | None = None,
    max_iterations: int | None = None,
) -> ConvergenceResult:
    """Undo every pending change until ``status_provider`` reports none.

    Args:
        working_dir: Workspace passed unchanged to every call.
        status_provider: Source of fresh status snapshots. Defaults to
                         ``cm status`` through a default ``StatusReader``.
        undoer: Reverts a single change. Defaults to ``ChangeUndoer()``.
        max_iterations: Maximum number of status queries. None means no bound.

    Raises:
        ConfigError: If ``max_iterations`` is below 1.
        ConvergenceTimeoutError: If the ``max_iterations``-th query still
            reports pending changes.
        PlasticAutoError: Any status or undo failure, propagated immediately.
    """
    if max_iterations is not None and max_iterations < 1:
        raise ConfigError("max_iterations must be at least 1")

    status_provider = status_provider or StatusReader()
    undoer = undoer or ChangeUndoer()

    logger.info("Ensure clean workspace")
    result = ConvergenceResult()

    while True:
        logger.info("Get workspace status")
        status = status_provider.read(working_dir)
        result.status_queries += 1

        if status.is_clean:
            return result

        # Cap reached: no undo pass without a following status query.
        if max_iterations is not None and result.status_queries >= max_iterations:
            raise ConvergenceTimeoutError(result.status_queries, status)

        logger.info("Workspace has pending changes:")
        for change in status.changes:
            logger.info("- %s", change)

        for change in status.changes:
            undoer.undo(change, working_dir)
            result.undo_calls += 1

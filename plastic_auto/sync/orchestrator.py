"""Reconciliation orchestrator — the ``ensure`` and ``update`` operations."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from plastic_auto.cm.runner import CommandRunner
from plastic_auto.cm.status import StatusReader
from plastic_auto.cm.undo import ChangeUndoer
from plastic_auto.cm.update import UpstreamUpdater
from plastic_auto.config import Config
from plastic_auto.errors import ConfigError
from plastic_auto.sync.convergence import (
    ConvergenceResult,
    StatusProvider,
    Undoer,
    Updater,
    ensure_clean,
)

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Summary of a reconcile run, for reporting only."""

    status_queries: int = 0
    undo_calls: int = 0
    updated: bool = False
    duration_ms: int = 0

    def absorb(self, convergence: ConvergenceResult) -> None:
        self.status_queries += convergence.status_queries
        self.undo_calls += convergence.undo_calls

    def summary(self) -> str:
        lines = [
            f"Status queries: {self.status_queries}",
            f"Changes undone: {self.undo_calls}",
            f"Updated:        {'yes' if self.updated else 'no'}",
            f"Duration:       {self.duration_ms}ms",
        ]
        return "\n".join(lines)


class Reconciler:
    """Sequences convergence and update against one workspace at a time.

    Both operations are fail-fast: the first failing ``cm`` call aborts the
    whole operation and already-applied undos are left in place.
    """

    def __init__(
        self,
        status_provider: StatusProvider,
        undoer: Undoer,
        updater: Updater,
        max_iterations: int | None = None,
    ):
        if max_iterations is not None and max_iterations < 1:
            raise ConfigError("max_iterations must be at least 1")
        self.status_provider = status_provider
        self.undoer = undoer
        self.updater = updater
        self.max_iterations = max_iterations

    @classmethod
    def from_config(cls, config: Config) -> "Reconciler":
        """Wire the real ``cm`` client according to ``config``."""
        runner = CommandRunner(binary=config.cm_binary, check=config.strict_exit_codes)
        return cls(
            status_provider=StatusReader(runner),
            undoer=ChangeUndoer(runner),
            updater=UpstreamUpdater(runner),
            max_iterations=config.max_iterations,
        )

    def ensure(self, working_dir: str | Path) -> ReconcileResult:
        """Undo pending changes until the workspace is clean."""
        start = time.monotonic()
        result = ReconcileResult()
        result.absorb(self._converge(working_dir))
        result.duration_ms = int((time.monotonic() - start) * 1000)
        return result

    def update(self, working_dir: str | Path) -> ReconcileResult:
        """Clean, update to the latest revision, then clean again.

        The first pass gives the update a clean baseline; the second absorbs
        changes the update itself leaves behind (e.g. re-downloaded files).
        """
        start = time.monotonic()
        result = ReconcileResult()

        result.absorb(self._converge(working_dir))
        self.updater.update(working_dir)
        result.updated = True
        result.absorb(self._converge(working_dir))

        result.duration_ms = int((time.monotonic() - start) * 1000)
        return result

    def _converge(self, working_dir: str | Path) -> ConvergenceResult:
        return ensure_clean(
            working_dir,
            status_provider=self.status_provider,
            undoer=self.undoer,
            max_iterations=self.max_iterations,
        )


def ensure(working_dir: str | Path, config: Config | None = None) -> ReconcileResult:
    return Reconciler.from_config(config or Config()).ensure(working_dir)


def update(working_dir: str | Path, config: Config | None = None) -> ReconcileResult:
    return Reconciler.from_config(config or Config()).update(working_dir)

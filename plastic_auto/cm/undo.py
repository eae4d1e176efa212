"""Change undoer — revert one pending change."""

from __future__ import annotations

import logging
from pathlib import Path

from plastic_auto.cm.runner import CommandRunner
from plastic_auto.models import Change

logger = logging.getLogger(__name__)


class ChangeUndoer:
    """Runs ``cm undo`` for a single change. The revert is not verified."""

    def __init__(self, runner: CommandRunner | None = None):
        self.runner = runner or CommandRunner()

    def undo(self, change: Change, working_dir: str | Path) -> None:
        logger.info("Undo change: %s", change)
        self.runner.run(["undo", change.path], working_dir)


def undo(change: Change, working_dir: str | Path) -> None:
    ChangeUndoer().undo(change, working_dir)

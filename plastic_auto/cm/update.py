"""Upstream updater — move the workspace to the latest revision.

``--override`` overwrites conflicting local files and ``--forced``
re-downloads content the client considers damaged. Residual changes left
behind by the update are cleaned up by the next convergence pass.
"""

from __future__ import annotations

import logging
from pathlib import Path

from plastic_auto.cm.runner import CommandRunner

logger = logging.getLogger(__name__)

UPDATE_ARGS = ["update", "--last", "--override", "--forced"]


class UpstreamUpdater:
    def __init__(self, runner: CommandRunner | None = None):
        self.runner = runner or CommandRunner()

    def update(self, working_dir: str | Path) -> None:
        logger.info("Update workspace")
        self.runner.run(UPDATE_ARGS, working_dir)


def update_to_latest(working_dir: str | Path) -> None:
    UpstreamUpdater().update(working_dir)

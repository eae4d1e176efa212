"""Command runner — launches ``cm`` and captures its output."""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path

from plastic_auto.errors import ToolInvocationError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of one ``cm`` invocation."""

    args: list[str] = field(default_factory=list)
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """Runs ``cm`` subcommands synchronously inside a workspace."""

    def __init__(self, binary: str = "cm", check: bool = False):
        """Initialize the runner.

        Args:
            binary: Name or path of the ``cm`` executable.
            check: Raise ``ToolInvocationError`` on any non-zero exit code.
                   When False, only launch failures and signal kills raise.
        """
        self.binary = binary
        self.check = check

    def run(self, args: list[str], working_dir: str | Path) -> CommandResult:
        command = [self.binary, *args]
        logger.debug("Running `%s` in %s", " ".join(command), working_dir)

        start = time.monotonic()
        try:
            proc = subprocess.run(
                command,
                cwd=working_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ToolInvocationError(command, f"cannot launch: {e}") from e

        result = CommandResult(
            args=command,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        logger.debug("STDOUT: `%s`", result.stdout)
        logger.debug("STDERR: `%s`", result.stderr)

        if result.exit_code < 0:
            raise ToolInvocationError(
                command,
                f"killed by signal {-result.exit_code}",
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        if result.exit_code != 0:
            if self.check:
                raise ToolInvocationError(
                    command,
                    f"exited with status {result.exit_code}",
                    exit_code=result.exit_code,
                    stderr=result.stderr,
                )
            logger.warning("`%s` exited with status %d", " ".join(command), result.exit_code)

        return result

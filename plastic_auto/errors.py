"""Error taxonomy for plastic-auto."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plastic_auto.models import Status


class PlasticAutoError(Exception):
    """Base class for every failure surfaced to the caller."""


class ToolInvocationError(PlasticAutoError):
    """The ``cm`` binary could not be launched or did not run to completion."""

    def __init__(
        self,
        command: list[str],
        reason: str,
        exit_code: int | None = None,
        stderr: str = "",
    ):
        self.command = list(command)
        self.reason = reason
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"`{' '.join(self.command)}` failed: {reason}")


class DecodeError(PlasticAutoError):
    """Captured output did not match the expected status document."""

    def __init__(self, message: str, raw: str):
        self.raw = raw
        super().__init__(message)


class ConvergenceTimeoutError(PlasticAutoError):
    """The workspace still had pending changes after the iteration cap."""

    def __init__(self, iterations: int, last_status: Status):
        self.iterations = iterations
        self.last_status = last_status
        super().__init__(
            f"Workspace not clean after {iterations} status queries "
            f"({len(last_status.changes)} changes still pending)"
        )


class ConfigError(PlasticAutoError):
    """The configuration file is malformed or holds invalid values."""

"""Workspace status models reported by the ``cm`` client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class Change:
    """A single pending change reported by ``cm status``."""

    path: str = ""
    size: str = ""  # PrintableSize, display only

    def describe(self) -> str:
        return f"File `{self.path}` of size: {self.size}"

    def __str__(self) -> str:
        return self.describe()


@dataclass
class Status:
    """Snapshot of the pending changes in a workspace at one instant."""

    changes: list[Change] = field(default_factory=list)
    raw: str = ""
    """The captured text this status was decoded from."""

    @property
    def is_clean(self) -> bool:
        return len(self.changes) == 0

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[Change]:
        return iter(self.changes)

"""Status reader — query and decode the pending changes of a workspace.

``cm status --xml --fullpath`` prints a document shaped like::

    <StatusOutput>
      <WorkspaceStatus>...</WorkspaceStatus>
      <Changes>
        <Change>
          <Path>/ws/a.txt</Path>
          <PrintableSize>1.2 KB</PrintableSize>
          ...
        </Change>
      </Changes>
    </StatusOutput>

Only ``Path`` and ``PrintableSize`` are read; everything else is ignored.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from plastic_auto.cm.runner import CommandRunner
from plastic_auto.errors import DecodeError
from plastic_auto.models import Change, Status

STATUS_ARGS = ["status", "--xml", "--fullpath"]


def decode_status(text: str) -> Status:
    """Decode ``cm status --xml`` output into a Status.

    A missing or empty ``Changes`` element yields an empty Status.

    Raises:
        DecodeError: If ``text`` is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DecodeError(f"Cannot deserialize status output: {e}", raw=text) from e

    changes = []
    container = root.find("Changes")
    if container is not None:
        for entry in container.findall("Change"):
            changes.append(
                Change(
                    path=_child_text(entry, "Path"),
                    size=_child_text(entry, "PrintableSize"),
                )
            )
    return Status(changes=changes, raw=text)


def _child_text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


class StatusReader:
    """Reads workspace status through a ``CommandRunner``."""

    def __init__(self, runner: CommandRunner | None = None):
        self.runner = runner or CommandRunner()

    def read(self, working_dir: str | Path) -> Status:
        result = self.runner.run(STATUS_ARGS, working_dir)
        return decode_status(result.stdout)


def read_status(working_dir: str | Path) -> Status:
    """Query ``working_dir`` with the default ``cm`` binary."""
    return StatusReader().read(working_dir)

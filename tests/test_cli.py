"""Tests for the command-line interface."""

import subprocess
import tempfile
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from plastic_auto import __version__
from plastic_auto.cli import main
from plastic_auto.config import CM_BINARY_ENV


CLEAN = "<StatusOutput><Changes /></StatusOutput>"
DIRTY = (
    "<StatusOutput><Changes>"
    "<Change><Path>/ws/a.txt</Path><PrintableSize>2 KB</PrintableSize></Change>"
    "</Changes></StatusOutput>"
)


class ScriptedCm:
    """Replacement for ``subprocess.run`` answering status queries from a script."""

    def __init__(self, statuses):
        self.statuses = list(statuses)
        self.commands = []

    def __call__(self, command, **kwargs):
        self.commands.append(command)
        stdout = ""
        if command[1] == "status":
            stdout = self.statuses.pop(0)
        return subprocess.CompletedProcess(args=command, returncode=0, stdout=stdout, stderr="")

    def subcommands(self):
        return [c[1] for c in self.commands]


def _invoke(args, cm, monkeypatch):
    monkeypatch.delenv(CM_BINARY_ENV, raising=False)
    with mock.patch("plastic_auto.cm.runner.subprocess.run", side_effect=cm):
        return CliRunner().invoke(main, args)


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_ensure_clean_workspace(monkeypatch):
    cm = ScriptedCm([CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["ensure", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert cm.subcommands() == ["status"]


def test_ensure_undoes_and_reports(monkeypatch):
    cm = ScriptedCm([DIRTY, CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["ensure", "--working-dir", tmpdir, "--verbose"], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert cm.commands[1] == ["cm", "undo", "/ws/a.txt"]
    assert "Done!" in result.output


def test_update_runs_full_sequence(monkeypatch):
    cm = ScriptedCm([CLEAN, DIRTY, CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["update", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert cm.subcommands() == ["status", "update", "status", "undo", "status"]
    assert cm.commands[1] == ["cm", "update", "--last", "--override", "--forced"]


def test_log_flag_prints_raw_output(monkeypatch):
    cm = ScriptedCm([CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["ensure", "-w", tmpdir, "--log"], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert "STDOUT" in result.output


def test_decode_failure_exits_nonzero_with_raw_output(monkeypatch):
    cm = ScriptedCm(["workspace is locked"])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["ensure", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 1
    assert "workspace is locked" in result.output


def test_max_iterations_option(monkeypatch):
    cm = ScriptedCm([DIRTY, DIRTY, DIRTY])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["ensure", "-w", tmpdir, "--max-iterations", "2"], cm, monkeypatch)
    assert result.exit_code == 1
    assert cm.subcommands() == ["status", "undo", "status"]
    assert "not clean after 2" in result.output


def test_config_file_selects_binary(monkeypatch):
    cm = ScriptedCm([CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / ".plastic-auto.yaml").write_text("cm_binary: /opt/plastic/cm\n")
        result = _invoke(["ensure", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert cm.commands[0][0] == "/opt/plastic/cm"


def test_status_lists_changes(monkeypatch):
    cm = ScriptedCm([DIRTY])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["status", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 0, result.output
    assert "/ws/a.txt" in result.output
    assert cm.subcommands() == ["status"]


def test_status_clean(monkeypatch):
    cm = ScriptedCm([CLEAN])
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _invoke(["status", "-w", tmpdir], cm, monkeypatch)
    assert result.exit_code == 0
    assert "Workspace is clean." in result.output

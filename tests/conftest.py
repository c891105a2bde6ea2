from __future__ import annotations

import io
from typing import Dict, List, Tuple

import pytest

from drupalci.runner import CommandRunner
from drupalci.ui.console import Console


class FakeRunner(CommandRunner):
    """CommandRunner that records commands instead of spawning them."""

    def __init__(self, console=None, *, job="", exit_codes=None):
        super().__init__(console, job=job)
        # keyed by sub-command: "clone", "site-install", "coder-review", ...
        self.exit_codes: Dict[str, int] = exit_codes or {}
        self.calls: List[Tuple[str, ...]] = []

    def _stream(self, argv, cwd, captured, stdout=None):
        self.calls.append(argv)
        captured.append(f"fake output of {' '.join(argv)}\n")
        key = argv[1] if len(argv) > 1 else argv[0]
        return self.exit_codes.get(key, 0)


class RunnerFactory:
    """Stands in for the CommandRunner class; keeps every runner it makes."""

    def __init__(self, exit_codes=None):
        self.exit_codes = exit_codes or {}
        self.runners: List[FakeRunner] = []

    def __call__(self, console=None, *, job=""):
        runner = FakeRunner(console, job=job, exit_codes=self.exit_codes)
        self.runners.append(runner)
        return runner

    @property
    def calls(self) -> List[Tuple[str, ...]]:
        return [c for r in self.runners for c in r.calls]

    @property
    def subcommands(self) -> List[str]:
        return [c[1] for c in self.calls]


@pytest.fixture
def console():
    return Console(stream=io.StringIO())


@pytest.fixture
def runners():
    return RunnerFactory()


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def make_runners():
    """RunnerFactory with scripted exit codes, e.g. make_runners({"clone": 128})."""
    return RunnerFactory

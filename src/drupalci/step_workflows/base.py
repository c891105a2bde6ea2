# step_workflows/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel

from ..model import StepResult
from ..runner import CIError, CommandRunner
from ..ui.console import Console


def ensure_dir(path: Path, *, job: str = "", step: str = "ensure-dir") -> Path:
    """Create `path` (and parents) unless it already exists as a directory."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CIError(
            kind="io_failure",
            job=job,
            step=step,
            message=f"cannot create directory {path}: {e.strerror or e}",
        ) from e
    return path


class BuildStep(ABC):
    """
    One build step: a fixed sequence of external commands run against a workspace.

    Subclasses implement `execute`. Commands go through a CommandRunner made
    by `runner_factory`, which tests replace with a recording fake.
    """

    name: str = "step"

    def __init__(self, runner_factory: Optional[Callable[..., CommandRunner]] = None):
        self.runner_factory = runner_factory or CommandRunner

    def make_runner(self, console: Console) -> CommandRunner:
        return self.runner_factory(console, job=self.name)

    @abstractmethod
    def execute(self, config: BaseModel, workspace: Path, console: Console) -> StepResult:
        """
        Run the step.

        Returns a successful StepResult; raises StepFailure or CIError on the
        first command or filesystem problem, leaving later commands unrun.
        """

# step_workflows/make.py
from __future__ import annotations

from pathlib import Path

from ..drush import DrushInvocation
from ..model import MakeConfig, StepResult
from ..runner import CIError
from ..ui.console import Console
from .base import BuildStep, ensure_dir


class MakeStep(BuildStep):
    """Build a Drupal tree from a drush makefile."""

    name = "make"

    def execute(self, config: MakeConfig, workspace: Path, console: Console) -> StepResult:
        runner = self.make_runner(console)
        workspace = Path(workspace)

        makefile = workspace / config.makefile
        if not makefile.is_file():
            raise CIError(
                kind="io_failure",
                job=self.name,
                step="makefile",
                message=f"Makefile not found: {makefile}",
            )

        destination = workspace / config.root if config.root else workspace
        ensure_dir(destination.parent, job=self.name)

        # TODO run "drush make" again over an existing tree instead of failing
        drush = DrushInvocation(workspace, runner)
        drush.make(makefile, destination)

        return StepResult(name=self.name, status="ok", invocations=list(runner.history))

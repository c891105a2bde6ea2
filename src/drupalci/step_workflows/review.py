# step_workflows/review.py
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Set

from ..drush import DrushInvocation
from ..fileset import FileSet
from ..model import ReviewConfig, StepResult
from ..runner import CIError
from ..ui.console import Console
from .base import BuildStep, ensure_dir

# Matches every module, theme and installation profile descriptor.
DESCRIPTOR_PATTERN = "**/*.info"


def review_targets(root: str | Path, excludes: str = "") -> Set[str]:
    """
    Names of the projects to review under `root`.

    sites/all/modules/mymodule/mymodule.info becomes "mymodule". Installation
    profiles are kept; coder ignores them.
    """
    files = FileSet(root, DESCRIPTOR_PATTERN, excludes).included_files()
    return {PurePosixPath(f).stem for f in files}


class ReviewStep(BuildStep):
    """Run Coder Review over the projects of a Drupal tree."""

    name = "review"

    def execute(self, config: ReviewConfig, workspace: Path, console: Console) -> StepResult:
        runner = self.make_runner(console)
        workspace = Path(workspace)

        logs_dir = ensure_dir(workspace / config.logs, job=self.name)

        root = workspace / config.root
        if not root.is_dir():
            raise CIError(
                kind="io_failure",
                job=self.name,
                step="ensure-root",
                message=f"Drupal root not found: {root}",
                details={"hint": "Provision the site first or fix --root."},
            )

        drush = DrushInvocation(root, runner)
        # TODO skip the download when coder is already present under modules/
        drush.download(config.coder_project, "modules")
        drush.enable("coder_review")

        categories = config.categories
        targets = review_targets(root, config.except_)
        console.print_info(
            f"Reviewing {len(targets)} project(s) for: {', '.join(sorted(categories)) or 'default reviews'}"
        )

        drush.coder_review(logs_dir, categories, targets)

        return StepResult(name=self.name, status="ok", invocations=list(runner.history))

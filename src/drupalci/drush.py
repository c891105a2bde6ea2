# drush.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from . import settings
from .model import Invocation
from .runner import CommandRunner

CODER_REPORT = "coder_review.xml"


class DrushInvocation:
    """
    Drush commands bound to one Drupal root.

    Each method maps one logical operation onto a drush command line and runs
    it through the CommandRunner from inside the root, so drush bootstraps
    that site.
    """

    def __init__(self, root: str | Path, runner: CommandRunner, exe: Optional[str] = None):
        self.root = Path(root)
        self.runner = runner
        self.exe = exe or settings.DRUSH

    def _drush(self, name: str, args: List[str], *, output_file: Path | None = None) -> Invocation:
        return self.runner.run(name, [self.exe, *args], cwd=self.root, output_file=output_file)

    def site_install(self, db: str) -> Invocation:
        """Install a fresh site against the `db` connection string."""
        return self._drush("site-install", ["site-install", "-y", f"--db-url={db}"])

    def download(self, project: str, destination: Optional[str] = None) -> Invocation:
        """Download a project, e.g. "coder-7.x-2.5", optionally into `destination` (relative to the root)."""
        args = ["pm-download", project, "-y"]
        if destination:
            args.append(f"--destination={destination}")
        return self._drush("pm-download", args)

    def enable(self, module: str) -> Invocation:
        return self._drush("pm-enable", ["pm-enable", module, "-y"])

    def coder_review(
        self,
        logs_dir: Optional[Path] = None,
        reviews: Iterable[str] = (),
        projects: Iterable[str] = (),
    ) -> Invocation:
        """
        Run Coder Review.

        Without reviews or projects coder falls back to its own defaults
        (every enabled module, default review set). With `logs_dir` the
        report is written there in checkstyle format.
        """
        args = ["coder-review"]
        output_file = None
        if logs_dir is not None:
            args.append("--checkstyle")
            output_file = Path(logs_dir) / CODER_REPORT
        reviews = sorted(reviews)
        if reviews:
            args.append(f"--reviews={','.join(reviews)}")
        args.extend(sorted(projects))
        return self._drush("coder-review", args, output_file=output_file)

    def test_run(self, uri: str, xml_dir: Optional[Path] = None) -> Invocation:
        """Run every Simpletest test against the site at `uri`."""
        args = ["test-run", f"--uri={uri}", "--all"]
        if xml_dir is not None:
            args.append(f"--xml={xml_dir}")
        return self._drush("test-run", args)

    def make(self, makefile: str | Path, destination: str | Path) -> Invocation:
        """Build a Drupal tree at `destination` from a makefile."""
        return self._drush("make", ["make", str(makefile), str(destination), "-y"])

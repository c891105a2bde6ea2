# step_workflows/provision.py
from __future__ import annotations

from pathlib import Path

from ..drush import DrushInvocation
from ..git_facts.git import GitClient
from ..model import ProvisionConfig, StepResult
from ..ui.console import Console
from .base import BuildStep, ensure_dir

DRUPAL_DIR = "drupal"


def looks_like_drupal(root: Path) -> bool:
    """Drupal 7 ships includes/bootstrap.inc, Drupal 8+ a core/ directory."""
    return (root / "includes" / "bootstrap.inc").is_file() or (root / "core").is_dir()


class ProvisionStep(BuildStep):
    """Build a Drupal instance: clone core, install a site, optionally review and test it."""

    name = "provision"

    def execute(self, config: ProvisionConfig, workspace: Path, console: Console) -> StepResult:
        runner = self.make_runner(console)

        # TODO allow the Drupal checkout to live in a different subdirectory
        root = ensure_dir(Path(workspace) / DRUPAL_DIR, job=self.name)

        # ---- source ----
        git = GitClient(root, runner)
        if git.has_repo():
            console.print_info("Drupal code detected, no need to clone")
            if not looks_like_drupal(root):
                console.print_warning(f"{root} holds a git repository that does not look like Drupal core")
        else:
            console.print_info(f"Cloning Drupal {config.tag} from {config.repo_url}, please be patient")
            git.clone(config.repo_url, "origin", False, None)
            git.checkout_branch(config.branch, config.tag)

        # ---- install ----
        drush = DrushInvocation(root, runner)
        drush.site_install(config.db)

        # ---- optional sub-pipelines ----
        if config.coder:
            drush.download(config.coder_project)
            drush.enable("coder_review")
            drush.coder_review()

        if config.simpletest:
            xml_dir = None
            if config.logs:
                xml_dir = ensure_dir(Path(workspace) / config.logs, job=self.name)
            drush.enable("simpletest")
            drush.test_run(config.uri, xml_dir)

        return StepResult(name=self.name, status="ok", invocations=list(runner.history))

# git.py
# Small, focused wrapper around the Git CLI.
# This module centralizes all Git interactions so the build steps
# never need to build "git ..." command lines themselves.

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .. import settings
from ..model import Invocation
from ..runner import CommandRunner


class GitClient:
    """
    Git operations bound to one working tree.

    Every command goes through a CommandRunner, so output ends up in the
    build log and a non-zero exit raises StepFailure.
    """

    def __init__(self, root: str | Path, runner: CommandRunner, exe: Optional[str] = None):
        """
        Args:
            root: Working tree the client operates on. Clones land here.
            runner: Command runner used for every git call.
            exe: Git executable (defaults to settings.GIT).
        """
        self.root = Path(root)
        self.runner = runner
        self.exe = exe or settings.GIT

    def _git(self, name: str, args: List[str]) -> Invocation:
        """
        Single low-level entry point for all Git operations of this client.

        Commands always run inside the working tree so relative arguments
        (like "." for a clone target) mean the same thing everywhere.
        """
        return self.runner.run(name, [self.exe, *args], cwd=self.root)

    def has_repo(self) -> bool:
        """
        Return True if the working tree already holds a Git repository.

        Only the presence of `.git` is checked; what the repository contains
        is not looked at.
        """
        return (self.root / ".git").exists()

    def clone(
        self,
        url: str,
        remote: str = "origin",
        shallow: bool = False,
        refspec: Optional[str] = None,
    ) -> Invocation:
        """
        Clone `url` into the working tree itself.

        Args:
            url: Repository to clone
            remote: Name given to the upstream remote
            shallow: If True, fetch only the latest commit (--depth 1)
            refspec: Optional branch/tag to clone instead of the default HEAD
        """
        args = ["clone", "--origin", remote]
        if shallow:
            args += ["--depth", "1"]
        if refspec:
            args += ["--branch", refspec]
        # "." : the working tree is created before cloning and may be empty
        args += [url, "."]
        return self._git("clone", args)

    def checkout_branch(self, branch: str, ref: str) -> Invocation:
        """
        Create (or reset) `branch` at `ref` and switch to it.

        `git checkout -B 7.x tags/7.37` leaves the tree on a local branch
        named after the release line, pointing at the release tag.
        """
        return self._git("checkout", ["checkout", "-B", branch, ref])

# fileset.py
from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Tuple

from pathspec import PathSpec

# ---------------------------------------------------------------------
# Ant-style patterns
# ---------------------------------------------------------------------
# Paths are matched relative to the file set's base directory, with "/"
# as separator, using git wildmatch rules:
#   *   any run of characters inside one path segment
#   ?   exactly one character inside one path segment
#   **  zero or more whole path segments
# A pattern ending in "/" is treated as if "**" followed it. Every pattern
# is anchored at the base directory, so "*.info" only matches top-level
# files. A pattern that matches a directory also matches everything below it.
# ---------------------------------------------------------------------

DEFAULT_EXCLUDES = [
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/CVS/**",
    "**/.cvsignore",
    "**/SCCS/**",
    "**/vssver.scc",
    "**/.svn/**",
    "**/.DS_Store",
    "**/.git/**",
    "**/.gitattributes",
    "**/.gitignore",
    "**/.gitmodules",
    "**/.hg/**",
    "**/.hgignore",
    "**/.hgsub",
    "**/.hgsubstate",
    "**/.hgtags",
    "**/.bzr/**",
    "**/.bzrignore",
]

# Version control directories never worth descending into
_VCS_DIRS = {"CVS", "SCCS", ".svn", ".git", ".hg", ".bzr"}


def split_patterns(text: str | None) -> List[str]:
    """Split a comma and/or whitespace separated pattern list."""
    if not text:
        return []
    return [p for p in re.split(r"[,\s]+", text.strip()) if p]


def _anchored(pattern: str) -> str:
    pattern = pattern.replace("\\", "/")
    return pattern if pattern.startswith("/") else "/" + pattern


@lru_cache(maxsize=256)
def compile_spec(patterns: Tuple[str, ...]) -> PathSpec:
    return PathSpec.from_lines("gitwildmatch", [_anchored(p) for p in patterns])


def match_path(pattern: str, path: str) -> bool:
    """True if the relative posix `path` matches the ant-style `pattern`."""
    return bool(compile_spec((pattern,)).match_file(path))


# ---------------------------------------------------------------------
# File sets
# ---------------------------------------------------------------------

class FileSet:
    """
    Files under `base_dir` matching any include pattern and no exclude pattern.

    Example:
        FileSet("drupal", "**/*.info", "sites/all/modules/contrib/**").included_files()
    """

    def __init__(
        self,
        base_dir: str | Path,
        includes: str | Iterable[str],
        excludes: str | Iterable[str] | None = None,
        *,
        default_excludes: bool = True,
    ):
        self.base_dir = Path(base_dir)
        self.includes = split_patterns(includes) if isinstance(includes, str) else list(includes)
        if excludes is None:
            self.excludes = []
        elif isinstance(excludes, str):
            self.excludes = split_patterns(excludes)
        else:
            self.excludes = list(excludes)
        if default_excludes:
            self.excludes += DEFAULT_EXCLUDES
        self.default_excludes = default_excludes
        self._include_spec = compile_spec(tuple(self.includes))
        self._exclude_spec = compile_spec(tuple(self.excludes))

    def included_files(self) -> List[str]:
        """Sorted relative posix paths of the selected files."""
        if not self.base_dir.is_dir():
            raise FileNotFoundError(f"Base directory not found: {self.base_dir}")

        found: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.base_dir):
            if self.default_excludes:
                dirnames[:] = [d for d in dirnames if d not in _VCS_DIRS]
            rel_dir = Path(dirpath).relative_to(self.base_dir).as_posix()
            for filename in filenames:
                rel = filename if rel_dir == "." else f"{rel_dir}/{filename}"
                if self._include_spec.match_file(rel) and not self._exclude_spec.match_file(rel):
                    found.append(rel)
        return sorted(found)

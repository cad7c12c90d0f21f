"""
Exclusion patterns (shell globs matched against root-relative local paths)
"""
import os
from typing import Iterable

from pathspec import PathSpec


def normalized_relative_path(path: str, root: str) -> str:
    """Return *path* relative to *root* with forward slashes ('' for the root)."""
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return ""
    return rel.replace(os.sep, "/")


def anchored(pattern: str) -> str:
    """Pin *pattern* to the local root: ``*.txt`` -> ``/*.txt``."""
    negate = pattern.startswith("!")
    body = pattern[1:] if negate else pattern
    if not body.startswith("/"):
        body = "/" + body
    return ("!" if negate else "") + body


class ExclusionMatcher:
    """
    Decides whether a local path is excluded from deployment.

    Every pattern is matched against the whole path relative to the local
    root, so ``*.txt`` hits ``a.txt`` but not ``sub/a.txt`` (write
    ``**/*.txt`` for any depth). Directories get a trailing slash first, so a
    pattern such as ``node_modules/`` only hits directories. Patterns are
    independent: a path is excluded when any of them matches.
    """

    def __init__(self, local_root: str, patterns: Iterable[str] = ()):
        self.local_root = local_root
        self.patterns = [p for p in patterns if p and p.strip()]
        self._spec = PathSpec.from_lines("gitignore", [anchored(p) for p in self.patterns])

    def is_excluded(self, local_path: str, is_dir: bool) -> bool:
        if not self.patterns:
            return False
        rel = normalized_relative_path(local_path, self.local_root)
        if is_dir:
            rel += "/"
        return self._spec.match_file(rel)

    def __repr__(self):
        return f"ExclusionMatcher({self.local_root!r}, {self.patterns!r})"

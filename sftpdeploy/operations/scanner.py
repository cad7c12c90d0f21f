"""
Directory-level scan: one merged view of local and remote entries
"""
import asyncio
import os
import posixpath

from ..core.classifier import EntryStatus, LocalKind, RemoteKind
from ..core.session import RemoteSession
from ..errors import LocalIOError, RemotePathNotFound
from ..utils.ignore_patterns import ExclusionMatcher
from ..utils.logging import vlog

ProjectMap = dict[str, EntryStatus]


def scan_local(local_dir: str, matcher: ExclusionMatcher) -> ProjectMap:
    """Local children of *local_dir*, sorted by name, remote side unknown."""
    try:
        with os.scandir(local_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise LocalIOError(local_dir, exc) from exc

    project: ProjectMap = {}
    for entry in entries:
        try:
            is_dir = entry.is_dir()  # follows symlinks
        except OSError as exc:
            raise LocalIOError(entry.path, exc) from exc
        if matcher.is_excluded(entry.path, is_dir):
            kind = LocalKind.IGNORED
        elif is_dir:
            kind = LocalKind.DIRECTORY
        else:
            kind = LocalKind.FILE
        project[entry.name] = EntryStatus(local=kind)
    return project


async def scan(session: RemoteSession, local_dir: str, remote_dir: str,
               matcher: ExclusionMatcher, remote_present: bool = True) -> ProjectMap:
    """
    Build the ProjectMap for one directory level.

    A missing remote directory just means every entry is local-only. Remote
    names are not exclusion-filtered; each one is stat'ed (concurrently) to
    learn whether it is a file or a directory.
    """
    project = scan_local(local_dir, matcher)

    if not remote_present:
        return project
    try:
        names = await session.list(remote_dir)
    except RemotePathNotFound:
        vlog(f"[scan] {remote_dir} does not exist on remote")
        return project

    stats = await asyncio.gather(
        *(session.stat(posixpath.join(remote_dir, name)) for name in names)
    )
    for name, st in zip(names, stats):
        kind = RemoteKind.DIRECTORY if st.is_dir else RemoteKind.FILE
        if name in project:
            project[name].remote = kind
        else:
            project[name] = EntryStatus(remote=kind)
    return project

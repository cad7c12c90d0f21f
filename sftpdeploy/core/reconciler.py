"""
Recursive reconciliation of one local directory against one remote directory
"""
import asyncio
import os
import posixpath
from dataclasses import dataclass

from .classifier import Action, EntryStatus, LocalKind, Method, RemoteKind, classify
from .session import RemoteSession
from ..operations.delete import remove_remote
from ..operations.scanner import scan
from ..operations.transfer import make_remote_dir, upload
from ..utils.ignore_patterns import ExclusionMatcher, normalized_relative_path
from ..utils.reporter import Reporter


@dataclass(frozen=True)
class Entry:
    name: str
    status: EntryStatus
    local_path: str
    remote_path: str
    rel_path: str


# ── executors ────────────────────────────────────────────────────────────────

class DeployExecutor:
    """Carries out each decision against the remote tree."""

    def __init__(self, session: RemoteSession, remote_root: str, reporter: Reporter):
        self.session = session
        self.remote_root = remote_root
        self.reporter = reporter

    async def apply(self, entry: Entry, action: Action):
        if action.remove_remote_first:
            await remove_remote(self.session, entry.remote_path, self.remote_root, self.reporter)

        if action.method is Method.UPLOAD:
            await upload(self.session, entry.local_path, entry.remote_path,
                         self.reporter, entry.rel_path)
        elif action.method is Method.SYNC:
            if action.remove_remote_first or entry.status.remote is not RemoteKind.DIRECTORY:
                await make_remote_dir(self.session, entry.remote_path, self.reporter, entry.rel_path)

    def descends(self, status: EntryStatus, action: Action) -> bool:
        return action.method is Method.SYNC

    def remote_child_exists(self, status: EntryStatus, action: Action) -> bool:
        return True

    def level_done(self, rel_path: str):
        self.reporter.completed(rel_path)


class PreviewExecutor:
    """Reports each decision; never touches the remote tree."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    async def apply(self, entry: Entry, action: Action):
        self.reporter.decision(entry.rel_path, entry.status, action)

    def descends(self, status: EntryStatus, action: Action) -> bool:
        return action.method is Method.SYNC or status.local is LocalKind.DIRECTORY

    def remote_child_exists(self, status: EntryStatus, action: Action) -> bool:
        # nothing was created, so only an existing remote directory can be listed
        return status.remote is RemoteKind.DIRECTORY

    def level_done(self, rel_path: str):
        pass


# ── traversal ────────────────────────────────────────────────────────────────

class Reconciler:
    """
    Walks the local tree level by level and hands every entry to an executor.

    The same traversal drives both a real deployment and a dry run; only the
    executor differs. Siblings within a level run concurrently and the level
    fails as soon as any of them fails. For a single entry, removal of the
    remote side always finishes before the upload or mkdir starts.
    """

    def __init__(self, session: RemoteSession, matcher: ExclusionMatcher, executor,
                 local_root: str, remote_root: str):
        self.session = session
        self.matcher = matcher
        self.executor = executor
        self.local_root = local_root
        self.remote_root = remote_root

    async def reconcile(self, local_dir: str, remote_dir: str, remote_present: bool = True):
        project = await scan(self.session, local_dir, remote_dir, self.matcher, remote_present)

        entries = [
            Entry(
                name=name,
                status=status,
                local_path=os.path.join(local_dir, name),
                remote_path=posixpath.join(remote_dir, name),
                rel_path=normalized_relative_path(os.path.join(local_dir, name), self.local_root),
            )
            for name, status in project.items()
        ]
        await asyncio.gather(*(self._handle(entry) for entry in entries))

        self.executor.level_done(normalized_relative_path(local_dir, self.local_root))

    async def _handle(self, entry: Entry):
        action = classify(entry.status)
        await self.executor.apply(entry, action)
        if self.executor.descends(entry.status, action):
            await self.reconcile(
                entry.local_path, entry.remote_path,
                remote_present=self.executor.remote_child_exists(entry.status, action),
            )

"""
Per-entry status model and the decision table that turns it into an action
"""
from dataclasses import dataclass
from enum import Enum


class LocalKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"
    IGNORED = "ignored"
    ABSENT = "absent"


class RemoteKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"
    ABSENT = "absent"


class Method(str, Enum):
    UPLOAD = "upload"
    """Transfer one local file"""

    SYNC = "sync"
    """Make sure the remote directory exists, then reconcile its children"""

    NOOP = "noop"
    """No transfer"""


@dataclass
class EntryStatus:
    """Where one name of a directory level exists, and as what."""

    local: LocalKind = LocalKind.ABSENT
    remote: RemoteKind = RemoteKind.ABSENT

    def __post_init__(self):
        if self.local is LocalKind.ABSENT and self.remote is RemoteKind.ABSENT:
            raise ValueError("entry must exist locally or remotely")


@dataclass(frozen=True)
class Action:
    method: Method
    remove_remote_first: bool = False


def classify(status: EntryStatus) -> Action:
    """
    Decide what to do with one entry.

    The local kind picks the method; the remote kind only decides whether the
    remote entry has to be removed first. Excluded entries are never touched,
    even if their remote counterpart has a different type.
    """
    local, remote = status.local, status.remote

    if local is LocalKind.IGNORED:
        return Action(Method.NOOP)
    if local is LocalKind.ABSENT:
        # orphan
        return Action(Method.NOOP, remove_remote_first=True)
    if local is LocalKind.FILE:
        return Action(Method.UPLOAD, remove_remote_first=remote is RemoteKind.DIRECTORY)
    if local is LocalKind.DIRECTORY:
        return Action(Method.SYNC, remove_remote_first=remote is RemoteKind.FILE)
    raise ValueError(f"unknown local kind: {local!r}")


def describe(action: Action) -> str:
    """Short label for dry-run output, e.g. 'remove remote and upload'."""
    if action.remove_remote_first:
        if action.method is Method.NOOP:
            return "remove remote"
        return f"remove remote and {action.method.value}"
    if action.method is Method.NOOP:
        return "ignored"
    return action.method.value

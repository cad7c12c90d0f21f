"""
Reporting sink for deployment events
"""
from ..core.classifier import Action, EntryStatus, describe
from .logging import log

_LABELS = {
    "file": "file",
    "dir": "dir ",
    "ignored": "ign ",
    "absent": "    ",
}


def label(kind) -> str:
    return _LABELS[kind.value]


class Reporter:
    """Receives engine events. The base class discards them."""

    def decision(self, rel_path: str, status: EntryStatus, action: Action):
        pass

    def uploaded(self, rel_path: str):
        pass

    def directory_created(self, rel_path: str):
        pass

    def removed(self, rel_path: str, is_dir: bool):
        pass

    def completed(self, rel_path: str):
        pass


class ConsoleReporter(Reporter):
    """Prints events through the timestamped logger."""

    def decision(self, rel_path, status, action):
        log(f"[ {label(status.local)} | {label(status.remote)} ] {rel_path}")
        log(f"          -> {describe(action)}")

    def uploaded(self, rel_path):
        log(f"      file uploaded : {rel_path}")

    def directory_created(self, rel_path):
        log(f"  directory created : {rel_path}")

    def removed(self, rel_path, is_dir):
        if is_dir:
            log(f" remote dir removed : {rel_path}")
        else:
            log(f"remote file removed : {rel_path}")

    def completed(self, rel_path):
        log(f"     sync completed : {rel_path or '.'}")

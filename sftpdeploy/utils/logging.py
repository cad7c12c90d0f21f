"""
Console logging for sftpdeploy
"""
import sys
from datetime import datetime

_verbose = False


def set_verbose(verbose: bool):
    """Enable or disable vlog() output"""
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


def log(msg: str):
    """Print a message prefixed with the wall-clock time"""
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def vlog(msg: str):
    """Like log(), but only in verbose mode"""
    if _verbose:
        log(msg)


def warn(msg: str):
    """Print a warning to stderr"""
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] ⚠  {msg}", file=sys.stderr, flush=True)


def banner(*lines: str):
    """Print an untimestamped header block"""
    for line in lines:
        print(line, flush=True)
    print(flush=True)

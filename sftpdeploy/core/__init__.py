"""Core functionality (the reconciler and deployer live in their own modules)"""
from .classifier import Action, EntryStatus, LocalKind, Method, RemoteKind, classify, describe
from .session import RemoteSession, RemoteStat
from .ssh_manager import SSHManager

__all__ = [
    "Action", "EntryStatus", "LocalKind", "Method", "RemoteKind", "classify", "describe",
    "RemoteSession", "RemoteStat",
    "SSHManager",
]

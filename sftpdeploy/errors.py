"""
Error types raised by sftpdeploy
"""


class DeployError(Exception):
    """Base class for every failure that aborts a deployment."""


class ConfigurationError(DeployError):
    """Invalid settings, detected before any I/O happens."""


class TransportError(DeployError):
    """Could not connect or authenticate to the remote host."""


class RemoteIOError(DeployError):
    """A remote list/stat/upload/mkdir/remove call failed."""

    def __init__(self, op: str, path: str, reason: object = None):
        self.op = op
        self.path = path
        self.reason = reason
        msg = f"remote {op} failed: {path}"
        if reason is not None:
            msg += f" ({reason})"
        super().__init__(msg)


class RemotePathNotFound(RemoteIOError):
    """The remote path does not exist.

    The scanner treats this as "nothing on the remote side" rather than a
    failure when it is raised while listing a directory.
    """


class LocalIOError(DeployError):
    """Reading the local tree failed."""

    def __init__(self, path: str, reason: object = None):
        self.path = path
        self.reason = reason
        msg = f"local read failed: {path}"
        if reason is not None:
            msg += f" ({reason})"
        super().__init__(msg)

"""
Async facade over a paramiko SFTP channel
"""
import asyncio
import errno
import stat
from dataclasses import dataclass

import paramiko

from ..errors import LocalIOError, RemoteIOError, RemotePathNotFound


@dataclass(frozen=True)
class RemoteStat:
    is_dir: bool


def _remote_error(op: str, path: str, exc: OSError) -> RemoteIOError:
    if isinstance(exc, FileNotFoundError) or getattr(exc, "errno", None) == errno.ENOENT:
        return RemotePathNotFound(op, path, exc)
    return RemoteIOError(op, path, exc)


class RemoteSession:
    """
    The one SFTP handle shared by every remote operation of a run.

    Each primitive runs the blocking paramiko call in a worker thread so the
    event loop keeps scheduling other entries. A semaphore bounds how many of
    those calls may be in flight; paramiko's SFTPClient is not safe to drive
    from several threads at once, hence the default of one.
    """

    def __init__(self, sftp: paramiko.SFTPClient, concurrency: int = 1):
        self._sftp = sftp
        self._gate = asyncio.Semaphore(concurrency)

    async def _call(self, op: str, path: str, fn, *args):
        async with self._gate:
            try:
                return await asyncio.to_thread(fn, *args)
            except OSError as exc:
                raise _remote_error(op, path, exc) from exc
            except (paramiko.SSHException, EOFError) as exc:
                # channel dropped; there is no reconnect
                raise RemoteIOError(op, path, exc) from exc

    # ── read ────────────────────────────────────────────────────────────────

    async def list(self, path: str) -> list[str]:
        """Names of the entries in a remote directory (no '.' / '..')."""
        return await self._call("list", path, self._sftp.listdir, path)

    async def stat(self, path: str) -> RemoteStat:
        attrs = await self._call("stat", path, self._sftp.stat, path)
        return RemoteStat(is_dir=stat.S_ISDIR(attrs.st_mode or 0))

    async def lstat(self, path: str) -> RemoteStat:
        """Like stat(), but a symlink is reported as itself, never its target."""
        attrs = await self._call("lstat", path, self._sftp.lstat, path)
        return RemoteStat(is_dir=stat.S_ISDIR(attrs.st_mode or 0))

    # ── write ───────────────────────────────────────────────────────────────

    async def upload_file(self, local_path: str, remote_path: str):
        await self._call("upload", remote_path, self._put, local_path, remote_path)

    def _put(self, local_path: str, remote_path: str):
        # opened inside the gate so waiting uploads hold no file descriptors
        try:
            fl = open(local_path, "rb")
        except OSError as exc:
            raise LocalIOError(local_path, exc) from exc
        with fl:
            self._sftp.putfo(fl, remote_path)

    async def make_directory(self, path: str):
        await self._call("mkdir", path, self._sftp.mkdir, path)

    async def remove_file(self, path: str):
        await self._call("unlink", path, self._sftp.remove, path)

    async def remove_directory(self, path: str):
        """Remove an (already emptied) remote directory."""
        await self._call("rmdir", path, self._sftp.rmdir, path)

    def close(self):
        self._sftp.close()

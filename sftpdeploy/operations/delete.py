"""
Remote removal (recursive for directories)
"""
import asyncio
import posixpath

from ..core.session import RemoteSession
from ..utils.reporter import Reporter


async def remove_remote(session: RemoteSession, remote_path: str,
                        remote_root: str, reporter: Reporter):
    """
    Delete a remote file, or a remote directory and everything under it.

    Children of a directory are removed concurrently; the directory itself is
    removed only after all of them are gone. A symlink is unlinked, never
    followed.
    """
    st = await session.lstat(remote_path)
    rel = posixpath.relpath(remote_path, remote_root)

    if not st.is_dir:
        await session.remove_file(remote_path)
        reporter.removed(rel, is_dir=False)
        return

    names = await session.list(remote_path)
    await asyncio.gather(
        *(remove_remote(session, posixpath.join(remote_path, name), remote_root, reporter)
          for name in names)
    )
    await session.remove_directory(remote_path)
    reporter.removed(rel, is_dir=True)


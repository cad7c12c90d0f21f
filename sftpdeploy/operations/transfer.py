"""
Upload operations
"""
from ..core.session import RemoteSession
from ..utils.reporter import Reporter


async def upload(session: RemoteSession, local_path: str, remote_path: str,
                 reporter: Reporter, rel_path: str):
    """Transfer one local file, overwriting whatever file is at remote_path."""
    await session.upload_file(local_path, remote_path)
    reporter.uploaded(rel_path)


async def make_remote_dir(session: RemoteSession, remote_path: str,
                          reporter: Reporter, rel_path: str):
    await session.make_directory(remote_path)
    reporter.directory_created(rel_path)

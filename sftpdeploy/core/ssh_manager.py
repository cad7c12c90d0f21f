"""
SSH connection manager and the lazily-opened SFTP session
"""
import asyncio
import socket
from typing import Optional

import paramiko

from .. import config as _cfg
from ..config import DeployConfig
from ..errors import TransportError
from ..utils.logging import log, vlog
from ..utils.retry import retried
from .session import RemoteSession


class SSHManager:
    """
    Wraps paramiko SSHClient and hands out the run's single SFTP session.

    connect() must succeed before get_session() is awaited. The first
    get_session() call opens the SFTP channel; every later (or concurrent)
    caller receives the same RemoteSession. There is no reconnect: once the
    transport drops, in-flight operations fail.
    """

    def __init__(self, cfg: DeployConfig, concurrency: int = _cfg.SFTP_CONCURRENCY):
        self.cfg = cfg
        self.concurrency = concurrency
        self._ssh: Optional[paramiko.SSHClient] = None
        self._session: Optional[RemoteSession] = None
        self._opening: Optional[asyncio.Task] = None

    # ── connection ─────────────────────────────────────────────────────────

    def connect(self):
        """Open the SSH transport; raises TransportError on failure."""
        if self._ssh is not None:
            return
        cfg = self.cfg
        log(f"[SSH] connecting to {cfg.user}@{cfg.host}:{cfg.port} …")
        try:
            self._ssh = self._connect()
        except paramiko.AuthenticationException as exc:
            raise TransportError(f"authentication failed for {cfg.user}@{cfg.host}: {exc}") from exc
        except (paramiko.SSHException, OSError) as exc:
            raise TransportError(f"cannot connect to {cfg.host}:{cfg.port}: {exc}") from exc
        log("[SSH] connected ✓")

    @retried(socket.timeout, ConnectionError, paramiko.ssh_exception.NoValidConnectionsError)
    def _connect(self) -> paramiko.SSHClient:
        cfg = self.cfg
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        kw: dict = dict(hostname=cfg.host, port=cfg.port, username=cfg.user,
                        timeout=20, banner_timeout=30, auth_timeout=30)
        if cfg.key_path:
            kw["key_filename"] = cfg.key_path
        if cfg.password:
            kw["password"] = cfg.password
        if cfg.passphrase:
            kw["passphrase"] = cfg.passphrase
        try:
            client.connect(**kw)
        except BaseException:
            client.close()
            raise

        # Keep-alive: send a NOP every 30s
        client.get_transport().set_keepalive(30)
        return client

    def disconnect(self):
        """Close the SFTP channel and the SSH transport."""
        if self._session is not None:
            try:
                self._session.close()
            except (OSError, EOFError, paramiko.SSHException) as exc:
                vlog(f"[SSH] sftp close: {exc}")
        if self._ssh is not None:
            self._ssh.close()
            log("[SSH] disconnected.")
        self._ssh = None
        self._session = None
        self._opening = None

    # ── session facade ──────────────────────────────────────────────────────

    async def get_session(self) -> RemoteSession:
        if self._session is not None:
            return self._session
        if self._opening is None:
            self._opening = asyncio.ensure_future(self._open_session())
        return await self._opening

    async def _open_session(self) -> RemoteSession:
        if self._ssh is None:
            raise TransportError("not connected")
        try:
            sftp = await asyncio.to_thread(self._ssh.open_sftp)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise TransportError(f"cannot open SFTP channel: {exc}") from exc
        self._session = RemoteSession(sftp, self.concurrency)
        vlog("[SSH] sftp channel opened")
        return self._session

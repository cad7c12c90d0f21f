"""
Deployment run: connect, reconcile the whole tree, disconnect
"""
import asyncio
import sys
import traceback
from typing import Optional

from ..config import DeployConfig
from ..errors import DeployError
from ..utils.ignore_patterns import ExclusionMatcher
from ..utils.logging import banner, is_verbose, log, set_verbose, warn
from ..utils.reporter import ConsoleReporter, Reporter
from .reconciler import DeployExecutor, PreviewExecutor, Reconciler
from .ssh_manager import SSHManager


class Deployer:
    """
    One deployment of cfg.local_root onto cfg.remote_root.

    With dry_run=True the tree is scanned and every decision is reported,
    but nothing on the remote side is created, uploaded or removed.
    """

    def __init__(self, cfg: DeployConfig, dry_run: bool = False,
                 reporter: Optional[Reporter] = None,
                 manager: Optional[SSHManager] = None):
        self.cfg = cfg
        self.dry_run = dry_run
        self.reporter = reporter or ConsoleReporter()
        self.manager = manager or SSHManager(cfg)
        self.matcher = ExclusionMatcher(cfg.local_root, cfg.exclude)

    async def reconcile(self):
        session = await self.manager.get_session()
        if self.dry_run:
            executor = PreviewExecutor(self.reporter)
        else:
            executor = DeployExecutor(session, self.cfg.remote_root, self.reporter)
        reconciler = Reconciler(session, self.matcher, executor,
                                self.cfg.local_root, self.cfg.remote_root)
        await reconciler.reconcile(self.cfg.local_root, self.cfg.remote_root)

    def start(self) -> bool:
        """Connect, reconcile, and always disconnect afterwards."""
        self.manager.connect()
        try:
            asyncio.run(self.reconcile())
        finally:
            self.manager.disconnect()
        return True


def run_deploy(cfg: DeployConfig, dry_run: bool = False, verbose: bool = False):
    set_verbose(verbose)

    banner(
        f"* Deploying to host {cfg.host}",
        f"* local dir  = {cfg.local_root}",
        f"* remote dir = {cfg.remote_root}",
    )
    if dry_run:
        print("  *** DRY-RUN — no remote files will be changed ***\n")
    if cfg.exclude:
        log(f"[exclude] {len(cfg.exclude)} pattern(s): {', '.join(cfg.exclude)}")

    try:
        Deployer(cfg, dry_run=dry_run).start()
    except KeyboardInterrupt:
        print()
        warn("Interrupted by user. The remote tree may be partially updated.")
        sys.exit(130)
    except DeployError as exc:
        warn(f"Deploy failed: {exc}")
        if is_verbose():
            traceback.print_exc()
        sys.exit(1)

    log("[deploy] done ✓" if not dry_run else "[deploy] dry run done ✓")

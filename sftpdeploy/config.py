"""
Configuration for sftpdeploy
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigurationError

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS
# ══════════════════════════════════════════════════════════════════════════════

SSH_PORT = 22
SSH_USER = "root"

PROJECT_FILE = ".sftpdeploy"
IGNORE_FILE = ".deployignore"

# Connection retry settings (connect only; transfers are never retried)
RETRY_MAX = 3
RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt

# Concurrent SFTP requests allowed on one session
SFTP_CONCURRENCY = 1


@dataclass(frozen=True)
class DeployConfig:
    """Resolved settings for one deployment run."""

    host: str
    local_root: str
    remote_root: str
    port: int = SSH_PORT
    user: str = SSH_USER
    password: Optional[str] = None
    key_path: Optional[str] = None
    passphrase: Optional[str] = None
    exclude: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("no server configured")
        if not self.remote_root:
            raise ConfigurationError("no remote_root configured")
        local = os.path.abspath(os.path.expanduser(str(self.local_root)))
        if not os.path.isdir(local):
            raise ConfigurationError(f"local_root: {local} is not a directory")
        # frozen: go through object.__setattr__
        object.__setattr__(self, "local_root", _chomp(local, os.sep))
        object.__setattr__(self, "remote_root", _chomp(str(self.remote_root), "/"))
        object.__setattr__(self, "exclude", tuple(self.exclude))

    def with_exclude(self, *patterns: str) -> "DeployConfig":
        """Return a copy with extra exclusion patterns appended."""
        merged = list(self.exclude)
        merged.extend(p for p in patterns if p not in merged)
        return DeployConfig(
            host=self.host, local_root=self.local_root, remote_root=self.remote_root,
            port=self.port, user=self.user, password=self.password,
            key_path=self.key_path, passphrase=self.passphrase, exclude=tuple(merged),
        )


def _chomp(value: str, sep: str) -> str:
    """Strip trailing separators, keeping a bare root intact."""
    stripped = value.rstrip(sep)
    return stripped or sep


# ══════════════════════════════════════════════════════════════════════════════
#  GLOBAL CONFIG FILE  ── $XDG_CONFIG_HOME/sftpdeploy/config.yaml
# ══════════════════════════════════════════════════════════════════════════════

def get_global_config_dir() -> Path:
    """Return the global config directory for sftpdeploy."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "sftpdeploy"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "sftpdeploy"
    return Path.home() / ".config" / "sftpdeploy"


def load_global_config() -> dict:
    """Load global defaults; a missing or unreadable file yields {}."""
    cfg_path = get_global_config_dir() / "config.yaml"
    if not cfg_path.is_file():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}


# ══════════════════════════════════════════════════════════════════════════════
#  PROJECT CONFIG FILE  ── .sftpdeploy (searched upward)
# ══════════════════════════════════════════════════════════════════════════════

def find_project_file(start: Optional[Path] = None) -> Optional[Path]:
    """
    Search upward from *start* (default: cwd) for a .sftpdeploy YAML file.
    Returns the Path if found, or None if no parent has one.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / PROJECT_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_project_file(path: Path) -> dict:
    """Parse a .sftpdeploy YAML file and return its contents as a dict."""
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc


def get_profile(data: dict, profile_name: str = "default") -> dict:
    """
    Extract a named profile from a .sftpdeploy or config.yaml data dict.
    Falls back to the first profile if the named one is not found.
    Returns a flat profile dict merged with top-level defaults.
    """
    defaults = data.get("defaults", {}) or {}
    profiles = data.get("profiles", []) or []
    if not profiles:
        return dict(defaults)
    profile = next((p for p in profiles if p.get("name") == profile_name), None)
    if profile is None:
        profile = profiles[0]
    merged = dict(defaults)
    merged.update(profile)
    return merged


# ══════════════════════════════════════════════════════════════════════════════
#  IGNORE FILE  ── .deployignore in the local root
# ══════════════════════════════════════════════════════════════════════════════

def load_ignore_file(local_root: str) -> list[str]:
    """Read exclusion patterns from <local_root>/.deployignore, if present."""
    f = Path(local_root) / IGNORE_FILE
    if not f.is_file():
        return []
    patterns = []
    for line in f.read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY PROFILE  ── profile dict → DeployConfig
# ══════════════════════════════════════════════════════════════════════════════

def apply_profile(profile: dict, base_dir: Optional[Path] = None) -> DeployConfig:
    """
    Build a DeployConfig from a profile dict.
    Supports keys: server, port, user/username, ssh_key, ssh_password, passphrase,
                   local_root, remote_root, base_remote (prepended to remote_root
                   if remote_root is relative), exclude (list of patterns).
    A relative local_root is resolved against *base_dir* (default: cwd).
    """
    base = base_dir or Path.cwd()
    local_root = Path(str(profile.get("local_root", "."))).expanduser()
    if not local_root.is_absolute():
        local_root = base / local_root

    rr = str(profile.get("remote_root", ""))
    remote_base = str(profile.get("base_remote", "") or "").rstrip("/")
    if remote_base and rr and not rr.startswith("/"):
        rr = f"{remote_base}/{rr}"

    exclude = profile.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]

    try:
        port = int(profile.get("port", SSH_PORT))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"port must be a number, got {profile.get('port')!r}") from exc

    cfg = DeployConfig(
        host=str(profile.get("server", "") or ""),
        port=port,
        user=str(profile.get("user") or profile.get("username") or SSH_USER),
        password=profile.get("ssh_password") or None,
        key_path=str(profile["ssh_key"]) if profile.get("ssh_key") else None,
        passphrase=profile.get("passphrase") or None,
        local_root=str(local_root),
        remote_root=rr,
        exclude=tuple(str(p) for p in exclude),
    )
    return cfg.with_exclude(*load_ignore_file(cfg.local_root))

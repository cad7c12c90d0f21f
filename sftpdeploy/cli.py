#!/usr/bin/env python3
"""
sftpdeploy  —  Mirror a local directory onto a remote host over SFTP
====================================================================

Subcommands:
  init      Create a .sftpdeploy config file in the current directory.
  deploy    Make the remote directory match the local one (or preview it).
  show      Print the resolved settings of a profile.

Run 'sftpdeploy <subcommand> --help' for more details.
"""
import sys
import argparse
from pathlib import Path

DEFAULT_IGNORE = """# sftpdeploy exclusion patterns (shell globs, relative to the local root)
# A trailing slash matches directories only; use **/ to match at any depth.
.git/
.idea/
.vscode/
**/node_modules/
**/__pycache__/
**/*.pyc
**/*.swp
**/.DS_Store
.sftpdeploy
.deployignore
"""


# ── init ─────────────────────────────────────────────────────────────────────

def cmd_init(args):
    """Create a .sftpdeploy profile file in the current directory."""
    from sftpdeploy import config as _cfg

    target = Path.cwd() / _cfg.PROJECT_FILE

    if target.exists() and not args.force:
        print(f"error: {_cfg.PROJECT_FILE} already exists in {Path.cwd()}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        sys.exit(1)

    global_cfg = _cfg.load_global_config()
    g_defaults = global_cfg.get("defaults", {}) or {}

    local_root = str(Path(args.local or ".").expanduser())

    remote_root = args.remote
    if not remote_root and sys.stdin.isatty():
        remote_root = input("Remote path (absolute, or relative to base_remote): ").strip()
    if not remote_root:
        print("error: remote path is required (--remote).", file=sys.stderr)
        sys.exit(1)

    server = args.server or g_defaults.get("server", "")
    if not args.server and sys.stdin.isatty():
        val = input(f"Server hostname [{server}]: ").strip()
        if val:
            server = val
    if not server:
        print("error: server is required (--server).", file=sys.stderr)
        sys.exit(1)

    user = args.user or g_defaults.get("user", _cfg.SSH_USER)
    port = args.port or int(g_defaults.get("port", _cfg.SSH_PORT))
    base_remote = args.base_remote or g_defaults.get("base_remote", "")
    profile_name = args.profile or "default"

    def _yq(value: str) -> str:
        """Wrap a string in YAML single quotes, escaping embedded single quotes."""
        return "'" + value.replace("'", "''") + "'"

    lines = [
        f"# {_cfg.PROJECT_FILE} — sftpdeploy project configuration",
        "#",
        "# profiles: list of deploy targets for this project.",
        "# remote_root is relative to defaults.base_remote when it does not start with '/'.",
        "# exclude: extra patterns on top of .deployignore.",
        "profiles:",
        f"  - name: {profile_name}",
        f"    server: {_yq(server)}",
        f"    port: {port}",
        f"    user: {_yq(user)}",
        f"    local_root: {_yq(local_root.replace(chr(92), '/'))}",
        f"    remote_root: {_yq(remote_root)}",
        "    exclude: []",
    ]
    if base_remote:
        lines += [
            "defaults:",
            f"  base_remote: {_yq(base_remote)}",
        ]
    content = "\n".join(lines) + "\n"

    ignore_path = Path.cwd() / _cfg.IGNORE_FILE

    if args.dry_run:
        print(f"[dry-run] Would write {target}:")
        print(content)
        if not ignore_path.exists():
            print(f"[dry-run] Would write {ignore_path}:")
            print(DEFAULT_IGNORE)
        return

    target.write_text(content, encoding="utf-8")
    print(f"Created {target}")

    if not ignore_path.exists():
        ignore_path.write_text(DEFAULT_IGNORE, encoding="utf-8")
        print(f"Created {ignore_path}")
    elif args.verbose:
        print(f"{ignore_path} already exists; not modified.")

    if args.verbose:
        print(content)


# ── profile loading ──────────────────────────────────────────────────────────

def _load_config(args):
    """Resolve the nearest .sftpdeploy into a DeployConfig, or exit."""
    import sftpdeploy.config as _cfg
    from sftpdeploy.errors import ConfigurationError

    project_file = _cfg.find_project_file()
    if project_file is None:
        print(f"error: no {_cfg.PROJECT_FILE} file found in this directory or any parent.",
              file=sys.stderr)
        print("Run 'sftpdeploy init' to create one.", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        print(f"[config] Using {project_file}")

    try:
        data = _cfg.load_project_file(project_file)
        profile = _cfg.get_profile(data, args.profile or "default")
        cfg = _cfg.apply_profile(profile, base_dir=project_file.parent)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    extra = getattr(args, "exclude", None) or []
    if extra:
        cfg = cfg.with_exclude(*extra)
    return profile, cfg


# ── deploy ───────────────────────────────────────────────────────────────────

def cmd_deploy(args):
    """Deploy using the nearest .sftpdeploy config file."""
    from sftpdeploy.core.sync_engine import run_deploy

    _, cfg = _load_config(args)
    run_deploy(cfg, dry_run=args.dry_run, verbose=args.verbose)


# ── show ─────────────────────────────────────────────────────────────────────

def cmd_show(args):
    """Print the resolved profile."""
    profile, cfg = _load_config(args)

    print(f"\nProfile : {profile.get('name', 'default')}")
    print(f"Local   : {cfg.local_root}")
    print(f"Remote  : {cfg.user}@{cfg.host}:{cfg.port}:{cfg.remote_root}")
    if cfg.exclude:
        print("Exclude :")
        for pattern in cfg.exclude:
            print(f"  {pattern}")
    else:
        print("Exclude : (none)")


# ── main ──────────────────────────────────────────────────────────────────────

def main(argv=None):
    """CLI entry point for sftpdeploy"""
    parser = argparse.ArgumentParser(
        prog="sftpdeploy",
        description="Mirror a local directory onto a remote host over SFTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ── init ──────────────────────────────────────────────────────────────────
    init_p = subparsers.add_parser(
        "init",
        help="Create a .sftpdeploy config file in the current directory",
        description="Create a .sftpdeploy YAML config file for this project.",
    )
    init_p.add_argument("--local", metavar="PATH",
                        help="Local root directory (default: current directory)")
    init_p.add_argument("--remote", metavar="PATH",
                        help="Remote root path (relative to base_remote or absolute)")
    init_p.add_argument("--server", metavar="HOST",
                        help="Remote server hostname or IP")
    init_p.add_argument("--user", metavar="NAME",
                        help="SSH username (default: root)")
    init_p.add_argument("--port", type=int, metavar="N",
                        help="SSH port (default: 22)")
    init_p.add_argument("--base-remote", metavar="PATH",
                        help="Base remote path prepended to relative remote roots")
    init_p.add_argument("--profile", metavar="NAME", default="default",
                        help="Profile name to create (default: default)")
    init_p.add_argument("--force", action="store_true",
                        help="Overwrite existing .sftpdeploy")
    init_p.add_argument("-n", "--dry-run", action="store_true",
                        help="Preview without writing files")
    init_p.add_argument("-v", "--verbose", action="store_true",
                        help="Show extra output")

    # ── deploy ────────────────────────────────────────────────────────────────
    deploy_p = subparsers.add_parser(
        "deploy",
        help="Make the remote directory match the local one",
        description="Upload new and changed entries, remove remote orphans.",
    )
    deploy_p.add_argument("--profile", metavar="NAME", default="default",
                          help="Profile to use (default: default)")
    deploy_p.add_argument("-n", "--dry-run", action="store_true",
                          help="Report every decision without changing the remote")
    deploy_p.add_argument("-v", "--verbose", action="store_true",
                          help="Show extra output")
    deploy_p.add_argument("-x", "--exclude", action="append", metavar="PATTERN",
                          help="Extra exclusion pattern (repeatable)")

    # ── show ──────────────────────────────────────────────────────────────────
    show_p = subparsers.add_parser(
        "show",
        help="Print the resolved settings of a profile",
        description="Show the settings deploy would use.",
    )
    show_p.add_argument("--profile", metavar="NAME", default="default",
                        help="Profile to use (default: default)")
    show_p.add_argument("-v", "--verbose", action="store_true",
                        help="Show extra output")
    show_p.add_argument("-x", "--exclude", action="append", metavar="PATTERN",
                        help="Extra exclusion pattern (repeatable)")

    args = parser.parse_args(argv)

    if args.command == "init":
        cmd_init(args)
    elif args.command == "deploy":
        cmd_deploy(args)
    elif args.command == "show":
        cmd_show(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

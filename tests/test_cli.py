"""
Integration tests for sftpdeploy configuration and CLI behaviour.

Tests:
  - .sftpdeploy discovery: searching parent directories upward
  - config loading: get_profile / apply_profile produce a DeployConfig
  - DeployConfig validation: bad local roots fail before any I/O
  - sftpdeploy init / show: subprocess runs of the CLI
"""
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

import yaml


# ── Helpers ───────────────────────────────────────────────────────────────────

REPO_ROOT = Path(__file__).parent.parent


def run_cli(*args, cwd=None, input_text=None):
    """Run the sftpdeploy CLI and return (returncode, stdout, stderr)."""
    result = subprocess.run(
        [sys.executable, "-m", "sftpdeploy", *args],
        cwd=str(cwd or REPO_ROOT),
        capture_output=True,
        text=True,
        input=input_text,
        env={**os.environ, "PYTHONPATH": str(REPO_ROOT),
             "XDG_CONFIG_HOME": str(Path(cwd or REPO_ROOT) / ".no-global-config")},
    )
    return result.returncode, result.stdout, result.stderr


# ── Tests: .sftpdeploy discovery ─────────────────────────────────────────────

class TestFindProjectFile(unittest.TestCase):
    """Tests for find_project_file() — upward search through parent directories."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name).resolve()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_find_in_same_directory(self):
        """find_project_file finds .sftpdeploy in the start directory."""
        from sftpdeploy.config import find_project_file
        (self.root / ".sftpdeploy").write_text("profiles: []\n", encoding="utf-8")
        self.assertEqual(find_project_file(self.root), self.root / ".sftpdeploy")

    def test_find_in_parent_directory(self):
        """find_project_file searches upward and finds .sftpdeploy in a parent."""
        from sftpdeploy.config import find_project_file
        (self.root / ".sftpdeploy").write_text("profiles: []\n", encoding="utf-8")
        subdir = self.root / "a" / "b" / "c"
        subdir.mkdir(parents=True)
        self.assertEqual(find_project_file(subdir), self.root / ".sftpdeploy")

    def test_finds_nearest(self):
        """find_project_file returns the nearest (deepest) .sftpdeploy."""
        from sftpdeploy.config import find_project_file
        (self.root / ".sftpdeploy").write_text("profiles: []\n", encoding="utf-8")
        sub_a = self.root / "a"
        sub_a.mkdir()
        (sub_a / ".sftpdeploy").write_text("profiles: []\n", encoding="utf-8")
        deep = sub_a / "b" / "c"
        deep.mkdir(parents=True)
        self.assertEqual(find_project_file(deep), sub_a / ".sftpdeploy")


# ── Tests: config loading ─────────────────────────────────────────────────────

class TestLoadProfile(unittest.TestCase):
    """Tests for load_project_file, get_profile and apply_profile."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name).resolve()
        (self.root / "site").mkdir()

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, content):
        p = self.root / ".sftpdeploy"
        p.write_text(content, encoding="utf-8")
        return p

    def test_load_profile_basic(self):
        """apply_profile sets host, port, roots and excludes."""
        import sftpdeploy.config as cfg
        p = self._write(
            "profiles:\n"
            "  - name: default\n"
            "    server: myhost.example.com\n"
            "    port: 2222\n"
            "    local_root: site\n"
            "    remote_root: /var/www/\n"
            "    exclude: ['*.log', 'cache/']\n"
        )
        data = cfg.load_project_file(p)
        c = cfg.apply_profile(cfg.get_profile(data, "default"), base_dir=self.root)
        self.assertEqual(c.host, "myhost.example.com")
        self.assertEqual(c.port, 2222)
        self.assertEqual(c.local_root, str(self.root / "site"))
        self.assertEqual(c.remote_root, "/var/www")
        self.assertEqual(c.exclude, ("*.log", "cache/"))

    def test_base_remote_prepended(self):
        """apply_profile prepends base_remote to a relative remote_root."""
        import sftpdeploy.config as cfg
        p = self._write(
            "profiles:\n"
            "  - name: default\n"
            "    server: host\n"
            "    local_root: site\n"
            "    remote_root: projects/myrepo\n"
            "defaults:\n"
            "  base_remote: /home/user\n"
        )
        c = cfg.apply_profile(cfg.get_profile(cfg.load_project_file(p)), base_dir=self.root)
        self.assertEqual(c.remote_root, "/home/user/projects/myrepo")
        self.assertEqual(c.port, 22)
        self.assertEqual(c.user, "root")

    def test_get_profile_by_name_and_fallback(self):
        import sftpdeploy.config as cfg
        data = {"profiles": [{"name": "dev", "server": "dev.example.com"},
                             {"name": "prod", "server": "prod.example.com"}]}
        self.assertEqual(cfg.get_profile(data, "prod")["server"], "prod.example.com")
        self.assertEqual(cfg.get_profile(data, "nonexistent")["server"], "dev.example.com")

    def test_deployignore_merged(self):
        """Patterns from .deployignore are appended after profile excludes."""
        import sftpdeploy.config as cfg
        (self.root / "site" / ".deployignore").write_text("*.tmp\n*.log\n", encoding="utf-8")
        c = cfg.apply_profile({"server": "h", "local_root": "site", "remote_root": "/r",
                               "exclude": ["*.log"]}, base_dir=self.root)
        self.assertEqual(c.exclude, ("*.log", "*.tmp"))

    def test_broken_yaml_is_configuration_error(self):
        import sftpdeploy.config as cfg
        from sftpdeploy.errors import ConfigurationError
        p = self._write("profiles: [unclosed\n")
        with self.assertRaises(ConfigurationError):
            cfg.load_project_file(p)


class TestDeployConfigValidation(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_local_root_must_be_directory(self):
        from sftpdeploy.config import DeployConfig
        from sftpdeploy.errors import ConfigurationError
        f = self.root / "file.txt"
        f.write_text("x", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            DeployConfig(host="h", local_root=str(f), remote_root="/r")
        with self.assertRaises(ConfigurationError):
            DeployConfig(host="h", local_root=str(self.root / "missing"), remote_root="/r")

    def test_host_required(self):
        from sftpdeploy.config import DeployConfig
        from sftpdeploy.errors import ConfigurationError
        with self.assertRaises(ConfigurationError):
            DeployConfig(host="", local_root=str(self.root), remote_root="/r")

    def test_trailing_separators_stripped(self):
        from sftpdeploy.config import DeployConfig
        c = DeployConfig(host="h", local_root=str(self.root) + os.sep, remote_root="/var/www//")
        self.assertFalse(c.local_root.endswith(os.sep))
        self.assertEqual(c.remote_root, "/var/www")
        self.assertEqual(DeployConfig(host="h", local_root=str(self.root), remote_root="/").remote_root, "/")


# ── Tests: sftpdeploy init / show ─────────────────────────────────────────────

class TestInitCommand(unittest.TestCase):
    """Tests for the 'sftpdeploy init' subcommand."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cwd = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_init_creates_files(self):
        """'sftpdeploy init' creates .sftpdeploy and .deployignore."""
        rc, out, err = run_cli(
            "init",
            "--server", "myhost.com",
            "--port", "22",
            "--remote", "projects/test",
            "--base-remote", "/home/user",
            cwd=self.cwd,
        )
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        content = (self.cwd / ".sftpdeploy").read_text(encoding="utf-8")
        self.assertIn("myhost.com", content)
        self.assertIn("projects/test", content)
        self.assertIn("/home/user", content)
        self.assertTrue((self.cwd / ".deployignore").exists())

    def test_init_refuses_overwrite(self):
        (self.cwd / ".sftpdeploy").write_text("profiles: []\n", encoding="utf-8")
        rc, out, err = run_cli("init", "--server", "myhost.com", "--remote", "/x", cwd=self.cwd)
        self.assertNotEqual(rc, 0)
        self.assertIn("already exists", err)

    def test_init_force_overwrites(self):
        target = self.cwd / ".sftpdeploy"
        target.write_text("profiles: []\n", encoding="utf-8")
        rc, out, err = run_cli("init", "--server", "newhost.com", "--remote", "/x",
                               "--force", cwd=self.cwd)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        self.assertIn("newhost.com", target.read_text(encoding="utf-8"))

    def test_init_dry_run_does_not_write(self):
        rc, out, err = run_cli("init", "--server", "myhost.com", "--remote", "/x",
                               "--dry-run", cwd=self.cwd)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        self.assertFalse((self.cwd / ".sftpdeploy").exists())
        self.assertFalse((self.cwd / ".deployignore").exists())
        self.assertIn("dry-run", out)

    def test_init_creates_valid_yaml(self):
        rc, out, err = run_cli("init", "--server", "myhost.com", "--port", "2222",
                               "--remote", "/absolute/remote", cwd=self.cwd)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        data = yaml.safe_load((self.cwd / ".sftpdeploy").read_text(encoding="utf-8"))
        self.assertEqual(data["profiles"][0]["server"], "myhost.com")
        self.assertEqual(data["profiles"][0]["port"], 2222)
        self.assertEqual(data["profiles"][0]["exclude"], [])

    def test_show_after_init(self):
        """'sftpdeploy show' resolves the profile written by init."""
        rc, _, err = run_cli("init", "--server", "myhost.com", "--remote", "/var/www",
                             cwd=self.cwd)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        rc, out, err = run_cli("show", "-x", "*.bak", cwd=self.cwd)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        self.assertIn("myhost.com", out)
        self.assertIn("/var/www", out)
        self.assertIn("node_modules/", out)
        self.assertIn("*.bak", out)

    def test_deploy_without_config(self):
        rc, out, err = run_cli("deploy", "--dry-run", cwd=self.cwd)
        self.assertNotEqual(rc, 0)
        self.assertIn("sftpdeploy init", err)


if __name__ == "__main__":
    unittest.main()

"""
Tests for CLI commands — packs, packages, tool-version, mise-config, manifest check.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.main import cli


@pytest.fixture
def run(packages_yaml: Path, monkeypatch):
    """Invoke the CLI against the sample manifest on a plain Ubuntu host."""
    for var in (
        "DEVBASE_PACKAGES_YAML",
        "DEVBASE_PACKAGES_CUSTOM_YAML",
        "DEVBASE_SELECTED_PACKS",
    ):
        monkeypatch.delenv(var, raising=False)

    def _run(*args: str, packs: str | None = "java", extra: tuple[str, ...] = ()):
        base = ["--manifest", str(packages_yaml), "--no-wsl", "--pkg-manager", "apt", "--app-store", "snap"]
        if packs is not None:
            base += ["--packs", packs]
        runner = CliRunner()
        return runner.invoke(cli, [*base, *extra, *args])

    return _run


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "devbase" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_manifest(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", str(tmp_path / "nope.yaml"), "packs", "list"])
        assert result.exit_code == 1
        assert "not found" in result.output
        assert "nope.yaml" in result.output

    def test_invalid_manifest(self, tmp_path: Path):
        bad = tmp_path / "packages.yaml"
        bad.write_text("core: [")
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", str(bad), "packages", "mise"])
        assert result.exit_code == 1
        assert "Invalid package manifest" in result.output

    def test_env_var_manifest(self, packages_yaml: Path, monkeypatch):
        monkeypatch.setenv("DEVBASE_PACKAGES_YAML", str(packages_yaml))
        monkeypatch.setenv("DEVBASE_SELECTED_PACKS", "node")
        runner = CliRunner()
        result = runner.invoke(cli, ["tool-version", "node"])
        assert result.exit_code == 0
        assert result.output.strip() == "22"


class TestPacksCommands:
    def test_list(self, run):
        result = run("packs", "list")
        assert result.exit_code == 0
        assert "[x] java" in result.output
        assert "[ ] node" in result.output

    def test_list_json(self, run):
        result = run("packs", "list", "--json")
        data = json.loads(result.output)
        assert data[1] == {"name": "node", "description": "Node.js development"}

    def test_show(self, run):
        result = run("packs", "show", "java")
        assert result.exit_code == 0
        assert "- maven" in result.output
        assert "vscjava.vscode-java-pack (VS Code)" in result.output
        assert "+ 2 system packages" in result.output

    def test_show_no_vscode_json(self, run):
        result = run("packs", "show", "java", "--no-vscode", "--json")
        data = json.loads(result.output)
        assert data["contents"] == ["java", "maven", "intellij", "+ 2 system packages"]

    def test_show_unknown(self, run):
        result = run("packs", "show", "cobol")
        assert result.exit_code == 0
        assert "not defined" in result.output


class TestPackagesCommand:
    def test_system(self, run):
        result = run("packages", "system")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "curl", "git", "build-essential", "wslu", "unzip", "default-jdk",
        ]

    def test_wsl_filters(self, run):
        result = run("packages", "apt", extra=("--wsl",))
        assert "wslu" not in result.output.splitlines()

    def test_snap_pipe_format(self, run):
        result = run("packages", "snap")
        assert result.output.splitlines() == ["firefox|", "code|--classic"]

    def test_app_store_none(self, run):
        result = run("packages", "app-store", extra=("--app-store", "none"))
        assert result.exit_code == 0
        assert result.output == ""

    def test_custom_pipe_format(self, run):
        result = run("packages", "custom")
        assert "dbeaver|25.2.0|install_dbeaver|@optional,@skip-wsl" in result.output.splitlines()

    def test_mise_json(self, run):
        result = run("packages", "mise", "--json")
        data = json.loads(result.output)
        assert data[0] == {"key": "aqua:junegunn/fzf", "version": "v0.67.0"}

    def test_default_selects_all_packs(self, run):
        result = run("packages", "mise", packs=None)
        keys = [line.split("|")[0] for line in result.output.splitlines()]
        assert "java" in keys and "node" in keys and "python" in keys

    def test_empty_selection(self, run):
        result = run("packages", "mise", packs="")
        keys = [line.split("|")[0] for line in result.output.splitlines()]
        assert keys == ["aqua:junegunn/fzf", "just", "yq"]

    def test_unknown_channel(self, run):
        result = run("packages", "brew")
        assert result.exit_code == 2


class TestToolVersion:
    def test_known(self, run):
        result = run("tool-version", "maven")
        assert result.output.strip() == "3.9.11"

    def test_unknown_is_empty(self, run):
        result = run("tool-version", "nope")
        assert result.exit_code == 0
        assert result.output == ""


class TestMiseConfigCommand:
    def test_writes(self, run, tmp_path: Path):
        dest = tmp_path / "config.toml"
        result = run("mise-config", str(dest))
        assert result.exit_code == 0
        assert 'java = "temurin-21"' in dest.read_text()
        assert str(dest) in result.output

    def test_template(self, run, tmp_path: Path, fixtures_dir: Path):
        dest = tmp_path / "config.toml"
        result = run("mise-config", str(dest), "--template", str(fixtures_dir / "mise-template.toml"))
        assert result.exit_code == 0
        assert 'CUSTOM_VAR = "from-template"' in dest.read_text()

    def test_unwritable_output(self, run, tmp_path: Path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        result = run("mise-config", str(blocker / "config.toml"))
        assert result.exit_code == 1
        assert "❌ Cannot generate mise config" in result.output

    def test_undecodable_template(self, run, tmp_path: Path):
        template = tmp_path / "template.toml"
        template.write_bytes(b"\xff\xfe[settings]\n")
        result = run("mise-config", str(tmp_path / "config.toml"), "--template", str(template))
        assert result.exit_code == 1
        assert "❌ Cannot read mise config template" in result.output
        assert not (tmp_path / "config.toml").exists()


class TestManifestCheck:
    def test_valid(self, run):
        result = run("manifest", "check")
        assert result.exit_code == 0
        assert "Manifest is valid" in result.output
        # yq has no version
        assert "mise tool 'core.mise.yq'" in result.output

    def test_json(self, run):
        result = run("manifest", "check", "--json", packs="java cobol")
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["pack_count"] == 3
        assert "Selected pack 'cobol' is not defined" in data["warnings"]

    def test_invalid(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", str(tmp_path / "nope.yaml"), "manifest", "check"])
        assert result.exit_code == 1
        assert "Manifest errors" in result.output

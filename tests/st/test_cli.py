"""CLI 端到端测试（click CliRunner）"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from distkit.cli import main
from distkit.services.container import reset_container


@pytest.fixture()
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    import distkit.cli as cli_mod
    import distkit.core.config as cfgmod

    # init_config 会替换全局配置，测试结束后由 monkeypatch 还原
    monkeypatch.setattr(cfgmod, "_current", None)
    monkeypatch.setattr(cli_mod, "setup_logging", lambda **kwargs: None)
    (tmp_path / "composer.json").write_text(json.dumps({
        "name": "acme/app",
        "require": {"acme/core": "1.0.0", "acme/blog": "1.0.0"},
    }), encoding="utf-8")
    installed = tmp_path / "vendor" / "composer" / "installed.json"
    installed.parent.mkdir(parents=True)
    installed.write_text(json.dumps([
        {"name": "acme/core", "version": "1.0.0"},
        {"name": "acme/blog", "version": "1.0.0", "require": {"acme/core": "^1.0"}},
    ]), encoding="utf-8")
    (tmp_path / "packages.json").write_text(json.dumps({"packages": {
        "acme/shop": {"2.0.0": {"require": {"acme/core": "*", "php": ">=8.0"}}},
    }}), encoding="utf-8")
    cfg = tmp_path / "distkit.yml"
    cfg.write_text(yaml.dump({
        "manifest": str(tmp_path / "composer.json"),
        "installed_file": str(installed),
        "vendor_dir": str(tmp_path / "vendor"),
        "repositories": [str(tmp_path / "packages.json")],
    }), encoding="utf-8")
    reset_container()
    yield str(cfg)
    reset_container()


def _invoke(config_file: str, *args: str, **kwargs):
    return CliRunner().invoke(main, ["-c", config_file, *args], **kwargs)


class TestQueryCommands:
    def test_installed(self, config_file: str) -> None:
        result = _invoke(config_file, "installed")
        assert result.exit_code == 0
        assert "acme/core" in result.output
        assert "acme/blog" in result.output

    def test_available(self, config_file: str) -> None:
        result = _invoke(config_file, "available")
        assert result.exit_code == 0
        assert "acme/shop" in result.output

    def test_requirements(self, config_file: str) -> None:
        result = _invoke(config_file, "requirements", "acme/shop")
        assert result.exit_code == 0
        assert "acme/core" in result.output
        assert "php" not in result.output

    def test_dependents(self, config_file: str) -> None:
        result = _invoke(config_file, "dependents", "acme/core")
        assert result.exit_code == 0
        assert "acme/blog" in result.output

    def test_show_not_found(self, config_file: str) -> None:
        result = _invoke(config_file, "show", "ghost/pkg")
        assert result.exit_code != 0
        assert "PACKAGE_NOT_FOUND" in result.output


class TestUninstallCommand:
    def test_abort_when_dependents_exist(self, config_file: str, tmp_path: Path) -> None:
        result = _invoke(config_file, "uninstall", "acme/core", input="n\n")
        assert result.exit_code != 0
        assert "acme/blog" in result.output
        manifest = json.loads((tmp_path / "composer.json").read_text(encoding="utf-8"))
        assert "acme/core" in manifest["require"]

    def test_uninstall_with_yes(self, config_file: str, tmp_path: Path) -> None:
        result = _invoke(config_file, "uninstall", "acme/blog", "-y")
        assert result.exit_code == 0
        assert "acme/blog" in result.output
        manifest = json.loads((tmp_path / "composer.json").read_text(encoding="utf-8"))
        assert manifest["require"] == {"acme/core": "1.0.0"}


def test_config_command(config_file: str) -> None:
    result = _invoke(config_file, "config")
    assert result.exit_code == 0
    assert "installed_file" in result.output

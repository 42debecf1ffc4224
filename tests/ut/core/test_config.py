"""Config 单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

import distkit.core.config as cfgmod
from distkit.core.config import Config
from distkit.core.exceptions import ConfigError


def _write(tmp_path: Path, data: dict) -> str:
    p = tmp_path / "distkit.yml"
    p.write_text(yaml.dump(data), encoding="utf-8")
    return str(p)


class TestConfig:
    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "none.yml"))
        assert cfg.manifest == "composer.json"
        assert cfg.repositories == []

    def test_known_and_extra_keys(self, tmp_path: Path) -> None:
        cfg = Config.from_file(_write(tmp_path, {
            "manifest": "app/composer.json",
            "lock_timeout": 5,
            "team": "platform",
        }))
        assert cfg.manifest == "app/composer.json"
        assert cfg.lock_timeout == 5
        assert cfg.extra == {"team": "platform"}

    def test_repository_paths(self) -> None:
        cfg = Config(repositories=["a.json", {"path": "b.json", "name": "mirror"}])
        assert cfg.repository_paths() == ["a.json", "b.json"]

    def test_invalid_repository_entry(self) -> None:
        with pytest.raises(ConfigError):
            Config(repositories=[{"name": "no-path"}]).repository_paths()

    def test_repositories_must_be_list(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            Config.from_file(_write(tmp_path, {"repositories": "a.json"}))

    def test_init_config_sets_global(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(cfgmod, "_current", None)
        cfgmod.init_config(_write(tmp_path, {"vendor_dir": "libs"}))
        assert cfgmod.get_config().vendor_dir == "libs"

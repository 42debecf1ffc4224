"""ManifestEditor 单元测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from distkit.core.exceptions import ManifestError
from distkit.core.manifest import ManifestEditor
from distkit.utils.locking import lock_path_for


def _manifest(tmp_path: Path, data: dict) -> Path:
    p = tmp_path / "composer.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


class TestRead:
    def test_missing_file(self, tmp_path: Path) -> None:
        editor = ManifestEditor(tmp_path / "composer.json")
        assert editor.load() == {}
        assert editor.get_requirements() == {}

    def test_root_package(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {"name": "acme/app", "require": {"acme/core": "1.0"}})
        root = ManifestEditor(p).load_root_package()
        assert root.get_name() == "acme/app"
        assert root.get_requires()["acme/core"].constraint == "1.0"

    def test_corrupt_file(self, tmp_path: Path) -> None:
        p = tmp_path / "composer.json"
        p.write_text("{broken", encoding="utf-8")
        with pytest.raises(ManifestError):
            ManifestEditor(p).load()


class TestAddRequirement:
    def test_add_keeps_other_keys(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {
            "name": "acme/app",
            "require": {"a": "1.0", "b": "2.0"},
            "extra": {"keep": True},
        })
        ManifestEditor(p).add_requirement("new/pkg", "1.2.0")
        doc = json.loads(p.read_text(encoding="utf-8"))
        assert doc["require"] == {"a": "1.0", "b": "2.0", "new/pkg": "1.2.0"}
        assert doc["name"] == "acme/app"
        assert doc["extra"] == {"keep": True}

    def test_overwrite_existing(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {"require": {"a": "1.0"}})
        ManifestEditor(p).add_requirement("a", "2.0")
        assert ManifestEditor(p).get_requirements() == {"a": "2.0"}

    def test_creates_missing_manifest(self, tmp_path: Path) -> None:
        p = tmp_path / "composer.json"
        ManifestEditor(p).add_requirement("a", "1.0")
        assert json.loads(p.read_text(encoding="utf-8")) == {"require": {"a": "1.0"}}

    def test_empty_php_array_require(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {"require": []})
        ManifestEditor(p).add_requirement("a", "1.0")
        assert ManifestEditor(p).get_requirements() == {"a": "1.0"}

    def test_invalid_require_section(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {"require": "a"})
        before = p.read_bytes()
        with pytest.raises(ManifestError):
            ManifestEditor(p).add_requirement("b", "1.0")
        assert p.read_bytes() == before

    def test_yaml_manifest(self, tmp_path: Path) -> None:
        p = tmp_path / "manifest.yml"
        p.write_text(yaml.dump({"require": {"a": "1.0"}}), encoding="utf-8")
        ManifestEditor(p).add_requirement("b", "2.0")
        assert yaml.safe_load(p.read_text(encoding="utf-8")) == {
            "require": {"a": "1.0", "b": "2.0"},
        }

    def test_lock_timeout_surfaces_as_manifest_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        import contextlib

        import distkit.core.manifest as manifest_mod

        @contextlib.contextmanager
        def busy_lock(path, timeout=30):
            raise TimeoutError(f"等待文件锁超时: {lock_path_for(Path(path))}")
            yield  # pragma: no cover

        monkeypatch.setattr(manifest_mod, "exclusive_lock", busy_lock)
        p = _manifest(tmp_path, {"require": {}})
        with pytest.raises(ManifestError, match="超时"):
            ManifestEditor(p).add_requirement("a", "1.0")


class TestRemoveRequirements:
    def test_batch_remove(self, tmp_path: Path) -> None:
        p = _manifest(tmp_path, {"require": {"a": "1", "b": "2", "c": "3"}})
        removed = ManifestEditor(p).remove_requirements(["a", "c", "missing"])
        assert removed == ["a", "c"]
        assert ManifestEditor(p).get_requirements() == {"b": "2"}

    def test_single_write(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import distkit.core.manifest as manifest_mod

        writes: list[dict] = []
        real_save = manifest_mod.save_document

        def counting_save(path, data) -> None:
            writes.append(json.loads(json.dumps(data)))
            real_save(path, data)

        monkeypatch.setattr(manifest_mod, "save_document", counting_save)
        p = _manifest(tmp_path, {"require": {"a": "1", "b": "2"}})
        ManifestEditor(p).remove_requirements(["a", "b"])
        assert writes == [{"require": {}}]

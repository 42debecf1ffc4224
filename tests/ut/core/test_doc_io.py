"""doc_io 文档读写单元测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from distkit.utils.doc_io import (
    MAX_DOCUMENT_SIZE,
    atomic_write,
    load_document,
    load_json,
    load_yaml,
    save_document,
)


class TestLoad:
    def test_missing_files(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "none.yml") == {}
        assert load_json(tmp_path / "none.json") is None
        assert load_document(tmp_path / "none.json") == {}

    def test_empty_json(self, tmp_path: Path) -> None:
        p = tmp_path / "empty.json"
        p.write_text("  \n", encoding="utf-8")
        assert load_json(p) is None

    def test_yaml_non_dict_returns_empty(self, tmp_path: Path) -> None:
        p = tmp_path / "list.yml"
        p.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml(p) == {}

    def test_json_top_level_must_be_object(self, tmp_path: Path) -> None:
        p = tmp_path / "list.json"
        p.write_text("[1, 2]", encoding="utf-8")
        assert load_json(p) == [1, 2]
        with pytest.raises(ValueError):
            load_document(p)

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.json"
        p.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_json(p)

    def test_oversized_file_rejected(self, tmp_path: Path) -> None:
        p = tmp_path / "big.json"
        p.write_bytes(b" " * (MAX_DOCUMENT_SIZE + 1))
        with pytest.raises(ValueError, match="文件过大"):
            load_json(p)


class TestSave:
    def test_json_keeps_key_order(self, tmp_path: Path) -> None:
        p = tmp_path / "composer.json"
        save_document(p, {"name": "acme/app", "require": {"z": "1", "a": "2"}})
        text = p.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert list(json.loads(text)["require"]) == ["z", "a"]

    def test_yaml_by_suffix(self, tmp_path: Path) -> None:
        p = tmp_path / "manifest.yml"
        save_document(p, {"require": {"包": "1.0"}})
        assert yaml.safe_load(p.read_text(encoding="utf-8")) == {"require": {"包": "1.0"}}
        assert load_document(p) == {"require": {"包": "1.0"}}

    def test_atomic_write_creates_parent(self, tmp_path: Path) -> None:
        p = tmp_path / "a" / "b" / "out.txt"
        atomic_write(p, "data")
        assert p.read_text(encoding="utf-8") == "data"
        assert list(p.parent.glob("*.tmp")) == []

    def test_failed_serialization_leaves_file(self, tmp_path: Path) -> None:
        p = tmp_path / "composer.json"
        p.write_text('{"require": {}}', encoding="utf-8")
        with pytest.raises(TypeError):
            save_document(p, {"require": {"x": object()}})
        assert p.read_text(encoding="utf-8") == '{"require": {}}'

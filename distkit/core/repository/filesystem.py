"""文件仓库

- InstalledFilesystemRepository: 本地已安装仓库，持久化为 installed.json
- IndexRepository: 远程仓库索引文件（packages.json），只读

installed.json 支持两种布局:
    [ {包定义}, ... ]
    {"packages": [ {包定义}, ... ]}

packages.json 布局:
    {
        "packages": {"vendor/pkg": {"1.0.0": {包定义}, ...}, ...},
        "providers": {                                  # 可选，提供者清单
            "vendor/a": {},                             # 定义在 packages 段
            "vendor/b": "p/vendor/b.json",              # 定义在单独文件
            "vendor/c": {"path": "p/vendor/c.json"},
            "vendor/d": {"1.0.0": {包定义}}              # 内联定义
        }
    }
"packages" 也可以直接是包定义列表。提供者文件与 packages.json 同格式，
路径相对于索引文件所在目录。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from distkit.core.exceptions import ValidationError
from distkit.core.package.loader import PackageDumper, PackageLoader
from distkit.core.package.models import Package
from distkit.core.repository.array import ArrayRepository, WritableArrayRepository
from distkit.utils.doc_io import load_document, load_json, save_document

logger = logging.getLogger(__name__)


class InstalledFilesystemRepository(WritableArrayRepository):
    """本地已安装仓库，由外部安装器更新，reload() 重新读取磁盘状态"""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.reload()

    def reload(self) -> None:
        self._packages = []
        if not self.path.exists():
            logger.warning("已安装仓库文件不存在: %s", self.path)
            return
        data = load_json(self.path)
        entries = data.get("packages", []) if isinstance(data, dict) else data
        loader = PackageLoader()
        for entry in entries or []:
            self.add_package(loader.load(entry))
        logger.debug("已加载 %d 个已安装包: %s", len(self._packages), self.path)

    def write(self) -> None:
        dumper = PackageDumper()
        save_document(self.path, {
            "packages": [dumper.dump(p) for p in self._packages],
        })
        logger.info("已安装仓库已写回: %s (%d 个包)", self.path, len(self._packages))


def _definitions(section: Any) -> list[dict[str, Any]]:
    """packages 段 -> 包定义列表（支持 名称->版本->定义 映射或列表）"""
    if not section:
        return []
    if isinstance(section, dict):
        return [
            {"name": name, "version": version, **(definition or {})}
            for name, versions in section.items()
            for version, definition in (versions or {}).items()
        ]
    return list(section)


class IndexRepository(ArrayRepository):
    """远程仓库索引，包列表首次访问时才物化；提供者按名称单独加载"""

    def __init__(self, path: str | Path, name: str = "") -> None:
        super().__init__()
        self.path = Path(path)
        self.name = name or self.path.stem
        self._document: dict[str, Any] | None = None
        self._loaded = False
        self._provided: dict[str, list[Package]] = {}

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            return load_document(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ValidationError(f"仓库索引无法读取: {path} - {e}") from e

    def _data(self) -> dict[str, Any]:
        if self._document is None:
            self._document = self._read(self.path)
            if not self._document:
                logger.warning("仓库索引为空或不存在: %s", self.path)
        return self._document

    def _providers(self) -> dict[str, Any]:
        return self._data().get("providers") or {}

    def has_provider_listing(self) -> bool:
        return bool(self._providers())

    def provider_names(self) -> list[str]:
        """提供者清单中的名称，及 packages 段（映射布局）中的名称"""
        names = dict.fromkeys(self._providers())
        section = self._data().get("packages")
        if isinstance(section, dict):
            names.update(dict.fromkeys(section))
        return list(names)

    def get_packages(self) -> list[Package]:
        if not self._loaded:
            self._materialize()
        return super().get_packages()

    def find_packages(self, name: str, version: str | None = None) -> list[Package]:
        if name in self._providers():
            if name not in self._provided:
                self._provided[name] = self._load_provider(name)
            return ArrayRepository(self._provided[name]).find_packages(name, version)
        if not self._loaded:
            self._materialize()
        return super().find_packages(name, version)

    def _load_provider(self, name: str) -> list[Package]:
        entry = self._providers()[name]
        if isinstance(entry, dict) and "path" in entry:
            entry = entry["path"]
        if isinstance(entry, str):
            section = self._read(self.path.parent / entry).get("packages")
        else:
            section = {name: entry} if entry else None

        definitions = _definitions(section)
        packages_section = self._data().get("packages")
        if isinstance(packages_section, dict) and name in packages_section:
            definitions += _definitions({name: packages_section[name]})

        loader = PackageLoader()
        packages = [
            loader.load(d) for d in definitions if d.get("name") == name
        ]
        logger.debug("仓库 %s 提供者 %s: %d 个版本", self.name, name, len(packages))
        return packages

    def _materialize(self) -> None:
        loader = PackageLoader()
        for entry in _definitions(self._data().get("packages")):
            self.add_package(loader.load(entry))
        self._loaded = True
        logger.info("仓库 %s 已加载 %d 个包", self.name, len(self._packages))

    def __repr__(self) -> str:
        return f"IndexRepository({self.name!r}, {self.path})"

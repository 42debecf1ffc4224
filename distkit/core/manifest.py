"""依赖清单读改写

清单文档（composer.json 或 YAML）至少包含 require 段:

    {
        "name": "acme/app",
        "require": {"vendor/pkg": "1.2.0", ...},
        ...其他顶层键原样保留
    }

每次修改都重新读取文件，在独占文件锁内完成 读取 -> 修改 -> 原子写回，
不在内存中长期缓存清单内容。
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml

from distkit.core.exceptions import ManifestError
from distkit.core.package.loader import PackageLoader
from distkit.core.package.models import RootPackage
from distkit.utils.doc_io import load_document, save_document
from distkit.utils.locking import exclusive_lock

logger = logging.getLogger(__name__)

REQUIRE_KEY = "require"


class ManifestEditor:
    """依赖清单编辑器（单写者假设，文件锁只防同机并发）"""

    def __init__(self, path: str | Path, lock_timeout: float = 30) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout

    # ------------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """读取完整清单文档，文件不存在时返回空字典"""
        try:
            return load_document(self.path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ManifestError(f"清单读取失败: {self.path} - {e}") from e

    def get_requirements(self) -> dict[str, str]:
        return dict(_require_section(self.load(), self.path))

    def load_root_package(
        self, *, default_name: str = "__root__", default_version: str = "1.0.0",
    ) -> RootPackage:
        """以清单内容构建根包"""
        return PackageLoader().load_root(
            self.load(), default_name=default_name, default_version=default_version,
        )

    # ------------------------------------------------------------------
    # 修改
    # ------------------------------------------------------------------

    def add_requirement(self, name: str, version: str) -> None:
        """设置 require[name] = version（已存在则覆盖）"""
        with self._edit() as document:
            require = _require_section(document, self.path)
            previous = require.get(name)
            require[name] = version
        if previous is None:
            logger.info("清单已添加依赖: %s -> %s", name, version)
        else:
            logger.info("清单已更新依赖: %s %s -> %s", name, previous, version)

    def remove_requirements(self, names: Iterable[str]) -> list[str]:
        """批量删除 require 中的条目，只写一次文件；返回实际删除的名称"""
        removed: list[str] = []
        with self._edit() as document:
            require = _require_section(document, self.path)
            for name in names:
                if require.pop(name, None) is not None:
                    removed.append(name)
        logger.info("清单已移除依赖: %s", ", ".join(removed) or "(无)")
        return removed

    @contextlib.contextmanager
    def _edit(self) -> Iterator[dict[str, Any]]:
        """加锁读取文档，正常退出时原子写回；异常时不写入，锁总会释放"""
        try:
            with exclusive_lock(self.path, timeout=self.lock_timeout):
                document = self.load()
                yield document
                save_document(self.path, document)
        except TimeoutError as e:
            raise ManifestError(str(e)) from e
        except OSError as e:
            raise ManifestError(f"清单写入失败: {self.path} - {e}") from e


def _require_section(document: dict[str, Any], path: Path) -> dict[str, Any]:
    require = document.get(REQUIRE_KEY)
    # 空的 PHP 数组会被编码为 []
    if require is None or require == []:
        require = document[REQUIRE_KEY] = {}
    if not isinstance(require, dict):
        raise ManifestError(f"清单 {path} 的 {REQUIRE_KEY} 段必须是对象")
    return require

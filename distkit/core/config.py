"""集中配置管理

替代各模块散落的 DEFAULT_* 常量，提供统一的配置入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from distkit.core.exceptions import ConfigError
from distkit.utils.doc_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 文件
    manifest: str = "composer.json"
    installed_file: str = "vendor/composer/installed.json"
    vendor_dir: str = "vendor"

    # 远程仓库索引（按顺序），元素为路径字符串或 {"path": ..., "name": ...}
    repositories: list[Any] = field(default_factory=list)

    # 安装器
    installer_command: str = "composer"
    installer_timeout: int = 1800

    # 清单文件锁等待时间（秒）
    lock_timeout: int = 30

    # 安装 / 卸载事务锁等待时间（秒），事务内含外部安装器运行
    operation_timeout: int = 600

    # 根包标识（清单中没有 name / version 时使用）
    root_name: str = "__root__"
    root_version: str = "1.0.0"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/distkit.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if not isinstance(matched.get("repositories", []), list):
            raise ConfigError(f"repositories 必须是列表: {path}")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def repository_paths(self) -> list[str]:
        """展开 repositories 配置为索引文件路径列表"""
        paths: list[str] = []
        for entry in self.repositories:
            if isinstance(entry, str):
                paths.append(entry)
            elif isinstance(entry, dict) and entry.get("path"):
                paths.append(str(entry["path"]))
            else:
                raise ConfigError(f"无效的仓库配置: {entry!r}")
        return paths

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/distkit.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current

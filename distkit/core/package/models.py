"""依赖包数据模型

数据类:
- Link: 包之间的依赖关系（source 依赖 target，附带版本约束）
- Stability: 版本稳定性级别
- Package: 仓库中的单个包实例（不可变）
- RootPackage: 当前应用自身的根包（可变，安装时合并新依赖）
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Stability(str, Enum):
    """版本稳定性（由版本号后缀推断）"""

    STABLE = "stable"
    RC = "RC"
    BETA = "beta"
    ALPHA = "alpha"
    DEV = "dev"


@dataclass(frozen=True)
class Link:
    """依赖关系: source 以 constraint 约束依赖 target"""

    source: str
    target: str
    constraint: str = "*"
    description: str = "requires"  # requires / devRequires / provides / replaces

    def __str__(self) -> str:
        return f"{self.source} {self.description} {self.target} ({self.constraint})"


@dataclass(frozen=True)
class Package:
    """仓库中的单个包实例

    version 为规范化版本（如 1.2.0.0），pretty_version 为展示用原始版本（如 v1.2）。
    """

    name: str
    version: str
    pretty_version: str = ""
    requires: tuple[Link, ...] = ()
    dev_requires: tuple[Link, ...] = ()
    provides: tuple[Link, ...] = ()
    replaces: tuple[Link, ...] = ()
    type: str = "library"
    description: str = ""
    # 生命周期脚本: {"install": "cmd", "uninstall": ["cmd1", "cmd2"]}
    scripts: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def stability(self) -> Stability:
        from distkit.core.package.version import get_version_parser
        return get_version_parser().parse_stability(self.version)

    @property
    def unique_name(self) -> str:
        return f"{self.name}-{self.version}"

    @property
    def display_version(self) -> str:
        return self.pretty_version or self.version

    def requirement_targets(self, *, include_dev: bool = False) -> list[str]:
        links = self.requires + self.dev_requires if include_dev else self.requires
        return [link.target for link in links]

    def __str__(self) -> str:
        return f"{self.name} {self.display_version}"


@dataclass
class RootPackage:
    """应用根包 — 对应清单文件本身

    requires 按 target 名索引（保持插入顺序），安装新包时由 PackageManager
    合并后通过 set_requires 回写，供安装器解析完整的依赖集合。
    """

    name: str
    version: str
    pretty_version: str = ""
    requires: dict[str, Link] = field(default_factory=dict)
    dev_requires: dict[str, Link] = field(default_factory=dict)

    def get_name(self) -> str:
        return self.name

    def get_pretty_version(self) -> str:
        return self.pretty_version or self.version

    def get_requires(self) -> dict[str, Link]:
        return dict(self.requires)

    def set_requires(self, requires: dict[str, Link]) -> None:
        self.requires = dict(requires)


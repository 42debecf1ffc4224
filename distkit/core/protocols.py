"""领域协议定义

集中定义各层之间的接口契约（Protocol），上层依赖抽象而非具体实现。
使用 typing.Protocol 而非 ABC，测试替身与第三方实现无需继承即可满足协议。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from distkit.core.installer.operations import UninstallOperation
    from distkit.core.package.models import Package


# =========================================================================
# 仓库协议
# =========================================================================

class Repository(Protocol):
    """包仓库

    两类能力:
      - 提供者清单: has_provider_listing() 为 True 时，provider_names()
        可在不构造 Package 的前提下廉价列出包名
      - 物化列表: get_packages() 返回完整 Package 序列
    provider_names() 仅在 has_provider_listing() 为 True 时有意义。
    find_packages() 按名称查找，提供者仓库只加载该名称的定义。
    """

    def has_provider_listing(self) -> bool:
        ...

    def provider_names(self) -> list[str]:
        ...

    def get_packages(self) -> list[Package]:
        ...

    def find_packages(self, name: str, version: str | None = None) -> list[Package]:
        ...


class WritableRepository(Repository, Protocol):
    """可写仓库（本地已安装仓库）"""

    def add_package(self, package: Package) -> None:
        ...

    def remove_package(self, package: Package) -> None:
        ...

    def write(self) -> None:
        """持久化当前内容"""
        ...

    def reload(self) -> None:
        """丢弃内存状态，重新读取外部（安装器）写入的内容"""
        ...


# =========================================================================
# 外部协作者协议
# =========================================================================

class Installer(Protocol):
    """外部安装器

    每次 run() 前通过一组 setter 配置策略，setter 返回自身以便链式调用。
    """

    def set_dry_run(self, dry_run: bool) -> Installer:
        ...

    def set_verbose(self, verbose: bool) -> Installer:
        ...

    def set_prefer_source(self, prefer_source: bool) -> Installer:
        ...

    def set_prefer_dist(self, prefer_dist: bool) -> Installer:
        ...

    def set_dev_mode(self, dev_mode: bool) -> Installer:
        ...

    def set_run_scripts(self, run_scripts: bool) -> Installer:
        ...

    def set_update(self, update: bool) -> Installer:
        ...

    def set_update_whitelist(self, names: list[str]) -> Installer:
        ...

    def set_optimize_autoloader(self, optimize: bool) -> Installer:
        ...

    def run(self) -> bool:
        """执行安装 / 更新，成功返回 True"""
        ...

    def uninstall(
        self, repository: WritableRepository, operation: UninstallOperation,
    ) -> None:
        """从本地仓库移除单个包，失败抛异常"""
        ...


class ScriptRunner(Protocol):
    """包生命周期脚本执行器"""

    def install(self, package: Package) -> None:
        ...

    def uninstall(self, package: Package) -> None:
        ...

"""依赖包生命周期管理器

组合仓库视图、依赖图查询、版本选择、清单编辑，以及外部安装器 /
脚本执行器，对外提供:

  - 查询: get_installed / get_available / is_package_installed /
          get_requirements / get_dependents / get_preferred_package
  - 变更: install / uninstall / uninstall_with_dependents

变更操作都是单次同步事务:
  install   -> 选择版本 -> 合并根包依赖 -> 安装器 run() -> 写清单 -> install 脚本
  uninstall -> 逐个 uninstall 脚本 + 安装器卸载 -> 全部成功后批量写清单
任一步失败即抛异常，清单保持不变。

安装器会在进程外修改本地仓库，其他进程（CLI、其他 Web worker）也可能同时
操作同一个项目，因此:
  - 每次读取已安装包前都从磁盘重新加载本地仓库，不跨操作缓存
  - 变更事务在线程锁 + 项目锁文件（清单旁的 distkit.lock）内执行，
    同一时刻只有一个安装器在运行

用法:
    from distkit.services.container import get_container

    pm = get_container().packages
    pm.install("vendor/pkg")
    pm.uninstall(["vendor/old", "vendor/unused"])
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from distkit.core.exceptions import (
    DistKitError,
    InstallerError,
    OperationInProgressError,
    PackageNotFoundError,
    UninstallError,
)
from distkit.core.installer.operations import UninstallOperation
from distkit.core.manifest import ManifestEditor
from distkit.core.package.graph import find_dependents, walk_dependents
from distkit.core.package.models import Link, Package, RootPackage
from distkit.core.package.version import get_version_parser
from distkit.core.protocols import Installer, ScriptRunner, WritableRepository
from distkit.core.repository.manager import RepositoryManager
from distkit.core.repository.platform import is_platform_package
from distkit.utils.locking import exclusive_lock

logger = logging.getLogger(__name__)

ANY_VERSION = "*"
OPERATION_LOCK_NAME = "distkit.lock"


class PackageManager:
    """依赖包管理门面"""

    def __init__(
        self,
        repository_manager: RepositoryManager,
        installer: Installer,
        script_runner: ScriptRunner,
        manifest: ManifestEditor | str | Path,
        root_package: RootPackage,
        *,
        lock_file: str | Path | None = None,
        operation_timeout: float = 600,
    ) -> None:
        self.repository_manager = repository_manager
        self.installer = installer
        self.script_runner = script_runner
        if not isinstance(manifest, ManifestEditor):
            manifest = ManifestEditor(manifest)
        self.manifest = manifest
        self.root_package = root_package
        self.lock_file = Path(lock_file) if lock_file else manifest.path.parent / OPERATION_LOCK_NAME
        self.operation_timeout = operation_timeout
        self._thread_lock = threading.Lock()

    # ------------------------------------------------------------------
    # 仓库视图
    # ------------------------------------------------------------------

    def _local(self) -> WritableRepository:
        return self.repository_manager.get_local_repository()

    def get_installed(self) -> list[Package]:
        """本地仓库中的全部包（每次从磁盘重新加载），保持仓库顺序"""
        local = self._local()
        local.reload()
        return local.get_packages()

    def get_installed_package(self, name: str) -> Package | None:
        for pkg in self.get_installed():
            if pkg.name == name:
                return pkg
        return None

    def is_package_installed(self, name: str) -> bool:
        return self.get_installed_package(name) is not None

    def get_available(self, *, exclude_installed: bool = False) -> list[str]:
        """所有远程仓库提供的包名（按名称去重，保持仓库顺序）

        有提供者清单的仓库只取名称，不物化包对象。
        exclude_installed=True 时剔除本地已安装的名称。
        """
        names: dict[str, None] = {}
        for repository in self.repository_manager.get_repositories():
            if repository.has_provider_listing():
                repo_names = repository.provider_names()
            else:
                repo_names = [pkg.name for pkg in repository.get_packages()]
            for name in repo_names:
                names.setdefault(name, None)

        if exclude_installed:
            installed = {pkg.name for pkg in self.get_installed()}
            return [name for name in names if name not in installed]
        return list(names)

    def get_requirements(self, name: str, version: str | None = None) -> list[str]:
        """包的直接运行时依赖名（保持声明顺序，剔除平台依赖）

        version 为 None 或 "*" 时取最新版本。
        """
        package = self.get_preferred_package(name, version)
        return [
            target for target in package.requirement_targets()
            if not is_platform_package(target)
        ]

    # ------------------------------------------------------------------
    # 依赖图 / 版本选择
    # ------------------------------------------------------------------

    def get_dependents(self, name: str) -> set[str]:
        """直接或间接（含 dev 依赖）依赖 name 的已安装包"""
        return find_dependents(self.get_installed(), name)

    def get_preferred_package(self, name: str, version: str | None = None) -> Package:
        """在本地 + 全部远程仓库中选出最匹配的包实例

        - 指定 version: 规范化后精确匹配
        - 未指定或 "*": 取最高版本（预发布版本低于对应正式版本）
        同版本多个实例时取仓库遍历顺序中的第一个。

        Raises:
            PackageNotFoundError: 没有匹配的包
        """
        if version == ANY_VERSION:
            version = None
        self._local().reload()
        candidates = [
            pkg
            for repository in self.repository_manager.get_all_repositories()
            for pkg in repository.find_packages(name)
            if pkg.name == name
        ]
        if not candidates:
            raise PackageNotFoundError(name)

        parser = get_version_parser()
        if version is not None:
            wanted = parser.try_normalize(version)
            for pkg in candidates:
                if pkg.version == wanted or pkg.pretty_version == version:
                    return pkg
            raise PackageNotFoundError(name, version)

        best = candidates[0]
        best_key = parser.sort_key(best.version)
        for pkg in candidates[1:]:
            key = parser.sort_key(pkg.version)
            if key > best_key:
                best, best_key = pkg, key
        return best

    # ------------------------------------------------------------------
    # 事务锁
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[None]:
        """独占执行一个安装 / 卸载事务（进程内线程锁 + 跨进程项目锁）

        Raises:
            OperationInProgressError: operation_timeout 秒内未拿到锁
        """
        if not self._thread_lock.acquire(timeout=self.operation_timeout):
            raise OperationInProgressError("另一个安装 / 卸载操作正在进行，请稍后重试")
        try:
            with contextlib.ExitStack() as stack:
                try:
                    stack.enter_context(
                        exclusive_lock(self.lock_file, timeout=self.operation_timeout)
                    )
                except TimeoutError as e:
                    raise OperationInProgressError(
                        f"另一个进程正在安装 / 卸载 ({self.lock_file})，请稍后重试"
                    ) from e
                yield
        finally:
            self._thread_lock.release()

    # ------------------------------------------------------------------
    # 安装
    # ------------------------------------------------------------------

    def install(self, name: str, version: str | None = None) -> Package:
        """安装单个包并写入清单，返回安装后的包实例

        Raises:
            PackageNotFoundError: 找不到匹配的包
            InstallerError: 安装器执行失败（清单不变）
            OperationInProgressError: 其他安装 / 卸载事务未结束
        """
        with self._transaction():
            return self._install(name, version)

    def _install(self, name: str, version: str | None) -> Package:
        package = self.get_preferred_package(name, version)
        logger.info("开始安装: %s", package, extra={"package": package.name})

        self._merge_root_requirement(package)
        self._configure_installer(package)

        if not self.installer.run():
            raise InstallerError(f"安装器执行失败，已中止安装: {package}")

        self.manifest.add_requirement(package.name, package.display_version)

        installed = self.get_installed_package(package.name)
        if installed is None:
            logger.warning(
                "安装器报告成功，但本地仓库中没有 %s", package.name,
                extra={"package": package.name},
            )
            installed = package
        else:
            self.script_runner.install(installed)

        logger.info("安装完成: %s", installed, extra={"package": installed.name})
        return installed

    def _merge_root_requirement(self, package: Package) -> None:
        """将新包合并进根包依赖，供安装器解析完整的依赖集合"""
        root = self.root_package
        requires = root.get_requires()
        requires[package.name] = Link(
            source=root.get_name(),
            target=package.name,
            constraint=package.display_version,
            description="requires",
        )
        root.set_requires(requires)
        logger.debug(
            "根包 %s %s 依赖已更新: %d 项",
            root.get_name(), root.get_pretty_version(), len(requires),
        )

    def _configure_installer(self, package: Package) -> None:
        installer = self.installer
        installer.set_dry_run(False)
        installer.set_verbose(False)
        installer.set_prefer_source(False)
        installer.set_prefer_dist(True)
        installer.set_dev_mode(False)
        installer.set_run_scripts(True)
        installer.set_update(True)
        installer.set_update_whitelist([package.name])
        installer.set_optimize_autoloader(True)

    # ------------------------------------------------------------------
    # 卸载
    # ------------------------------------------------------------------

    def uninstall(self, names: Iterable[str]) -> list[str]:
        """按给定顺序卸载包，全部成功后一次性从清单移除；返回实际卸载的包名

        未安装的名称直接跳过。每个包先执行 uninstall 脚本，再由安装器移除。
        任一包失败抛 UninstallError，清单保持不变，已移除的包不回滚。
        """
        with self._transaction():
            return self._uninstall(list(dict.fromkeys(names)))

    def uninstall_with_dependents(self, names: Iterable[str]) -> list[str]:
        """连同所有已安装的依赖者一起卸载（依赖者在前）"""
        names = list(dict.fromkeys(names))
        with self._transaction():
            installed = self.get_installed()
            ordered: list[str] = []
            for name in names:
                for dependent in reversed(walk_dependents(installed, name)):
                    if dependent not in ordered and dependent not in names:
                        ordered.append(dependent)
            if ordered:
                logger.info("连带卸载依赖者: %s", ", ".join(ordered))
            return self._uninstall(ordered + names)

    def _uninstall(self, names: list[str]) -> list[str]:
        installed = {pkg.name: pkg for pkg in self.get_installed()}
        local = self._local()

        packages: list[Package] = []
        for name in names:
            pkg = installed.get(name)
            if pkg is None:
                logger.warning("未安装，跳过卸载: %s", name, extra={"package": name})
                continue
            packages.append(pkg)

        removed: list[str] = []
        for pkg in packages:
            logger.info("开始卸载: %s", pkg, extra={"package": pkg.name})
            try:
                self.script_runner.uninstall(pkg)
                self.installer.uninstall(local, UninstallOperation(pkg))
            except (DistKitError, OSError) as e:
                raise UninstallError(
                    f"卸载 {pkg} 失败，清单未修改 (已移除: {removed or '无'}): {e}",
                    removed=list(removed),
                ) from e
            removed.append(pkg.name)

        self.manifest.remove_requirements(names)
        logger.info("卸载完成: %s", ", ".join(removed) or "(无)")
        return removed

"""服务容器 — 统一依赖注入，消除各入口对核心组件的裸构造

CLI 和 Web 层均通过 get_container() 获取 PackageManager，而非直接 import 构造。

依赖关系图（→ 表示依赖）:
  packages     → repositories, installer, script_runner, manifest, root_package
  installer    → root_package
  root_package → manifest

根包由 installer 与 packages 共享同一实例: PackageManager 合并新依赖后，
安装器执行时即可看到完整的依赖集合。

用法:
    container = ServiceContainer()
    pm = container.packages             # 懒加载

    cfg = Config.from_file("configs/distkit.yml")
    container = ServiceContainer(config=cfg)
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from distkit.core.config import Config
    from distkit.core.installer.command import CommandInstaller
    from distkit.core.installer.scripts import ScriptRunner
    from distkit.core.manifest import ManifestEditor
    from distkit.core.package.models import RootPackage
    from distkit.core.package_manager import PackageManager
    from distkit.core.repository.manager import RepositoryManager

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器 — 每个实例持有一组共享的组件"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from distkit.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def manifest(self) -> ManifestEditor:
        if "manifest" not in self._instances:
            from distkit.core.manifest import ManifestEditor
            self._instances["manifest"] = ManifestEditor(
                self._config.manifest,
                lock_timeout=self._config.lock_timeout,
            )
        return self._instances["manifest"]  # type: ignore[return-value]

    @property
    def root_package(self) -> RootPackage:
        if "root_package" not in self._instances:
            self._instances["root_package"] = self.manifest.load_root_package(
                default_name=self._config.root_name,
                default_version=self._config.root_version,
            )
        return self._instances["root_package"]  # type: ignore[return-value]

    @property
    def repositories(self) -> RepositoryManager:
        if "repositories" not in self._instances:
            from distkit.core.repository.manager import RepositoryManager
            self._instances["repositories"] = RepositoryManager.from_config(self._config)
        return self._instances["repositories"]  # type: ignore[return-value]

    @property
    def installer(self) -> CommandInstaller:
        if "installer" not in self._instances:
            from distkit.core.installer.command import CommandInstaller
            self._instances["installer"] = CommandInstaller(
                self._config.installer_command,
                working_dir=str(Path(self._config.manifest).parent),
                vendor_dir=self._config.vendor_dir,
                root_package=self.root_package,
                timeout=self._config.installer_timeout,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def script_runner(self) -> ScriptRunner:
        if "script_runner" not in self._instances:
            from distkit.core.installer.scripts import ScriptRunner
            self._instances["script_runner"] = ScriptRunner(
                vendor_dir=self._config.vendor_dir,
                timeout=self._config.installer_timeout,
            )
        return self._instances["script_runner"]  # type: ignore[return-value]

    @property
    def packages(self) -> PackageManager:
        if "packages" not in self._instances:
            from distkit.core.package_manager import PackageManager
            self._instances["packages"] = PackageManager(
                repository_manager=self.repositories,
                installer=self.installer,
                script_runner=self.script_runner,
                manifest=self.manifest,
                root_package=self.root_package,
                operation_timeout=self._config.operation_timeout,
            )
        return self._instances["packages"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None

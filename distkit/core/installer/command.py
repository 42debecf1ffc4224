"""命令行安装器 — 通过外部包管理命令执行安装 / 更新

策略由一组 setter 配置，run() 时拼装为命令行:

    composer update vendor/pkg:1.2.0 --no-dev --prefer-dist \\
        --optimize-autoloader --no-interaction

根包（与 PackageManager 共享同一实例）中为白名单包声明的约束会以
``name:constraint`` 形式传给命令，使安装器看到完整的目标依赖集合。
"""

from __future__ import annotations

import logging
import shlex
import shutil
from pathlib import Path

from distkit.core.exceptions import UninstallError, ValidationError
from distkit.core.installer.operations import UninstallOperation
from distkit.core.package.models import RootPackage
from distkit.core.protocols import WritableRepository
from distkit.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

# 安装器在无终端的 Web worker 中运行，禁止任何交互式提问
INSTALLER_ENV = {"COMPOSER_NO_INTERACTION": "1"}


class CommandInstaller:
    """外部命令安装器"""

    def __init__(
        self,
        command: str = "composer",
        *,
        working_dir: str = ".",
        vendor_dir: str = "vendor",
        root_package: RootPackage | None = None,
        executor: CommandExecutor | None = None,
        timeout: int | None = None,
    ) -> None:
        self.command = command
        self.working_dir = working_dir
        self.vendor_dir = Path(vendor_dir)
        self.root_package = root_package
        self.executor = executor or get_executor()
        self.timeout = timeout

        self.dry_run = False
        self.verbose = False
        self.prefer_source = False
        self.prefer_dist = False
        self.dev_mode = True
        self.run_scripts = True
        self.update = False
        self.update_whitelist: list[str] = []
        self.optimize_autoloader = False

    # ---- 策略配置 ----

    def set_dry_run(self, dry_run: bool) -> CommandInstaller:
        self.dry_run = dry_run
        return self

    def set_verbose(self, verbose: bool) -> CommandInstaller:
        self.verbose = verbose
        return self

    def set_prefer_source(self, prefer_source: bool) -> CommandInstaller:
        self.prefer_source = prefer_source
        return self

    def set_prefer_dist(self, prefer_dist: bool) -> CommandInstaller:
        self.prefer_dist = prefer_dist
        return self

    def set_dev_mode(self, dev_mode: bool) -> CommandInstaller:
        self.dev_mode = dev_mode
        return self

    def set_run_scripts(self, run_scripts: bool) -> CommandInstaller:
        self.run_scripts = run_scripts
        return self

    def set_update(self, update: bool) -> CommandInstaller:
        self.update = update
        return self

    def set_update_whitelist(self, names: list[str]) -> CommandInstaller:
        self.update_whitelist = list(names)
        return self

    def set_optimize_autoloader(self, optimize: bool) -> CommandInstaller:
        self.optimize_autoloader = optimize
        return self

    # ---- 执行 ----

    def build_command(self) -> list[str]:
        args = shlex.split(self.command)
        if self.update:
            args.append("update")
            args.extend(self._whitelist_args())
        else:
            args.append("install")

        flags = [
            (self.dry_run, "--dry-run"),
            (self.verbose, "-v"),
            (self.prefer_source, "--prefer-source"),
            (self.prefer_dist and not self.prefer_source, "--prefer-dist"),
            (not self.dev_mode, "--no-dev"),
            (not self.run_scripts, "--no-scripts"),
            (self.optimize_autoloader, "--optimize-autoloader"),
        ]
        args.extend(flag for enabled, flag in flags if enabled)
        args.append("--no-interaction")
        return args

    def _whitelist_args(self) -> list[str]:
        requires = self.root_package.get_requires() if self.root_package else {}
        result = []
        for name in self.update_whitelist:
            link = requires.get(name)
            if link is not None and link.constraint not in ("", "*"):
                result.append(f"{name}:{link.constraint}")
            else:
                result.append(name)
        return result

    def run(self) -> bool:
        cmd = self.build_command()
        logger.info("执行安装器: %s", shlex.join(cmd))
        r = self.executor.execute(
            cmd, cwd=self.working_dir, env=INSTALLER_ENV, timeout=self.timeout,
        )
        if not r.success:
            logger.error("安装器失败 (rc=%d, %.1fs): %s", r.returncode, r.duration, r.tail())
            return False
        if self.verbose and r.stdout:
            logger.info("安装器输出:\n%s", r.stdout[:2000])
        return True

    # ---- 卸载 ----

    def package_dir(self, name: str) -> Path:
        """包安装目录 vendor_dir/name，拒绝跳出 vendor_dir 的名称"""
        base = self.vendor_dir.resolve()
        target = (base / name).resolve()
        if target == base or base not in target.parents:
            raise ValidationError(f"包名不合法: {name}")
        return target

    def uninstall(
        self, repository: WritableRepository, operation: UninstallOperation,
    ) -> None:
        """删除包目录并从本地仓库移除"""
        package = operation.package
        try:
            target = self.package_dir(package.name)
            if target.exists():
                shutil.rmtree(target)
                logger.info("已删除目录: %s", target)
            else:
                logger.warning("包目录不存在，跳过删除: %s", target)
            repository.remove_package(package)
            repository.write()
        except (OSError, ValidationError) as e:
            raise UninstallError(f"卸载 {package} 失败: {e}") from e
        logger.info("%s", operation)

"""包生命周期脚本执行器

包定义的 scripts 段声明各阶段要执行的命令:

    "scripts": {
        "install": "bin/migrate --up",
        "uninstall": ["bin/migrate --down", "bin/cleanup"]
    }

命令在包安装目录（vendor_dir/<name>）中执行，任一命令失败即抛 ExecutionError。
"""

from __future__ import annotations

import logging
from pathlib import Path

from distkit.core.exceptions import ExecutionError
from distkit.core.package.models import Package
from distkit.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


class ScriptRunner:
    """按阶段执行包声明的脚本"""

    def __init__(
        self,
        vendor_dir: str = "vendor",
        executor: CommandExecutor | None = None,
        timeout: int | None = None,
    ) -> None:
        self.vendor_dir = Path(vendor_dir)
        self.executor = executor or get_executor()
        self.timeout = timeout

    def install(self, package: Package) -> None:
        self._run(package, "install")

    def uninstall(self, package: Package) -> None:
        self._run(package, "uninstall")

    def commands_for(self, package: Package, event: str) -> list[str]:
        commands = package.scripts.get(event) or []
        if isinstance(commands, str):
            return [commands]
        return [str(c) for c in commands]

    def _run(self, package: Package, event: str) -> None:
        commands = self.commands_for(package, event)
        if not commands:
            return
        cwd = self.vendor_dir / package.name
        if not cwd.is_dir():
            cwd = self.vendor_dir
        for cmd in commands:
            logger.info("%s 脚本 [%s]: %s", event, package.name, cmd)
            r = self.executor.execute(cmd, cwd=str(cwd), timeout=self.timeout)
            if not r.success:
                raise ExecutionError(
                    f"{package.name} 的 {event} 脚本失败 (rc={r.returncode}): "
                    f"{r.tail(500)}"
                )

"""卸载操作描述符，传给安装器的 uninstall(repository, operation)"""

from __future__ import annotations

from dataclasses import dataclass

from distkit.core.package.models import Package


@dataclass(frozen=True)
class UninstallOperation:
    package: Package
    reason: str = ""

    def __str__(self) -> str:
        return f"Uninstalling {self.package}"

"""内存仓库

- ArrayRepository: 物化仓库，直接持有 Package 列表
- WritableArrayRepository: 可增删的内存仓库，本地已安装仓库的基类
"""

from __future__ import annotations

from collections.abc import Iterable

from distkit.core.package.models import Package
from distkit.core.package.version import get_version_parser


class ArrayRepository:
    """物化仓库，没有提供者清单，包列表即全部内容"""

    def __init__(self, packages: Iterable[Package] | None = None) -> None:
        self._packages: list[Package] = []
        for pkg in packages or ():
            self.add_package(pkg)

    # ---- Repository 协议 ----

    def has_provider_listing(self) -> bool:
        return False

    def provider_names(self) -> list[str]:
        return []

    def get_packages(self) -> list[Package]:
        return list(self._packages)

    def find_packages(self, name: str, version: str | None = None) -> list[Package]:
        """按名称（及可选版本）查找，版本比较前先规范化"""
        wanted = None
        if version is not None:
            wanted = get_version_parser().try_normalize(version) or version
        return [
            pkg for pkg in self._packages
            if pkg.name == name and (wanted is None or pkg.version == wanted)
        ]

    # ---- 修改 ----

    def add_package(self, package: Package) -> None:
        self._packages.append(package)

    def __len__(self) -> int:
        return len(self._packages)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._packages)} packages)"


class WritableArrayRepository(ArrayRepository):
    """可写内存仓库（write / reload 为空操作）"""

    def remove_package(self, package: Package) -> None:
        self._packages = [
            p for p in self._packages if p.unique_name != package.unique_name
        ]

    def write(self) -> None:
        pass

    def reload(self) -> None:
        pass

"""包仓库

- array.py: 内存仓库（物化）
- filesystem.py: installed.json 本地仓库 / packages.json 远程索引
- platform.py: 平台依赖识别
- manager.py: 本地 + 远程仓库管理
"""

from distkit.core.repository.array import ArrayRepository, WritableArrayRepository
from distkit.core.repository.filesystem import IndexRepository, InstalledFilesystemRepository
from distkit.core.repository.manager import RepositoryManager
from distkit.core.repository.platform import PLATFORM_PACKAGE_REGEX, is_platform_package

__all__ = [
    "ArrayRepository",
    "WritableArrayRepository",
    "InstalledFilesystemRepository",
    "IndexRepository",
    "RepositoryManager",
    "PLATFORM_PACKAGE_REGEX",
    "is_platform_package",
]

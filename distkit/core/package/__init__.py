"""依赖包模型

- models.py: Package / RootPackage / Link / Stability
- version.py: 版本规范化与排序
- loader.py: 字典 <-> Package 转换
- graph.py: 已安装包依赖图查询
"""

from distkit.core.package.graph import RequirementEdge, find_dependents, walk_dependents
from distkit.core.package.loader import PackageDumper, PackageLoader
from distkit.core.package.models import Link, Package, RootPackage, Stability
from distkit.core.package.version import VersionParser, get_version_parser

__all__ = [
    "Link",
    "Package",
    "RootPackage",
    "Stability",
    "PackageLoader",
    "PackageDumper",
    "VersionParser",
    "get_version_parser",
    "RequirementEdge",
    "find_dependents",
    "walk_dependents",
]

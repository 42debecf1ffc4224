"""包定义加载 / 导出

PackageLoader 将 composer 风格的字典转换为 Package:

    {
        "name": "vendor/pkg",
        "version": "1.2.0",
        "version_normalized": "1.2.0.0",   # 可选，缺省时自动规范化
        "require": {"vendor/dep": "^1.0", "php": ">=7.1"},
        "require-dev": {"vendor/test-tool": "*"},
        "provide": {...}, "replace": {...},
        "scripts": {"uninstall": "bin/cleanup"},
        "extra": {...}
    }

PackageDumper 做反向转换，用于回写本地已安装仓库文件。
"""

from __future__ import annotations

from typing import Any

from distkit.core.exceptions import ValidationError
from distkit.core.package.models import Link, Package, RootPackage
from distkit.core.package.version import get_version_parser

_LINK_SECTIONS = (
    ("require", "requires", "requires"),
    ("require-dev", "dev_requires", "devRequires"),
    ("provide", "provides", "provides"),
    ("replace", "replaces", "replaces"),
)


def _links(source: str, section: Any, description: str) -> tuple[Link, ...]:
    # 空的 PHP 数组会被编码为 []
    if not section:
        return ()
    if not isinstance(section, dict):
        raise ValidationError(f"{source}: {description} 必须是对象")
    return tuple(
        Link(source=source, target=target, constraint=str(constraint), description=description)
        for target, constraint in section.items()
    )


class PackageLoader:
    """字典 -> Package"""

    def load(self, data: dict[str, Any]) -> Package:
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise ValidationError(f"包定义缺少 name: {data!r}")
        pretty_version = str(data.get("version", "")).strip()
        if not pretty_version:
            raise ValidationError(f"包 {name} 缺少 version")

        version = data.get("version_normalized") or get_version_parser().try_normalize(pretty_version)
        if version is None:
            raise ValidationError(f"包 {name} 的版本号无法识别: {pretty_version}")

        links = {
            attr: _links(name, data.get(key), description)
            for key, attr, description in _LINK_SECTIONS
        }
        return Package(
            name=name,
            version=version,
            pretty_version=pretty_version,
            requires=links["requires"],
            dev_requires=links["dev_requires"],
            provides=links["provides"],
            replaces=links["replaces"],
            type=data.get("type", "library"),
            description=data.get("description", ""),
            scripts=dict(data.get("scripts") or {}),
            extra=dict(data.get("extra") or {}),
        )

    def load_root(
        self, data: dict[str, Any], *,
        default_name: str = "__root__", default_version: str = "1.0.0",
    ) -> RootPackage:
        """从清单文档构建根包"""
        name = data.get("name") or default_name
        pretty_version = str(data.get("version") or default_version)
        version = get_version_parser().try_normalize(pretty_version) or pretty_version
        requires = {
            link.target: link for link in _links(name, data.get("require"), "requires")
        }
        dev_requires = {
            link.target: link for link in _links(name, data.get("require-dev"), "devRequires")
        }
        return RootPackage(
            name=name,
            version=version,
            pretty_version=pretty_version,
            requires=requires,
            dev_requires=dev_requires,
        )


class PackageDumper:
    """Package -> 字典"""

    def dump(self, package: Package) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": package.name,
            "version": package.display_version,
            "version_normalized": package.version,
            "type": package.type,
        }
        if package.description:
            data["description"] = package.description
        for key, attr, _ in _LINK_SECTIONS:
            links: tuple[Link, ...] = getattr(package, attr)
            if links:
                data[key] = {link.target: link.constraint for link in links}
        if package.scripts:
            data["scripts"] = dict(package.scripts)
        if package.extra:
            data["extra"] = dict(package.extra)
        return data

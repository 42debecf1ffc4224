"""版本号规范化与排序

规范化格式为四段数字 + 可选稳定性后缀，例如:
    1        -> 1.0.0.0
    v2.1     -> 2.1.0.0
    1.0-rc2  -> 1.0.0.0-RC2
    1.2.x-dev -> 1.2.9999999.9999999-dev
    dev-master -> dev-master（分支版本原样保留）

排序基于 packaging.version，预发布版本排在对应正式版本之前，
分支版本（dev-*）排在所有数字版本之前。

VersionParser 无状态，进程内通过 get_version_parser() 共享一个实例。
"""

from __future__ import annotations

import functools
import re

from packaging.version import InvalidVersion, Version

from distkit.core.package.models import Stability

_BRANCH_PREFIX = "dev-"
_WILDCARD_DEV_RE = re.compile(r"^v?(\d+(?:\.\d+)*)\.[x*](?:-dev)?$", re.IGNORECASE)
_PATCH_RE = re.compile(r"[-.]?(?:patch|pl|p)(\d*)$", re.IGNORECASE)
_WILDCARD_FILL = "9999999"

_PRE_LABELS = {"a": "alpha", "b": "beta", "rc": "RC"}


class VersionParser:
    """版本号解析器（纯函数，无状态）"""

    def normalize(self, version: str) -> str:
        """规范化版本号

        Raises:
            ValueError: 无法识别的版本号
        """
        text = version.strip()
        if not text:
            raise ValueError("版本号不能为空")
        if text.lower().startswith(_BRANCH_PREFIX):
            return _BRANCH_PREFIX + text[len(_BRANCH_PREFIX):]

        m = _WILDCARD_DEV_RE.match(text)
        if m:
            parts = m.group(1).split(".")
            parts += [_WILDCARD_FILL] * (4 - len(parts))
            return ".".join(parts[:4]) + "-dev"

        parsed = _parse(text)
        if parsed is None:
            raise ValueError(f"无效的版本号: {version}")

        release = list(parsed.release) + [0] * (4 - len(parsed.release))
        normalized = ".".join(str(n) for n in release)
        if parsed.pre is not None:
            kind, num = parsed.pre
            normalized += f"-{_PRE_LABELS[kind]}{num}"
        elif parsed.post is not None:
            normalized += f"-patch{parsed.post}"
        if parsed.dev is not None:
            normalized += "-dev"
        return normalized

    def try_normalize(self, version: str) -> str | None:
        try:
            return self.normalize(version)
        except ValueError:
            return None

    def parse_stability(self, version: str) -> Stability:
        """根据版本号推断稳定性"""
        text = version.strip().lower()
        if text.startswith(_BRANCH_PREFIX) or text.endswith("-dev"):
            return Stability.DEV
        parsed = _parse(text)
        if parsed is None:
            return Stability.STABLE
        if parsed.dev is not None:
            return Stability.DEV
        if parsed.pre is not None:
            return {
                "a": Stability.ALPHA,
                "b": Stability.BETA,
                "rc": Stability.RC,
            }[parsed.pre[0]]
        return Stability.STABLE

    def sort_key(self, version: str) -> tuple[int, Version]:
        """排序键: (是否数字版本, Version)，分支版本恒小于数字版本"""
        parsed = _parse(version)
        if parsed is None:
            return (0, Version("0"))
        return (1, parsed)


@functools.lru_cache(maxsize=4096)
def _parse(text: str) -> Version | None:
    candidate = text.strip()
    if candidate[:1] in ("v", "V"):
        candidate = candidate[1:]
    candidate = _PATCH_RE.sub(lambda m: f".post{m.group(1) or 0}", candidate)
    try:
        return Version(candidate)
    except InvalidVersion:
        return None


@functools.lru_cache(maxsize=1)
def get_version_parser() -> VersionParser:
    """获取进程内共享的 VersionParser"""
    return VersionParser()

"""平台依赖识别

平台依赖是指向运行时能力（语言运行时版本、扩展、系统库）的伪依赖，
不是可安装的包。名称格式与现有清单保持一致，不可修改。
"""

from __future__ import annotations

import re

PLATFORM_PACKAGE_REGEX = r"^(?:php(?:-64bit|-ipv6|-zts|-debug)?|hhvm|(?:ext|lib)-[^/]+)$"

_PLATFORM_PACKAGE_RE = re.compile(PLATFORM_PACKAGE_REGEX, re.IGNORECASE)


def is_platform_package(name: str) -> bool:
    """php、php-64bit、hhvm、ext-json、lib-icu 等返回 True"""
    return _PLATFORM_PACKAGE_RE.match(name) is not None

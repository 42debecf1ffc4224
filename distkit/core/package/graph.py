"""已安装包的依赖图查询

依赖边 (dependent -> dependency) 由每个已安装包的 requires / dev_requires
临时推导，不做持久化，每次查询重新计算。
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import NamedTuple

from distkit.core.package.models import Package


class RequirementEdge(NamedTuple):
    dependent: str
    dependency: str
    is_dev: bool


def requirement_edges(packages: Iterable[Package]) -> Iterator[RequirementEdge]:
    for pkg in packages:
        for link in pkg.requires:
            yield RequirementEdge(pkg.name, link.target, False)
        for link in pkg.dev_requires:
            yield RequirementEdge(pkg.name, link.target, True)


def _reverse_index(packages: Iterable[Package]) -> dict[str, list[str]]:
    """dependency -> [dependent, ...]，保持已安装仓库顺序且不重复"""
    index: dict[str, list[str]] = {}
    for edge in requirement_edges(packages):
        dependents = index.setdefault(edge.dependency, [])
        if edge.dependent not in dependents:
            dependents.append(edge.dependent)
    return index


def walk_dependents(packages: Iterable[Package], name: str) -> list[str]:
    """广度优先列出直接 / 间接依赖 name 的包名（按发现顺序，不重复）

    每个名称只展开一次，依赖环不会导致死循环。起点 name 仅当它处于环上
    （即依赖了自己的某个依赖者）时才会出现在结果中。
    """
    index = _reverse_index(packages)
    found: list[str] = []
    visited: set[str] = set()
    queue = deque([name])
    while queue:
        current = queue.popleft()
        for dependent in index.get(current, ()):
            if dependent in visited:
                continue
            visited.add(dependent)
            found.append(dependent)
            queue.append(dependent)
    return found


def find_dependents(packages: Iterable[Package], name: str) -> set[str]:
    """直接或间接（含 dev 依赖）依赖 name 的已安装包名集合"""
    return set(walk_dependents(packages, name))

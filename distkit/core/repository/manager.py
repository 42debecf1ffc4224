"""仓库管理器: 一个本地已安装仓库 + 按顺序排列的远程仓库"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from distkit.core.protocols import Repository, WritableRepository

if TYPE_CHECKING:
    from distkit.core.config import Config

logger = logging.getLogger(__name__)


class RepositoryManager:
    """持有本地仓库与远程仓库列表，不缓存任何包内容"""

    def __init__(
        self,
        local_repository: WritableRepository,
        repositories: Sequence[Repository] = (),
    ) -> None:
        self._local = local_repository
        self._repositories: list[Repository] = list(repositories)

    @classmethod
    def from_config(cls, config: Config) -> RepositoryManager:
        """根据配置构建: installed_file 为本地仓库，repositories 为远程索引"""
        from distkit.core.repository.filesystem import (
            IndexRepository,
            InstalledFilesystemRepository,
        )
        local = InstalledFilesystemRepository(config.installed_file)
        remotes = [IndexRepository(path) for path in config.repository_paths()]
        logger.info("仓库已配置: 本地 %s, 远程 %d 个", config.installed_file, len(remotes))
        return cls(local, remotes)

    def get_local_repository(self) -> WritableRepository:
        return self._local

    def get_repositories(self) -> list[Repository]:
        """远程仓库，按配置顺序"""
        return list(self._repositories)

    def get_all_repositories(self) -> list[Repository]:
        """本地仓库在前，其后为远程仓库"""
        return [self._local, *self._repositories]

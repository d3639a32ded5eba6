"""注册表索引同步

- 本地镜像不存在: 新建裸仓库，并拉取默认分支
- 本地镜像已存在: 按已检出分支 fetch 更新

不加锁，同一缓存目录的并发调用顺序未定义。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from cratefetch.core.exceptions import MissingRegistryCheckoutError
from cratefetch.core.index.git import GitIndexRepository, GitRunner, checkout_name
from cratefetch.core.index.registry import RegistryIndex
from cratefetch.core.models import SyncAction

logger = logging.getLogger(__name__)

# 同步开始前的通知: (动作, 注册表)
SyncListener = Callable[[SyncAction, RegistryIndex], None]


def refspec_for(branch: str) -> str:
    return f"refs/heads/{branch}:refs/remotes/origin/{branch}"


class IndexSynchronizer:
    """保证本地索引镜像存在且为最新"""

    def __init__(self, runner: GitRunner | None = None, initial_branch: str = "master") -> None:
        self.runner = runner or GitRunner()
        self.initial_branch = initial_branch

    def sync(self, registry: RegistryIndex, on_start: SyncListener | None = None) -> SyncAction:
        """on_start 在 git init / fetch 开始前调用，用于输出进度"""
        path = registry.cache_path

        if not path.exists():
            logger.info("Initializing '%s' index -> %s", registry, path)
            if on_start:
                on_start(SyncAction.INITIALIZED, registry)
            repo = GitIndexRepository.init_bare(path, self.runner)
            if self.initial_branch:
                repo.fetch(registry.url, refspec_for(self.initial_branch))
            return SyncAction.INITIALIZED

        repo = GitIndexRepository.open(path, self.runner)
        logger.info("Updating '%s' index -> %s", registry, path)
        if on_start:
            on_start(SyncAction.UPDATED, registry)
        repo.fetch(registry.url, refspec_for(self._branch_of(path)))
        return SyncAction.UPDATED

    def _branch_of(self, path: Path) -> str:
        try:
            return checkout_name(path)
        except MissingRegistryCheckoutError:
            # 初始化后首次拉取失败的镜像还没有跟踪分支
            if not self.initial_branch:
                raise
            logger.warning("镜像尚无跟踪分支，使用默认分支: %s", self.initial_branch)
            return self.initial_branch

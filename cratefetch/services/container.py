"""服务容器 — 统一依赖注入

所有服务通过容器获取，同一容器内的实例共享。

用法:
    container = ServiceContainer()
    dep = container.index.get_latest_dependency("serde")

    # 显式注入配置
    cfg = Config.from_file("my_config.yml")
    container = ServiceContainer(config=cfg)

    # 全局单例
    from cratefetch.services.container import get_container
    svc = get_container().index
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cratefetch.core.config import Config
    from cratefetch.core.index.git import GitRunner
    from cratefetch.core.index.sync import IndexSynchronizer
    from cratefetch.core.protocols import VersionResolver
    from cratefetch.services.index_service import IndexService
    from cratefetch.services.names import NameResolver
    from cratefetch.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器

    executor 可替换为 fake 实现，测试中无需真实 git。
    """

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from cratefetch.core.config import get_config
            config = get_config()
        self._config = config
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def git(self) -> GitRunner:
        if "git" not in self._instances:
            from cratefetch.core.index.git import GitRunner
            self._instances["git"] = GitRunner(self._executor, git_bin=self._config.git_bin)
        return self._instances["git"]  # type: ignore[return-value]

    @property
    def synchronizer(self) -> IndexSynchronizer:
        if "synchronizer" not in self._instances:
            from cratefetch.core.index.sync import IndexSynchronizer
            self._instances["synchronizer"] = IndexSynchronizer(
                self.git, initial_branch=self._config.index_branch,
            )
        return self._instances["synchronizer"]  # type: ignore[return-value]

    @property
    def resolver(self) -> VersionResolver:
        if "resolver" not in self._instances:
            from functools import partial

            from cratefetch.core.index.git import GitIndexRepository
            from cratefetch.core.index.reader import IndexReader
            from cratefetch.services.resolver import make_resolver
            reader = IndexReader(partial(GitIndexRepository.open, runner=self.git))
            self._instances["resolver"] = make_resolver(self._config, reader)
        return self._instances["resolver"]  # type: ignore[return-value]

    @property
    def names(self) -> NameResolver:
        if "names" not in self._instances:
            from cratefetch.services.names import NameResolver
            self._instances["names"] = NameResolver(timeout=self._config.http_timeout)
        return self._instances["names"]  # type: ignore[return-value]

    @property
    def index(self) -> IndexService:
        if "index" not in self._instances:
            from cratefetch.services.index_service import IndexService
            self._instances["index"] = IndexService(
                self._config, self.resolver, self.synchronizer, self.names,
            )
        return self._instances["index"]  # type: ignore[return-value]


# ---- 全局单例 ----

_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """获取全局服务容器（首次调用时按当前配置创建）"""
    global _container  # noqa: PLW0603
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """重置全局容器（配置变更或测试隔离时使用）"""
    global _container  # noqa: PLW0603
    _container = None

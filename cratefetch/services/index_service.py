"""索引服务 — CLI 层使用的对外入口

    svc = IndexService(config)
    svc.update_registry_index()
    dep = svc.get_latest_dependency("serde")
    name = svc.get_crate_name_from_github("https://github.com/serde-rs/serde")

每次调用独立打开仓库、独立持有版本记录，调用之间不共享可变状态。
"""

from __future__ import annotations

import logging
from pathlib import Path

from cratefetch.core.config import Config
from cratefetch.core.exceptions import RepoUrlError
from cratefetch.core.index.registry import RegistryIndex
from cratefetch.core.index.sync import IndexSynchronizer, SyncListener
from cratefetch.core.models import Dependency, SyncAction
from cratefetch.core.protocols import VersionResolver
from cratefetch.services.names import NameResolver

logger = logging.getLogger(__name__)


class IndexService:
    """注册表查询、索引更新与名称解析的统一入口"""

    def __init__(
        self,
        config: Config,
        resolver: VersionResolver,
        synchronizer: IndexSynchronizer,
        names: NameResolver,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.synchronizer = synchronizer
        self.names = names

    def registry(self, source: str | None = None) -> RegistryIndex:
        """按名称 / URL 解析注册表，None 为默认注册表"""
        return RegistryIndex.resolve(source, self.config)

    def get_latest_dependency(
        self,
        name: str,
        allow_prerelease: bool = False,
        registry: RegistryIndex | None = None,
    ) -> Dependency:
        return self.resolver.latest(
            name, allow_prerelease=allow_prerelease, registry=registry,
        )

    def update_registry_index(
        self,
        registry: RegistryIndex | None = None,
        on_start: SyncListener | None = None,
    ) -> SyncAction:
        registry = registry or self.registry()
        return self.synchronizer.sync(registry, on_start=on_start)

    def get_crate_name_from_github(self, url: str) -> str:
        return self.names.from_github(url)

    def get_crate_name_from_gitlab(self, url: str) -> str:
        return self.names.from_gitlab(url)

    def get_crate_name_from_path(self, path: str | Path) -> str:
        return self.names.from_path(path)

    def get_crate_name(self, source: str) -> str:
        """按地址形式分派: GitHub / GitLab URL 或本地目录"""
        if source.startswith("https://github.com/"):
            return self.get_crate_name_from_github(source)
        if source.startswith("https://gitlab.com/"):
            return self.get_crate_name_from_gitlab(source)
        if "://" in source:
            raise RepoUrlError(f"Unable to parse git repo URL: {source}")
        return self.get_crate_name_from_path(source)

    @property
    def simulated(self) -> bool:
        return self.config.resolver == "simulated"

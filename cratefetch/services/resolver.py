"""最新版本解析器

- IndexVersionResolver: 查询本地注册表索引镜像
- SimulatedVersionResolver: 不访问任何注册表，返回确定性结果（集成测试用）

由配置项 resolver 选择，见 make_resolver()。
"""

from __future__ import annotations

import logging

from cratefetch.core.config import Config
from cratefetch.core.exceptions import ConfigError, EmptyCrateNameError
from cratefetch.core.index.reader import IndexReader
from cratefetch.core.index.registry import RegistryIndex
from cratefetch.core.index.selector import select_latest
from cratefetch.core.models import Dependency
from cratefetch.core.protocols import VersionResolver

logger = logging.getLogger(__name__)


class IndexVersionResolver:
    """从注册表索引解析最新版本"""

    def __init__(self, config: Config, reader: IndexReader | None = None) -> None:
        self.config = config
        self.reader = reader or IndexReader()

    def latest(
        self,
        name: str,
        *,
        allow_prerelease: bool = False,
        registry: RegistryIndex | None = None,
    ) -> Dependency:
        if not name:
            raise EmptyCrateNameError()
        registry = registry or RegistryIndex.default(self.config)

        records = self.reader.lookup(name, registry.cache_path)
        dep = select_latest(records, allow_prerelease)
        if dep.name != name:
            logger.warning("Added `%s` instead of `%s`", dep.name, name)
        return dep


# 模拟模式下的固定结果
SIMULATED_VERSIONS = {
    "test_breaking": "0.2.0",
    "test_nonbreaking": "0.1.1",
}


class SimulatedVersionResolver:
    """模拟解析器，结果只取决于输入"""

    def latest(
        self,
        name: str,
        *,
        allow_prerelease: bool = False,
        registry: RegistryIndex | None = None,
    ) -> Dependency:
        if allow_prerelease:
            version = f"{name}--PRERELEASE_VERSION_TEST"
        else:
            version = SIMULATED_VERSIONS.get(name, f"{name}--CURRENT_VERSION_TEST")
        return Dependency(name=name, version=version)


def make_resolver(config: Config, reader: IndexReader | None = None) -> VersionResolver:
    if config.resolver == "simulated":
        logger.info("使用模拟版本解析器")
        return SimulatedVersionResolver()
    if config.resolver == "index":
        return IndexVersionResolver(config, reader)
    raise ConfigError(f"未知的 resolver: {config.resolver}")

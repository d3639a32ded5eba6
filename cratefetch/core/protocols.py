"""领域协议定义

集中定义各层之间的接口契约（Protocol），上层依赖抽象而非具体实现。
索引读取器只依赖 IndexRepository，测试中可换成内存树。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cratefetch.core.index.registry import RegistryIndex
    from cratefetch.core.models import Dependency


# =========================================================================
# git 索引协议
# =========================================================================

class IndexTree(Protocol):
    """某个 ref 指向的目录树（只读）"""

    def blob_at(self, path: str) -> bytes | None:
        """返回 path 处 blob 的内容，路径不存在返回 None"""
        ...


class IndexRepository(Protocol):
    """注册表索引仓库（只读视图）"""

    def tree_at(self, ref: str) -> IndexTree:
        """解析 ref 并剥离到 tree"""
        ...


class RepositoryOpener(Protocol):
    """按本地路径打开索引仓库"""

    def __call__(self, path: Path) -> IndexRepository:
        ...


# =========================================================================
# 版本解析协议
# =========================================================================

class VersionResolver(Protocol):
    """最新版本解析能力

    真实实现查询注册表索引；模拟实现返回确定性的测试结果。
    """

    def latest(
        self,
        name: str,
        *,
        allow_prerelease: bool = False,
        registry: RegistryIndex | None = None,
    ) -> Dependency:
        """返回 name 的最新可用版本"""
        ...

"""数据模型

- Dependency: 解析结果（名称 + 版本），不可变
- VersionRecord: 索引文件中的一行
- SyncAction: 索引同步执行的动作
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass

import semver

from cratefetch.core.exceptions import InvalidSummaryJsonError


@dataclass(frozen=True)
class Dependency:
    """一个依赖的名称与版本"""

    name: str
    version: str

    def __str__(self) -> str:
        return f'{self.name} = "{self.version}"'


@dataclass
class VersionRecord:
    """索引中一个已发布版本: {"name": ..., "vers": ..., "yanked": ...}

    其余字段（deps、cksum、features 等）忽略。
    """

    name: str
    version: semver.Version
    yanked: bool

    @property
    def is_prerelease(self) -> bool:
        return self.version.prerelease is not None

    @classmethod
    def from_json_line(cls, line: str) -> VersionRecord:
        """解析单行 JSON，格式不符抛 InvalidSummaryJsonError"""
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise InvalidSummaryJsonError(f"索引行不是有效 JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidSummaryJsonError("索引行不是 JSON 对象")

        name = data.get("name")
        vers = data.get("vers")
        yanked = data.get("yanked")
        if not isinstance(name, str) or not isinstance(vers, str):
            raise InvalidSummaryJsonError("索引行缺少 name / vers 字段")
        if not isinstance(yanked, bool):
            raise InvalidSummaryJsonError(f"索引行 yanked 字段无效: {name}@{vers}")
        try:
            version = semver.Version.parse(vers)
        except ValueError as e:
            raise InvalidSummaryJsonError(f"无效的语义化版本: {vers}") from e
        return cls(name=name, version=version, yanked=yanked)


class SyncAction(enum.Enum):
    """索引同步动作，value 为终端状态行使用的动词"""

    INITIALIZED = "Initializing"
    UPDATED = "Updating"

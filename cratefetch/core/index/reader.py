"""注册表索引读取

索引文件每行一个 JSON 对象，对应一个已发布版本；
行的先后顺序不作保证，读取方不依赖排序。
"""

from __future__ import annotations

import logging
from pathlib import Path

from cratefetch.core.exceptions import InvalidSummaryJsonError, NoCrateError
from cratefetch.core.index.git import REMOTE_REFS, GitIndexRepository, checkout_name
from cratefetch.core.index.paths import fuzzy_names, path_for
from cratefetch.core.models import VersionRecord
from cratefetch.core.protocols import RepositoryOpener

logger = logging.getLogger(__name__)


def parse_summary(content: bytes) -> list[VersionRecord]:
    """解析一个索引条目的全部版本记录，空行跳过

    只按 LF 分行，行尾的 CR 去掉。JSON 字符串里可以直接出现 U+2028、U+0085
    等字符，str.splitlines 会把它们误当作换行。
    """
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidSummaryJsonError("索引条目不是有效的 UTF-8") from e
    return [
        VersionRecord.from_json_line(line.removesuffix("\r"))
        for line in text.split("\n")
        if line.strip()
    ]


class IndexReader:
    """按模糊名称在索引镜像中查找 crate"""

    def __init__(self, opener: RepositoryOpener | None = None) -> None:
        self._open = opener or GitIndexRepository.open

    def lookup(self, name: str, cache_path: Path) -> list[VersionRecord]:
        """返回 name 的全部版本记录

        变体按 fuzzy_names 的顺序尝试（原名优先），命中第一个即停止。
        """
        cache_path = Path(cache_path)
        branch = checkout_name(cache_path)
        tree = self._open(cache_path).tree_at(REMOTE_REFS + branch)

        for variant in fuzzy_names(name):
            content = tree.blob_at(path_for(variant))
            if content is None:
                continue
            if variant != name:
                logger.debug("模糊匹配: %s -> %s", name, variant)
            records = parse_summary(content)
            logger.info("索引命中 %s: %d 个版本", path_for(variant), len(records))
            return records

        raise NoCrateError(name)

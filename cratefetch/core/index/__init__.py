"""注册表索引

- paths.py: 索引路径推导与模糊名称
- registry.py: 注册表标识与本地缓存路径
- git.py: 基于 git 命令行的索引仓库
- sync.py: 索引同步
- reader.py: 索引读取与解析
- selector.py: 版本选择
"""

from cratefetch.core.index.paths import fuzzy_names, path_for
from cratefetch.core.index.reader import IndexReader, parse_summary
from cratefetch.core.index.registry import RegistryIndex
from cratefetch.core.index.selector import select_latest
from cratefetch.core.index.sync import IndexSynchronizer

__all__ = [
    "IndexReader",
    "IndexSynchronizer",
    "RegistryIndex",
    "fuzzy_names",
    "parse_summary",
    "path_for",
    "select_latest",
]

"""索引路径推导

crate 在索引树中的位置由小写名称的长度决定:

| 长度 | 路径              |
| ---- | ----------------- |
| 1    | 1/<name>          |
| 2    | 2/<name>          |
| 3    | 3/<c0>/<name>     |
| >=4  | <c0c1>/<c2c3>/<name> |

注册表对 "-" 与 "_" 不做区分，查询时按模糊变体逐个尝试。
"""

from __future__ import annotations

from cratefetch.core.exceptions import EmptyCrateNameError

SEPARATORS = ("-", "_")

# 参与替换的分隔符位置上限，10 个位置最多产生 1024 个变体
MAX_FUZZY_SEPARATORS = 10


def _ascii_lower(name: str) -> str:
    return "".join(c.lower() if c.isascii() else c for c in name)


def path_for(name: str) -> str:
    """crate 名称 -> 索引树中的相对路径"""
    lowered = _ascii_lower(name)
    size = len(lowered)
    if size == 0:
        raise EmptyCrateNameError()
    if size == 1:
        return f"1/{lowered}"
    if size == 2:
        return f"2/{lowered}"
    if size == 3:
        return f"3/{lowered[0]}/{lowered}"
    return f"{lowered[:2]}/{lowered[2:4]}/{lowered}"


def fuzzy_names(name: str) -> list[str]:
    """生成分隔符变体，原名（若在其中）排在最前

    >>> fuzzy_names("cargo-edit")
    ['cargo-edit', 'cargo_edit']
    """
    positions = [i for i, c in enumerate(name) if c in SEPARATORS][:MAX_FUZZY_SEPARATORS]
    if not positions:
        return [name]

    chars = list(name)
    variants: list[str] = []
    for mask in range(2 ** len(positions)):
        for bit, pos in enumerate(positions):
            chars[pos] = "-" if (mask >> bit) & 1 else "_"
        variants.append("".join(chars))

    if name in variants:
        variants.remove(name)
        variants.insert(0, name)
    return variants

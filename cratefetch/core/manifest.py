"""Cargo.toml 清单读取

只负责解析与取值，写回不在此处理。
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from cratefetch.core.exceptions import ManifestParseError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "Cargo.toml"


class Manifest:
    """已解析的 Cargo.toml"""

    def __init__(self, data: dict[str, Any], path: Path | None = None) -> None:
        self.data = data
        self.path = path

    @classmethod
    def parse(cls, text: str) -> Manifest:
        try:
            return cls(tomllib.loads(text))
        except tomllib.TOMLDecodeError as e:
            raise ManifestParseError(f"Cargo.toml 解析失败: {e}") from e

    @classmethod
    def open(cls, path: str | Path | None = None) -> Manifest:
        """读取清单文件；path 为 None 时从当前目录向上查找"""
        manifest_path = Path(path) if path is not None else find_manifest(Path.cwd())
        try:
            text = manifest_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestParseError(f"无法打开 {manifest_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"{manifest_path} 不是 UTF-8 文本") from e
        manifest = cls.parse(text)
        manifest.path = manifest_path
        return manifest

    @property
    def package_name(self) -> str:
        """package.name 字段"""
        package = self.data.get("package")
        name = package.get("name") if isinstance(package, dict) else None
        if not isinstance(name, str):
            raise ManifestParseError("Cargo.toml 缺少 package.name")
        return name


def find_manifest(start: Path) -> Path:
    """从 start 向上逐级查找 Cargo.toml"""
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_FILE
        if candidate.is_file():
            logger.debug("找到清单: %s", candidate)
            return candidate
    raise ManifestParseError(f"在 {start} 及其上级目录中找不到 {MANIFEST_FILE}")

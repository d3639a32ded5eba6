"""注册表标识

RegistryIndex 由索引 URL（及可选的名称）确定，本地缓存路径由标识推导:

    <cargo_home>/registry/index/<host>-<sha256(url) 前 16 位>

命名注册表可在配置中直接指定 cache_path。
"""

from __future__ import annotations

import hashlib
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from cratefetch.core.config import Config
from cratefetch.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CARGO_CONFIG_FILES = ("config.toml", "config")


@dataclass(frozen=True)
class RegistryIndex:
    """一个注册表索引"""

    url: str
    name: str = ""
    cache_root: Path | None = None
    cache_override: Path | None = None

    def __str__(self) -> str:
        return self.name or self.url

    @property
    def cache_path(self) -> Path:
        """本地镜像目录，同一标识总是得到同一路径"""
        if self.cache_override is not None:
            return self.cache_override
        root = self.cache_root if self.cache_root is not None else Path.home() / ".cargo"
        return root / "registry" / "index" / self.ident

    @property
    def ident(self) -> str:
        parsed = urlparse(self.url)
        host = parsed.hostname or "local"
        digest = hashlib.sha256(self.url.rstrip("/").encode("utf-8")).hexdigest()[:16]
        return f"{host}-{digest}"

    # ------------------------------------------------------------------
    # 构造
    # ------------------------------------------------------------------

    @classmethod
    def default(cls, config: Config) -> RegistryIndex:
        return cls(url=config.default_index, cache_root=config.cargo_home_path)

    @classmethod
    def resolve(cls, source: str | None, config: Config) -> RegistryIndex:
        """source 为 None 取默认注册表，含 "://" 视为 URL，否则按名称查找"""
        if not source:
            return cls.default(config)
        if "://" in source:
            return cls(url=source, cache_root=config.cargo_home_path)

        entry = config.registries.get(source) or _cargo_config_registries(config).get(source)
        if not entry or not entry.get("index"):
            raise ConfigError(f"未定义的注册表: {source}")
        override = entry.get("cache_path")
        return cls(
            url=entry["index"],
            name=source,
            cache_root=config.cargo_home_path,
            cache_override=Path(override).expanduser() if override else None,
        )


def _cargo_config_registries(config: Config) -> dict[str, dict[str, str]]:
    """读取 $CARGO_HOME/config.toml 中的 [registries.<name>] 段"""
    for filename in CARGO_CONFIG_FILES:
        path = config.cargo_home_path / filename
        if not path.is_file():
            continue
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"cargo 配置无效: {path}: {e}") from e
        registries = data.get("registries") or {}
        logger.debug("从 %s 读取 %d 个注册表", path, len(registries))
        return {
            name: {"index": str(info.get("index", ""))}
            for name, info in registries.items()
            if isinstance(info, dict)
        }
    return {}

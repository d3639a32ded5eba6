"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from cratefetch.core.exceptions import ConfigError
from cratefetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

CRATES_IO_INDEX = "https://github.com/rust-lang/crates.io-index"

RESOLVER_MODES = ("index", "simulated")


@dataclass
class Config:
    """全局配置"""

    # 注册表
    cargo_home: str = ""
    default_index: str = CRATES_IO_INDEX
    registries: dict[str, dict[str, str]] = field(default_factory=dict)
    index_branch: str = "master"

    # 外部调用
    git_bin: str = "git"
    http_timeout: int = 10

    # "index" 查询真实索引；"simulated" 返回确定性的测试结果
    resolver: str = "index"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.resolver not in RESOLVER_MODES:
            raise ConfigError(
                f"未知的 resolver: {self.resolver}，可选: {', '.join(RESOLVER_MODES)}"
            )
        if self.registries is None:
            self.registries = {}
        if not isinstance(self.registries, dict):
            raise ConfigError("registries 必须是 name -> {index: url} 映射")

    @classmethod
    def from_file(cls, path: str = "configs/cratefetch.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg

    @property
    def cargo_home_path(self) -> Path:
        """cargo 根目录: 配置 > $CARGO_HOME > ~/.cargo"""
        if self.cargo_home:
            return Path(self.cargo_home).expanduser()
        env_home = os.environ.get("CARGO_HOME")
        if env_home:
            return Path(env_home)
        return Path.home() / ".cargo"


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/cratefetch.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current

"""cratefetch 命令行接口

各领域命令在子模块中注册到 main group。
"""

import os

import click

from cratefetch import __version__
from cratefetch.core.config import init_config
from cratefetch.core.exceptions import CrateFetchError
from cratefetch.services.container import get_container, reset_container
from cratefetch.services.index_service import IndexService
from cratefetch.utils.logger import setup_logging

# 该变量存在时视为模拟测试运行，不访问任何注册表
SIMULATED_ENV_FLAG = "CARGO_IS_TEST"


def _svc() -> IndexService:
    """获取全局索引服务的快捷方式"""
    return get_container().index


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="configs/cratefetch.yml", help="配置文件路径")
def main(config_path: str) -> None:
    """cratefetch - 查询 crate 注册表索引，解析最新版本"""
    setup_logging()
    try:
        cfg = init_config(config_path)
    except CrateFetchError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    if os.getenv(SIMULATED_ENV_FLAG) is not None:
        cfg.resolver = "simulated"
    reset_container()


# 注册子命令
from cratefetch.cli.cmd_index import register as _reg_index  # noqa: E402

_reg_index(main)

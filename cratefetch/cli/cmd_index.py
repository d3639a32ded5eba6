"""CLI — 注册表索引命令"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

from cratefetch.cli import _svc
from cratefetch.core.exceptions import CrateFetchError, EmptyCrateNameError
from cratefetch.core.models import SyncAction

T = TypeVar("T")


def register(group: click.Group) -> None:
    group.add_command(latest)
    group.add_command(update_index)
    group.add_command(crate_name)


def _guard(func: Callable[[], T]) -> T:
    """业务异常转为 ClickException，输出错误码与提示"""
    try:
        return func()
    except CrateFetchError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


def _echo_status(action: SyncAction, registry: object) -> None:
    status = click.style(f"{action.value:>12}", fg="green", bold=True)
    click.echo(f"{status} '{registry}' index")


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--allow-prerelease", is_flag=True, help="允许选择预发布版本")
@click.option("--registry", default=None, help="注册表名称或索引 URL（默认 crates.io）")
@click.option("--offline", is_flag=True, help="不更新索引，直接使用本地镜像")
def latest(names: tuple[str, ...], allow_prerelease: bool, registry: str | None, offline: bool) -> None:
    """查询 crate 的最新版本"""
    svc = _svc()
    reg = _guard(lambda: svc.registry(registry))
    if not offline and not svc.simulated:
        # 空名称在访问网络前拒绝
        if not all(names):
            e = EmptyCrateNameError()
            raise click.ClickException(f"[{e.code}] {e}")
        _guard(lambda: svc.update_registry_index(reg, on_start=_echo_status))

    for name in names:
        dep = _guard(lambda n=name: svc.get_latest_dependency(n, allow_prerelease, reg))
        if dep.name != name:
            click.echo(f"WARN: Added `{dep.name}` instead of `{name}`")
        click.echo(str(dep))


@click.command(name="update-index")
@click.option("--registry", default=None, help="注册表名称或索引 URL（默认 crates.io）")
def update_index(registry: str | None) -> None:
    """初始化或更新本地索引镜像"""
    svc = _svc()
    reg = _guard(lambda: svc.registry(registry))
    _guard(lambda: svc.update_registry_index(reg, on_start=_echo_status))


@click.command(name="crate-name")
@click.argument("source")
def crate_name(source: str) -> None:
    """从 GitHub / GitLab 仓库地址或本地目录读取 crate 名称"""
    click.echo(_guard(lambda: _svc().get_crate_name(source)))

"""共享 fixture — 内存索引树 + fake 命令执行器

reader / sync 的单元测试不依赖真实 git:
  - memory_repo: 路径 -> 内容 的内存树，按 ref 组织
  - fake_executor: 记录每次调用，按 handler 返回结果
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

import cratefetch.core.config as cfgmod
from cratefetch.core.exceptions import IndexGitError
from cratefetch.services.container import reset_container
from cratefetch.utils.shell import CommandResult


class MemoryTree:
    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = files
        self.lookups: list[str] = []

    def blob_at(self, path: str) -> bytes | None:
        self.lookups.append(path)
        return self.files.get(path)


class MemoryRepository:
    def __init__(self, trees: dict[str, MemoryTree]) -> None:
        self.trees = trees

    def tree_at(self, ref: str) -> MemoryTree:
        if ref not in self.trees:
            raise IndexGitError(f"无法解析 ref: {ref}")
        return self.trees[ref]


class FakeExecutor:
    def __init__(self, handler: Callable[[list[str]], CommandResult] | None = None) -> None:
        self.calls: list[dict] = []
        self.handler = handler or (lambda cmd: CommandResult(0, "", ""))

    def execute(self, cmd, *, cwd=".", env=None, timeout=None) -> CommandResult:
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": env})
        return self.handler(list(cmd))


def summary_lines(*records: tuple[str, str, bool]) -> bytes:
    """[(name, vers, yanked), ...] -> 索引条目内容"""
    return "".join(
        json.dumps({"name": n, "vers": v, "deps": [], "cksum": "0" * 64, "yanked": y}) + "\n"
        for n, v, y in records
    ).encode("utf-8")


def make_checkout(path: Path, branch: str = "master", bare: bool = True) -> Path:
    """在 path 下伪造 refs/remotes/origin/<branch>"""
    refs = (path if bare else path / ".git") / "refs" / "remotes" / "origin"
    refs.mkdir(parents=True, exist_ok=True)
    (refs / branch).write_text("0" * 40 + "\n")
    return path


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def memory_index(tmp_path: Path):
    """返回 (cache_path, opener, tree)，tree 挂在 refs/remotes/origin/master"""
    cache_path = make_checkout(tmp_path / "index")
    tree = MemoryTree({})
    repo = MemoryRepository({"refs/remotes/origin/master": tree})
    return cache_path, (lambda path: repo), tree


@pytest.fixture()
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> cfgmod.Config:
    """独立的全局配置，cargo_home 指向临时目录"""
    cfg = cfgmod.Config(cargo_home=str(tmp_path / "cargo"))
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield cfg
    reset_container()

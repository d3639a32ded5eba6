"""外部命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
git 索引的初始化、fetch 与读取全部经由此处。
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

# 这些变量会让 git 忽略 cwd / --git-dir 指向别处的仓库
# （例如在 `git rebase --exec` 中被调用时 GIT_DIR 已被设置）
GIT_LOCATION_VARS = (
    "GIT_DIR",
    "GIT_WORK_TREE",
    "GIT_INDEX_FILE",
    "GIT_OBJECT_DIRECTORY",
    "GIT_ALTERNATE_OBJECT_DIRECTORIES",
)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）

    raw_stdout 保留原始字节，读取 blob 内容时使用。
    """

    returncode: int
    stdout: str
    stderr: str
    raw_stdout: bytes = b""

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    测试时可注入 fake 实现，无需真实 git。
    启动失败（可执行文件不存在等）以 OSError 抛出。
    """

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        logger.debug("exec: %s (cwd=%s)", " ".join(cmd), cwd)
        r = subprocess.run(
            cmd, capture_output=True,
            cwd=cwd, env=env, check=False, timeout=timeout,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout.decode("utf-8", errors="replace"),
            stderr=r.stderr.decode("utf-8", errors="replace"),
            raw_stdout=r.stdout,
        )


def sanitized_git_env(base: dict[str, str] | None = None) -> dict[str, str]:
    """复制环境变量并移除全部仓库定位变量"""
    env = dict(os.environ if base is None else base)
    for var in GIT_LOCATION_VARS:
        env.pop(var, None)
    return env

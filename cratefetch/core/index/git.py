"""基于 git 命令行的索引仓库

所有调用都带显式 --git-dir 并使用清理过的环境变量，
确保操作的是注册表镜像而不是父进程所在的仓库。
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from cratefetch.core.exceptions import (
    IndexGitError,
    IndexIoError,
    MissingRegistryCheckoutError,
    NonUnicodeGitPathError,
)
from cratefetch.utils.shell import (
    CommandExecutor,
    CommandResult,
    LocalExecutor,
    sanitized_git_env,
)

logger = logging.getLogger(__name__)

REMOTE_REFS = "refs/remotes/origin/"


class GitRunner:
    """git 命令调用器，统一处理环境清理与错误映射"""

    def __init__(self, executor: CommandExecutor | None = None, git_bin: str = "git") -> None:
        self.executor = executor or LocalExecutor()
        self.git_bin = git_bin

    def run(self, args: list[str], *, cwd: Path | str = ".", check: bool = True) -> CommandResult:
        """执行 git 子命令

        启动失败 -> IndexIoError；check=True 且返回非零 -> IndexGitError
        """
        cmd = [self.git_bin, *args]
        try:
            r = self.executor.execute(cmd, cwd=str(cwd), env=sanitized_git_env())
        except (OSError, subprocess.SubprocessError) as e:
            raise IndexIoError(f"无法执行 {' '.join(cmd)}: {e}") from e
        if check and not r.success:
            raise IndexGitError(
                f"git {_subcommand(args)} 失败 (rc={r.returncode}): {r.stderr.strip()[:500]}"
            )
        return r


def _subcommand(args: list[str]) -> str:
    """跳过 --git-dir= 等全局选项，取子命令名"""
    return next((a for a in args if not a.startswith("-")), " ".join(args))


def git_dir_of(path: Path) -> Path:
    """普通仓库返回 <path>/.git，裸仓库返回 path 本身"""
    dot_git = path / ".git"
    return dot_git if dot_git.is_dir() else path


class GitTree:
    """某个 tree 对象的只读视图"""

    def __init__(self, runner: GitRunner, git_dir: Path, tree_id: str) -> None:
        self._runner = runner
        self._git_dir = git_dir
        self.tree_id = tree_id

    def blob_at(self, path: str) -> bytes | None:
        spec = f"{self.tree_id}:{path}"
        r = self._runner.run(
            [f"--git-dir={self._git_dir}", "cat-file", "-t", spec], check=False,
        )
        if not r.success:
            return None
        kind = r.stdout.strip()
        if kind != "blob":
            raise IndexGitError(f"{path} 不是 blob (实际类型: {kind})")
        blob = self._runner.run([f"--git-dir={self._git_dir}", "cat-file", "blob", spec])
        return blob.raw_stdout


class GitIndexRepository:
    """注册表索引镜像（普通仓库或裸仓库）"""

    def __init__(self, path: Path, runner: GitRunner | None = None) -> None:
        self.path = Path(path)
        self.runner = runner or GitRunner()
        self.git_dir = git_dir_of(self.path)

    @classmethod
    def open(cls, path: Path, runner: GitRunner | None = None) -> GitIndexRepository:
        """打开已有仓库，路径不是 git 仓库时抛 IndexGitError"""
        repo = cls(path, runner)
        if not repo.path.exists():
            raise IndexGitError(f"注册表镜像不存在: {repo.path}")
        repo.runner.run([f"--git-dir={repo.git_dir}", "rev-parse", "--git-dir"])
        return repo

    @classmethod
    def init_bare(cls, path: Path, runner: GitRunner | None = None) -> GitIndexRepository:
        """在 path 新建裸仓库（自动创建上级目录）"""
        runner = runner or GitRunner()
        path = Path(path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IndexIoError(f"无法创建目录 {path}: {e}") from e
        runner.run(["init", "--bare", "--quiet", str(path)])
        return cls(path, runner)

    def tree_at(self, ref: str) -> GitTree:
        r = self.runner.run(
            [f"--git-dir={self.git_dir}", "rev-parse", "--verify", "--quiet", f"{ref}^{{tree}}"],
            check=False,
        )
        if not r.success or not r.stdout.strip():
            raise IndexGitError(f"无法解析 ref: {ref}")
        return GitTree(self.runner, self.git_dir, r.stdout.strip())

    def fetch(self, url: str, refspec: str) -> None:
        """拉取远端分支到本地跟踪 ref

        --tags 拉取全部标签，--force 接受强制推送，
        --update-head-ok 允许更新当前检出的分支。
        """
        logger.info("git fetch %s %s -> %s", url, refspec, self.git_dir)
        self.runner.run(
            [
                f"--git-dir={self.git_dir}", "fetch",
                "--tags", "--force", "--update-head-ok",
                url, refspec,
            ],
            cwd=self.git_dir,
        )


def checkout_name(registry_path: Path) -> str:
    """读取 refs/remotes/origin/ 下已检出分支的名称

    依次查看 <path>/.git/refs/remotes/origin/（普通仓库）
    与 <path>/refs/remotes/origin/（裸仓库），都没有松散 ref 时读取 packed-refs。
    同时存在 HEAD 与分支时取分支。
    """
    registry_path = Path(registry_path)
    checkout_dir = registry_path / ".git" / REMOTE_REFS
    bare_checkout_dir = registry_path / REMOTE_REFS

    names: list[str] = []
    for candidate in (checkout_dir, bare_checkout_dir):
        try:
            names = os.listdir(candidate)
        except FileNotFoundError:
            continue
        except OSError as e:
            raise IndexIoError(f"无法读取 {candidate}: {e}") from e
        break
    if not names:
        names = _packed_remote_refs(git_dir_of(registry_path))
    if not names:
        raise MissingRegistryCheckoutError(checkout_dir)

    names.sort()
    branches = [n for n in names if n != "HEAD"] or names
    name = branches[0]
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise NonUnicodeGitPathError() from e
    return name


def _packed_remote_refs(git_dir: Path) -> list[str]:
    packed = git_dir / "packed-refs"
    if not packed.is_file():
        return []
    names = []
    for line in packed.read_bytes().splitlines():
        parts = line.split(b" ", 1)
        if len(parts) != 2 or not parts[1].startswith(REMOTE_REFS.encode()):
            continue
        raw = parts[1][len(REMOTE_REFS):].strip()
        if b"/" in raw:
            continue
        try:
            names.append(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise NonUnicodeGitPathError() from e
    return names

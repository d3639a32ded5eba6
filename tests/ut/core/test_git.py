"""git 索引仓库测试 — 分支发现 + fake 执行器"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import FakeExecutor, make_checkout
from cratefetch.core.exceptions import (
    IndexGitError,
    IndexIoError,
    MissingRegistryCheckoutError,
)
from cratefetch.core.index.git import GitIndexRepository, GitRunner, checkout_name
from cratefetch.utils.shell import GIT_LOCATION_VARS, CommandResult


class TestCheckoutName:
    def test_bare_layout(self, tmp_path: Path) -> None:
        make_checkout(tmp_path, "master", bare=True)
        assert checkout_name(tmp_path) == "master"

    def test_working_layout(self, tmp_path: Path) -> None:
        make_checkout(tmp_path, "main", bare=False)
        assert checkout_name(tmp_path) == "main"

    def test_branch_preferred_over_head(self, tmp_path: Path) -> None:
        make_checkout(tmp_path, "HEAD")
        make_checkout(tmp_path, "master")
        assert checkout_name(tmp_path) == "master"

    def test_head_only(self, tmp_path: Path) -> None:
        make_checkout(tmp_path, "HEAD")
        assert checkout_name(tmp_path) == "HEAD"

    def test_packed_refs(self, tmp_path: Path) -> None:
        (tmp_path / "packed-refs").write_text(
            "# pack-refs with: peeled fully-peeled sorted\n"
            f"{'a' * 40} refs/heads/master\n"
            f"{'b' * 40} refs/remotes/origin/master\n"
        )
        assert checkout_name(tmp_path) == "master"

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(MissingRegistryCheckoutError) as exc:
            checkout_name(tmp_path)
        assert exc.value.path == tmp_path / ".git" / "refs/remotes/origin/"


class TestGitRunner:
    def test_env_sanitized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in GIT_LOCATION_VARS:
            monkeypatch.setenv(var, "/elsewhere")
        monkeypatch.setenv("KEEP_ME", "1")
        ex = FakeExecutor()
        GitRunner(ex).run(["status"])
        env = ex.calls[0]["env"]
        assert all(var not in env for var in GIT_LOCATION_VARS)
        assert env["KEEP_ME"] == "1"
        assert os.environ["GIT_DIR"] == "/elsewhere"

    def test_nonzero_exit(self) -> None:
        ex = FakeExecutor(lambda cmd: CommandResult(128, "", "fatal: boom"))
        with pytest.raises(IndexGitError, match="fatal: boom"):
            GitRunner(ex).run(["fetch"])

    def test_error_names_subcommand(self, tmp_path: Path) -> None:
        ex = FakeExecutor(lambda cmd: CommandResult(128, "", "fatal: unable to access"))
        with pytest.raises(IndexGitError, match=r"^git fetch 失败 \(rc=128\)"):
            GitRunner(ex).run([f"--git-dir={tmp_path}", "fetch", "--tags", "https://example.com/index"])

    def test_spawn_failure(self) -> None:
        def boom(cmd):
            raise FileNotFoundError("git")
        with pytest.raises(IndexIoError):
            GitRunner(FakeExecutor(boom)).run(["fetch"])

    def test_custom_git_bin(self) -> None:
        ex = FakeExecutor()
        GitRunner(ex, git_bin="/opt/git/bin/git").run(["--version"])
        assert ex.calls[0]["cmd"] == ["/opt/git/bin/git", "--version"]


class TestGitIndexRepository:
    def test_open_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(IndexGitError, match="不存在"):
            GitIndexRepository.open(tmp_path / "nope", GitRunner(FakeExecutor()))

    def test_open_not_a_repo(self, tmp_path: Path) -> None:
        ex = FakeExecutor(lambda cmd: CommandResult(128, "", "not a git repository"))
        with pytest.raises(IndexGitError):
            GitIndexRepository.open(tmp_path, GitRunner(ex))

    def test_git_dir_detection(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        repo = GitIndexRepository(tmp_path, GitRunner(FakeExecutor()))
        assert repo.git_dir == tmp_path / ".git"
        assert GitIndexRepository(tmp_path / ".git").git_dir == tmp_path / ".git"

    def test_fetch_flags(self, tmp_path: Path) -> None:
        ex = FakeExecutor()
        repo = GitIndexRepository(tmp_path, GitRunner(ex))
        repo.fetch("https://example.com/index", "refs/heads/master:refs/remotes/origin/master")
        call = ex.calls[0]
        assert call["cmd"] == [
            "git", f"--git-dir={tmp_path}", "fetch", "--tags", "--force", "--update-head-ok",
            "https://example.com/index", "refs/heads/master:refs/remotes/origin/master",
        ]
        assert call["cwd"] == str(tmp_path)

    def test_tree_and_blob(self, tmp_path: Path) -> None:
        def handler(cmd):
            if "rev-parse" in cmd:
                return CommandResult(0, "f" * 40 + "\n", "")
            if "-t" in cmd:
                return CommandResult(0, "blob\n", "") if cmd[-1].endswith("se/rd/serde") else CommandResult(128, "", "")
            return CommandResult(0, "x", "", raw_stdout=b'{"a": 1}\n')

        ex = FakeExecutor(handler)
        tree = GitIndexRepository(tmp_path, GitRunner(ex)).tree_at("refs/remotes/origin/master")
        assert tree.tree_id == "f" * 40
        assert ex.calls[0]["cmd"][-1] == "refs/remotes/origin/master^{tree}"
        assert tree.blob_at("se/rd/serde") == b'{"a": 1}\n'
        assert tree.blob_at("no/ne/nonexistent") is None

    def test_blob_at_directory(self, tmp_path: Path) -> None:
        def handler(cmd):
            if "rev-parse" in cmd:
                return CommandResult(0, "f" * 40, "")
            return CommandResult(0, "tree\n", "")

        tree = GitIndexRepository(tmp_path, GitRunner(FakeExecutor(handler))).tree_at("x")
        with pytest.raises(IndexGitError, match="不是 blob"):
            tree.blob_at("se/rd")

    def test_unknown_ref(self, tmp_path: Path) -> None:
        ex = FakeExecutor(lambda cmd: CommandResult(1, "", ""))
        with pytest.raises(IndexGitError, match="无法解析 ref"):
            GitIndexRepository(tmp_path, GitRunner(ex)).tree_at("refs/remotes/origin/master")

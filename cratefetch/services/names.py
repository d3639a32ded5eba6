"""从仓库地址或本地目录取得 crate 名称

GitHub / GitLab 地址取 master 分支根目录的 Cargo.toml，
本地目录直接读取 <path>/Cargo.toml。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path

from cratefetch.core.exceptions import RepoUrlError
from cratefetch.core.manifest import MANIFEST_FILE, Manifest
from cratefetch.utils.net import DEFAULT_TIMEOUT, http_get_text

logger = logging.getLogger(__name__)

_SEGMENT = r"([-_0-9a-zA-Z]+)"

GITHUB_RE = re.compile(rf"^https://github\.com/{_SEGMENT}/{_SEGMENT}(/|\.git)?$")
GITLAB_RE = re.compile(rf"^https://gitlab\.com/{_SEGMENT}/{_SEGMENT}(/|\.git)?$")


def github_raw_url(user: str, repo: str) -> str:
    return f"https://raw.githubusercontent.com/{user}/{repo}/master/{MANIFEST_FILE}"


def gitlab_raw_url(user: str, repo: str) -> str:
    return f"https://gitlab.com/{user}/{repo}/raw/master/{MANIFEST_FILE}"


class NameResolver:
    """远程 / 本地 crate 名称解析"""

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        fetch: Callable[..., str] = http_get_text,
    ) -> None:
        self.timeout = timeout
        self._fetch = fetch

    def from_github(self, url: str) -> str:
        return self._from_repository(url, GITHUB_RE, github_raw_url)

    def from_gitlab(self, url: str) -> str:
        return self._from_repository(url, GITLAB_RE, gitlab_raw_url)

    def from_path(self, path: str | Path) -> str:
        """读取本地目录下的 Cargo.toml，不访问网络"""
        return Manifest.open(Path(path) / MANIFEST_FILE).package_name

    def _from_repository(
        self, url: str, matcher: re.Pattern[str], raw_url: Callable[[str, str], str],
    ) -> str:
        m = matcher.match(url)
        if m is None:
            raise RepoUrlError(f"Unable to parse git repo URL: {url}")
        manifest_url = raw_url(m.group(1), m.group(2))
        logger.info("拉取远程清单: %s", manifest_url)
        text = self._fetch(manifest_url, timeout=self.timeout)
        return Manifest.parse(text).package_name

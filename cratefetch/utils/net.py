"""网络工具 — URL 安全校验与阻塞式 GET"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from urllib.parse import urlparse

from cratefetch.core.exceptions import RemoteFetchError, ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))

DEFAULT_TIMEOUT = 10


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def http_get_text(url: str, *, timeout: int = DEFAULT_TIMEOUT) -> str:
    """阻塞式 GET，返回 UTF-8 文本

    代理配置取自环境变量（http_proxy / https_proxy / no_proxy）。
    非 2xx 状态、超时、连接失败均抛 RemoteFetchError，不重试。
    """
    validate_url_scheme(url, context="manifest fetch")
    opener = urllib.request.build_opener(
        urllib.request.ProxyHandler(urllib.request.getproxies()),
    )
    request = urllib.request.Request(url, method="GET")
    logger.info("GET %s (timeout=%ss)", url, timeout)
    try:
        with opener.open(request, timeout=timeout) as resp:  # nosec B310
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise RemoteFetchError(f"HTTP request `{url}` failed: {e.code} {e.reason}") from e
    except (urllib.error.URLError, OSError) as e:
        raise RemoteFetchError(f"HTTP request `{url}` failed: {e}") from e

    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RemoteFetchError(f"响应内容不是有效的 UTF-8 文本: {url}") from e

"""cratefetch 日志配置

只配置 ``cratefetch`` 包日志器，不动根日志器上其他组件（如 pytest caplog）
挂的 handler。级别与格式默认取环境变量:

    CRATEFETCH_LOG_LEVEL=DEBUG     # 默认 WARNING
    CRATEFETCH_LOG_JSON=1          # 输出 JSON 行，便于 CI 收集
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

from cratefetch.core.exceptions import CrateFetchError

PACKAGE_LOGGER = "cratefetch"
LEVEL_ENV = "CRATEFETCH_LOG_LEVEL"
JSON_ENV = "CRATEFETCH_LOG_JSON"

_HANDLER_NAME = "cratefetch-stderr"


class JSONFormatter(logging.Formatter):
    """每条记录一行 JSON

    业务异常额外带 error_code，与 CLI 输出的 [CODE] 一致。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            if isinstance(exc, CrateFetchError):
                entry["error_code"] = exc.code
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """配置包日志器，输出到 stderr（stdout 留给命令结果）

    参数为 None 时读取环境变量；未知级别回退到 WARNING。重复调用只替换自己的 handler。
    """
    if level is None:
        level = os.getenv(LEVEL_ENV, "WARNING")
    if json_output is None:
        json_output = os.getenv(JSON_ENV, "") == "1"

    reset_logging()
    log = logging.getLogger(PACKAGE_LOGGER)
    log.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    log.addHandler(handler)
    return log


def reset_logging() -> None:
    """移除 setup_logging 安装的 handler，并恢复默认级别"""
    log = logging.getLogger(PACKAGE_LOGGER)
    for handler in log.handlers[:]:
        if handler.get_name() == _HANDLER_NAME:
            log.removeHandler(handler)
            handler.close()
    log.setLevel(logging.NOTSET)

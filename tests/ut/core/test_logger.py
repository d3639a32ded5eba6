"""日志配置测试"""

from __future__ import annotations

import json
import logging
import sys

import pytest

from cratefetch.core.exceptions import NoCrateError
from cratefetch.utils.logger import PACKAGE_LOGGER, JSONFormatter, reset_logging, setup_logging


def _record(exc: BaseException | None = None) -> logging.LogRecord:
    exc_info = (type(exc), exc, None) if exc else None
    return logging.LogRecord(
        "cratefetch.core.index.sync", logging.INFO, __file__, 1,
        "Updating '%s' index", ("crates-io",), exc_info,
    )


class TestSetupLogging:
    def teardown_method(self) -> None:
        reset_logging()

    def test_replaces_own_handler_only(self) -> None:
        log = logging.getLogger(PACKAGE_LOGGER)
        foreign = logging.NullHandler()
        log.addHandler(foreign)
        try:
            setup_logging("DEBUG")
            setup_logging("INFO")
            assert len(log.handlers) == 2
            assert log.level == logging.INFO
            reset_logging()
            assert log.handlers == [foreign]
            assert log.level == logging.NOTSET
        finally:
            log.removeHandler(foreign)

    def test_root_untouched(self) -> None:
        before = list(logging.getLogger().handlers)
        setup_logging("DEBUG")
        assert logging.getLogger().handlers == before

    def test_unknown_level_falls_back(self) -> None:
        assert setup_logging("LOUD").level == logging.WARNING

    def test_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CRATEFETCH_LOG_LEVEL", "debug")
        monkeypatch.setenv("CRATEFETCH_LOG_JSON", "1")
        log = setup_logging()
        assert log.level == logging.DEBUG
        assert isinstance(log.handlers[-1].formatter, JSONFormatter)

    def test_writes_to_stderr(self) -> None:
        log = setup_logging("INFO", json_output=False)
        assert log.handlers[-1].stream is sys.stderr


class TestJSONFormatter:
    def test_fields(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert data["message"] == "Updating 'crates-io' index"
        assert data["level"] == "INFO"
        assert data["logger"] == "cratefetch.core.index.sync"
        assert "exception" not in data

    def test_error_code(self) -> None:
        data = json.loads(JSONFormatter().format(_record(NoCrateError("ghost"))))
        assert data["error_code"] == "NO_CRATE"
        assert "NoCrateError" in data["exception"]

    def test_plain_exception_has_no_code(self) -> None:
        data = json.loads(JSONFormatter().format(_record(ValueError("x"))))
        assert "error_code" not in data
        assert "ValueError" in data["exception"]

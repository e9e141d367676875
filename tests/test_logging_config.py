"""Tests for logging setup, formatting and context fields."""

from __future__ import annotations

import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from bezier_road.utils import logging_config


@pytest.fixture(autouse=True)
def _isolated(restore_logging):
    yield


def _record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("bezier_road.test", level, __file__, 1, msg, None, None)


class TestFormatter:
    def test_human_format(self) -> None:
        logging_config.push_context(app="build_road")
        line = logging_config.ContextFormatter("human", use_color=False).format(_record())
        assert "| INFO" in line
        assert "app=build_road |" in line
        assert line.endswith("hello")

    def test_json_format(self) -> None:
        logging_config.push_context(app="build_road", mode="count")
        line = logging_config.ContextFormatter("json").format(_record("placed"))
        entry = json.loads(line)
        assert entry["lvl"] == "INFO"
        assert entry["msg"] == "placed"
        assert entry["app"] == "build_road"
        assert entry["mode"] == "count"

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            logging_config.ContextFormatter("xml")


class TestContext:
    def test_push_and_pop(self) -> None:
        logging_config.push_context(app="a", spline="s")
        logging_config.push_context(mode="distance")
        assert logging_config.get_context() == {"app": "a", "spline": "s", "mode": "distance"}
        logging_config.pop_context(keys=["mode"])
        assert logging_config.get_context() == {"app": "a", "spline": "s"}
        logging_config.pop_context()
        assert logging_config.get_context() == {}


class TestSetup:
    def test_file_logging_json(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "road.log"
        logging_config.setup_logging(
            "DEBUG", str(log_file), json=True, to_stderr=False, context={"app": "test"}
        )
        logging.getLogger("bezier_road.test").debug("table built")
        for handler in logging.getLogger().handlers:
            handler.flush()
        entry = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert entry["msg"] == "table built"
        assert entry["app"] == "test"

    def test_repeated_setup_does_not_stack(self) -> None:
        first = logging_config.setup_logging("INFO", to_stderr=True)
        second = logging_config.setup_logging("INFO", to_stderr=True)
        root = logging.getLogger()
        assert len(second) == 1
        assert first[0] not in root.handlers
        assert second[0] in root.handlers

    def test_rotating_handler(self, tmp_path: Path) -> None:
        handlers = logging_config.setup_logging(
            "INFO", str(tmp_path / "r.log"), to_stderr=False,
            rotate={"max_bytes": 1000, "backup_count": 1},
        )
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)

    def test_bad_level(self) -> None:
        with pytest.raises(ValueError):
            logging_config.setup_logging("LOUD")

    def test_quiet_libs(self) -> None:
        logging_config.setup_logging("DEBUG", to_stderr=False, quiet_libs=["noisy.lib"])
        assert logging.getLogger("noisy.lib").level == logging.WARNING

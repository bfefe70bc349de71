"""Tests for AppLogger setup."""

import logging
from pathlib import Path
from typing import Any, Dict

import pytest

from passpersist.app_logger import AppLogger, ColoredFormatter, LoggingConfig


class DictConfig:
    def __init__(self, values: Dict[str, Any]) -> None:
        self.values = values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


@pytest.mark.usefixtures("reset_app_logger")
def test_console_logs_go_to_stderr_only(capsys: pytest.CaptureFixture[str]) -> None:
    AppLogger.configure(DictConfig({"logger": {"level": "INFO"}}))  # type: ignore[arg-type]
    AppLogger.get("passpersist.test").info("hello from the agent")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello from the agent" in captured.err


@pytest.mark.usefixtures("reset_app_logger")
def test_file_logging(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    AppLogger.configure(DictConfig({  # type: ignore[arg-type]
        "logger": {"level": "debug", "console": False, "log_dir": str(log_dir), "log_file": "pp.log"},
    }))
    AppLogger.get("passpersist.test").debug("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "written to file" in (log_dir / "pp.log").read_text()
    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.usefixtures("reset_app_logger")
def test_defaults_and_unknown_level() -> None:
    AppLogger(LoggingConfig(level="chatty", console=False))
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(h, logging.NullHandler) for h in root.handlers)


@pytest.mark.usefixtures("reset_app_logger")
def test_configure_only_once() -> None:
    AppLogger(LoggingConfig(level="ERROR", console=False))
    AppLogger(LoggingConfig(level="DEBUG", console=False))
    assert logging.getLogger().level == logging.ERROR


def test_colored_formatter_restores_levelname() -> None:
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
    text = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert text == "\033[31mERROR\033[0m boom"
    assert record.levelname == "ERROR"

from __future__ import annotations

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, cast

if TYPE_CHECKING:
    from passpersist.app_config import AppConfig


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    log_dir: Optional[Path] = None
    log_file: str = "passpersist.log"
    console: bool = True
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds color to log levels for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
        result = super().format(record)
        record.levelname = original_levelname
        return result


class AppLogger:
    """Root logger setup.

    Console output goes to stderr only: stdout carries the pass_persist
    protocol and snmpd reads every line written there as a response.
    """
    _configured: bool = False

    @staticmethod
    def configure(app_config: "AppConfig") -> None:
        """
        Configure logging from an AppConfig instance.
        """
        logger_cfg = cast(dict[str, Any], app_config.get('logger', {}) or {})
        log_dir = logger_cfg.get('log_dir')
        config = LoggingConfig(
            level=str(logger_cfg.get('level', 'WARNING')),
            log_dir=Path(log_dir).resolve() if log_dir else None,
            log_file=logger_cfg.get('log_file', 'passpersist.log'),
            console=bool(logger_cfg.get('console', True)),
            max_bytes=int(logger_cfg.get('max_bytes', 10 * 1024 * 1024)),
            backup_count=int(logger_cfg.get('backup_count', 5)),
        )
        AppLogger(config)

    def __init__(self, config: LoggingConfig) -> None:
        if AppLogger._configured:
            return
        self._configure(config)
        AppLogger._configured = True

    @staticmethod
    def get(name: str | None = None) -> logging.Logger:
        return logging.getLogger(name)

    @staticmethod
    def _configure(config: LoggingConfig) -> None:
        level_name = config.level.upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.WARNING

        root = logging.getLogger()
        root.setLevel(level)

        for handler in list(root.handlers):
            root.removeHandler(handler)

        fmt = (
            "%(asctime)s.%(msecs)03d "
            "%(levelname)s "
            "%(name)s "
            "[%(process)d] "
            "%(message)s"
        )
        datefmt = "%Y-%m-%d %H:%M:%S"

        if config.log_dir is not None:
            config.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=config.log_dir / config.log_file,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
            root.addHandler(file_handler)

        if config.console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt=datefmt))
            root.addHandler(console_handler)

        if not root.handlers:
            root.addHandler(logging.NullHandler())

        AppLogger._suppress_third_party_loggers()

    @staticmethod
    def _suppress_third_party_loggers() -> None:
        logging.getLogger("pysnmp").setLevel(logging.WARNING)
        logging.getLogger("pyasn1").setLevel(logging.WARNING)

"""Logging helpers for the cash ledger.

Loggers write to ``<project>/logs/<subdir>/<YYYYMMDD>_<prefix>.log`` and can
mirror records to the console. Two process-wide loggers are exposed:

* the application logger, for operational messages from use cases and
  adapters;
* the audit logger, with one line per posted movement or correction.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from src.utils.utils import get_project_root

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class LoggerBuilder:
    """Fluent builder for file and console loggers."""

    def __init__(self) -> None:
        self._name = "app"
        self._subdir = "app"
        self._prefix = "app"
        self._console = False
        self._level = logging.INFO
        self._formatter_factory: Callable[[], logging.Formatter] = (
            LoggerBuilder._default_formatter
        )
        self._file_handler_factory: Callable[
            [Path, logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_file_handler
        self._console_handler_factory: Callable[
            [logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_console_handler

    def name(self, name: str) -> "LoggerBuilder":
        self._name = name
        return self

    def subdir(self, subdir: str) -> "LoggerBuilder":
        self._subdir = subdir
        return self

    def prefix(self, prefix: str) -> "LoggerBuilder":
        self._prefix = prefix
        return self

    def console(self, enabled: bool) -> "LoggerBuilder":
        self._console = enabled
        return self

    def level(self, level: int) -> "LoggerBuilder":
        self._level = level
        return self

    def formatter(
        self,
        factory: Callable[[], logging.Formatter],
    ) -> "LoggerBuilder":
        self._formatter_factory = factory
        return self

    def file_handler(
        self,
        factory: Callable[[Path, logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._file_handler_factory = factory
        return self

    def console_handler(
        self,
        factory: Callable[[logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._console_handler_factory = factory
        return self

    def build(self) -> logging.Logger:
        """Create the logger, or return it unchanged if already configured.

        Returns:
            logging.Logger: Logger with a file handler and, optionally, a
            console handler.
        """
        logger = logging.getLogger(self._name)
        if logger.handlers:
            return logger
        logger.setLevel(self._level)
        logger.propagate = False

        log_dir = get_project_root() / "logs" / self._subdir
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{self._today_stamp()}_{self._prefix}.log"

        fmt = self._formatter_factory()
        logger.addHandler(self._file_handler_factory(log_path, fmt))
        if self._console:
            logger.addHandler(self._console_handler_factory(fmt))
        return logger

    @staticmethod
    def _today_stamp() -> str:
        return datetime.now().strftime("%Y%m%d")

    @staticmethod
    def _default_formatter() -> logging.Formatter:
        return logging.Formatter(_DEFAULT_FORMAT)

    @staticmethod
    def _default_file_handler(
        path: Path,
        fmt: logging.Formatter,
    ) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler

    @staticmethod
    def _default_console_handler(fmt: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler


def _console_enabled() -> bool:
    raw = os.getenv("LEDGER_LOG_CONSOLE", "false").strip().lower()
    return raw in ("1", "true", "yes", "on")


class Logger:
    """Singleton wrapper around a configured ``logging.Logger``.

    Each subclass keeps its own instance.
    """

    _instance: "Logger | None" = None
    _subdir = "app"
    _prefix = "app"

    def __new__(cls, name: str = "app") -> "Logger":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.logger = (
                LoggerBuilder()
                .name(name)
                .subdir(cls._subdir)
                .prefix(cls._prefix)
                .console(_console_enabled())
                .build()
            )
            cls._instance = instance
        return cls._instance

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def critical(self, msg: str) -> None:
        self.logger.critical(msg)


class AppLogger(Logger):
    """Operational logger for use cases and adapters."""

    _instance = None
    _subdir = "app"
    _prefix = "ledger"


class AuditLogger(Logger):
    """Logger recording every posted movement and correction."""

    _instance = None
    _subdir = "audit"
    _prefix = "movements"


def get_app_logger() -> AppLogger:
    """Return the shared application logger."""
    return AppLogger("fx_ledger")


def get_audit_logger() -> AuditLogger:
    """Return the shared audit logger."""
    return AuditLogger("fx_ledger.audit")


__all__ = [
    "LoggerBuilder",
    "Logger",
    "AppLogger",
    "AuditLogger",
    "get_app_logger",
    "get_audit_logger",
]

# src/gitfind/telemetry/logger/base.py

"""
structlog configuration for git-find.

Diagnostics never go to stdout: stdout carries the forwarded output of the
commands run in each repository and is often piped.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import FilteringBoundLogger, Processor

from gitfind.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)

BASE_LOGGER_NAME = "gitfind"


def _event_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_emoji_processor,
        remove_extra_keys_processor,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _console_handler(stream: TextIO, json_logs: bool) -> logging.Handler:
    renderer: Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())
    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    return handler


def _file_handler(log_file: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(sort_keys=True)
        )
    )
    handler.setLevel(level)
    return handler


def _reset_root_logger(level: int) -> logging.Logger:
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.setLevel(level)
    return root


def setup_logging(
    level: int = logging.WARNING,
    json_logs: bool = False,
    log_file: str | None = None,
    file_only: bool = False,
) -> None:
    """
    Configures structlog for the entire application.

    May be called again (e.g. once the config file supplies a log level);
    previously installed handlers are closed and replaced.
    """
    structlog.configure(
        processors=_event_processors(),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    root = _reset_root_logger(level)
    slog = structlog.get_logger(BASE_LOGGER_NAME)

    if not file_only:
        root.addHandler(_console_handler(sys.stderr, json_logs))

    if log_file:
        try:
            root.addHandler(_file_handler(log_file, level))
        except OSError as e:
            slog.error("Cannot open log file", log_file=log_file, error=str(e))
        else:
            slog.info("Writing JSON logs to file", log_file=log_file)

    slog.debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        json_console=json_logs,
        console=not file_only,
        log_file=log_file or "None",
    )


StructLogger = FilteringBoundLogger

# 🔼⚙️

# src/gitfind/cli/utils.py

import logging

import click
import structlog

from gitfind.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)
DEFAULT_LOG_LEVEL = "WARNING"


def logging_options(f):
    """Decorator adding --log-level, --log-file and --json-logs."""
    f = click.option(
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="GITFIND_LOG_LEVEL",
        help="Diagnostic log level on stderr (overrides the config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="GITFIND_LOG_FILE",
        help="Also write diagnostics to this file, as JSON lines.",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="GITFIND_JSON_LOGS",
        help="Render stderr diagnostics as JSON.",
    )(f)
    return f


def _resolve_level(name: str | None) -> tuple[str, int]:
    name = (name or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return DEFAULT_LOG_LEVEL, logging.WARNING
    return name, level


def setup_logging_from_context(ctx: click.Context) -> None:
    """(Re)configures logging from the LOG_* values stored in ctx.obj."""
    level_name, level = _resolve_level(ctx.obj.get("LOG_LEVEL"))
    log_file = ctx.obj.get("LOG_FILE")
    json_logs = bool(ctx.obj.get("JSON_LOGS"))

    core_setup_logging(level=level, json_logs=json_logs, log_file=log_file)
    log.debug("CLI logging ready", level=level_name, file=log_file or "stderr", json=json_logs)


def remember_mode(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """
    Callback for -v/-q/-i: the last one given on the command line wins.

    Click processes invoked parameters in command-line order, so recording
    each one as it arrives leaves the last in place.
    """
    if value:
        ctx.meta["gitfind.mode"] = param.name

# ⚙️🛠️

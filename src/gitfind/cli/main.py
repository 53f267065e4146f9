# src/gitfind/cli/main.py

"""
Main CLI entry point for git-find using Click.

    git-find [OPTIONS] [CMD ...] [--- ROOT ...]
"""

import asyncio
import logging
from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click
import structlog

from gitfind.cli.utils import (
    logging_options,
    remember_mode,
    setup_logging_from_context,
)
from gitfind.config import (
    ColorMode,
    GitFindConfig,
    QuietLevel,
    RunConfig,
    default_config_path,
    load_config,
)
from gitfind.console import Terminal
from gitfind.exceptions import ConfigurationError, SpawnError
from gitfind.locator import find_repositories, parse_matcher
from gitfind.runtime.coordinator import RunCoordinator
from gitfind.state import RepoTarget
from gitfind.telemetry import StructLogger

try:
    __version__ = version("git-find")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")

ROOTS_SEPARATOR = "---"
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


def _run_coordinator(coordinator: RunCoordinator, targets: Iterable[RepoTarget]) -> int:
    """
    Runs the coordinator under asyncio.run(), which cancels the main task
    on CTRL-C so the runner can flush and terminate the current child.
    """
    try:
        return asyncio.run(coordinator.run(targets))
    except KeyboardInterrupt:
        log.warning("Run interrupted by KeyboardInterrupt (CTRL-C).")
        click.echo("Interrupted.", err=True)
        return EXIT_INTERRUPTED
    except SpawnError as e:
        log.error("Aborting run: command could not be started", error=str(e))
        click.echo(f"Error: {e}", err=True)
        return EXIT_FATAL
    finally:
        logging.shutdown()


def _load_file_config(ctx: click.Context, config_path: Path | None) -> GitFindConfig:
    path = config_path or default_config_path()
    if path is None:
        return GitFindConfig()
    config = load_config(path)
    log.debug("Using config file", path=str(path))
    # The file's log level applies only when none was given on the CLI/env.
    if not ctx.obj.get("LOG_LEVEL") and config.global_config.numeric_log_level != logging.WARNING:
        ctx.obj["LOG_LEVEL"] = config.global_config.log_level
        setup_logging_from_context(ctx)
    return config


class FindCommand(click.Command):
    """Splits off everything after `---` as search roots before click parses."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        args = list(args)
        if ROOTS_SEPARATOR in args:
            index = args.index(ROOTS_SEPARATOR)
            ctx.meta["gitfind.roots"] = args[index + 1 :]
            args = args[:index]
        return super().parse_args(ctx, args)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


@click.command(
    name="git-find",
    cls=FindCommand,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "allow_interspersed_args": False,
    },
)
@click.version_option(__version__, "-V", "--version", package_name="git-find")
@click.option(
    "--include",
    "includes",
    multiple=True,
    metavar="NAME|/REGEX/",
    help="Only report repositories matching this name or /regex/ (repeatable).",
)
@click.option(
    "--exclude",
    "excludes",
    multiple=True,
    metavar="NAME|/REGEX/",
    help="Skip directories matching this name or /regex/ (repeatable).",
)
@click.option(
    "-t",
    "--target",
    "targets",
    multiple=True,
    metavar="DIR",
    help="Directory to search; may be repeated. Roots may also follow '---'.",
)
@click.option("--follow/--no-follow", default=None, help="Follow symlinked directories.")
@click.option("-l", "--list", "list_only", is_flag=True, help="Only list repositories.")
@click.option(
    "-v", "--verbose", is_flag=True, expose_value=False, callback=remember_mode,
    help="Print a header before every repository (default).",
)
@click.option(
    "-q", "--quiet", is_flag=True, expose_value=False, callback=remember_mode,
    help="Print a repository's header only when it produces output or fails.",
)
@click.option(
    "-i", "--inline", is_flag=True, expose_value=False, callback=remember_mode,
    help="Prefix every output line with the repository name instead of a header.",
)
@click.option(
    "-w",
    "--width",
    type=click.IntRange(min=0),
    default=None,
    envvar="GITFIND_WIDTH",
    help="Pad inline prefixes to this many columns.",
)
@click.option("--no-header", is_flag=True, help="Never print repository headers.")
@click.option(
    "-p",
    "--progress",
    is_flag=True,
    default=None,
    envvar="GITFIND_PROGRESS",
    help="Show the repository being processed on the terminal.",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    envvar="GITFIND_JOBS",
    help="Run up to N repositories at once (output stays grouped, in discovery order).",
)
@click.option(
    "--color",
    type=click.Choice([m.value for m in ColorMode], case_sensitive=False),
    default=None,
    envvar="GITFIND_COLOR",
    help="Colour headers and prefixes.",
)
@click.option(
    "--failure-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="GITFIND_FAILURE_LOG",
    help="Append details of failed repositories to this file.",
)
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    envvar="GITFIND_CONF",
    show_envvar=True,
    help="Path to a git-find TOML config file.",
)
@logging_options
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    targets: tuple[str, ...],
    follow: bool | None,
    list_only: bool,
    width: int | None,
    no_header: bool,
    progress: bool | None,
    jobs: int | None,
    color: str | None,
    failure_log: Path | None,
    config_path: Path | None,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
    args: tuple[str, ...],
):
    """
    Find repositories and optionally run CMD in each of them.

    Without CMD, lists the repositories found. Output of CMD is shown under
    a `==> name <==` header (or inline-prefixed with -i); failures are
    summarised at the end and make the exit status 1.

    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)
    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False
    setup_logging_from_context(ctx)

    command = list(args)
    roots = ctx.meta.get("gitfind.roots", [])
    mode = ctx.meta.get("gitfind.mode", "verbose")

    try:
        file_config = _load_file_config(ctx, config_path)
        defaults = file_config.find
        config = RunConfig(
            command=command,
            list_only=list_only,
            quiet_level=QuietLevel.QUIET if mode == "quiet" else QuietLevel.VERBOSE,
            inline=mode == "inline",
            width=_first_set(width, defaults.width),
            no_header=no_header,
            progress=bool(_first_set(progress, defaults.progress)),
            color=ColorMode(_first_set(color, defaults.color.value).lower()),
            jobs=_first_set(jobs, defaults.jobs),
            roots=[*targets, *roots] or ["."],
            include=[parse_matcher(x) for x in (*defaults.include, *includes)],
            exclude=[parse_matcher(x) for x in (*defaults.exclude, *excludes)],
            follow_links=bool(_first_set(follow, defaults.follow)),
            failure_log=failure_log,
        )
    except (ConfigurationError, ValueError) as e:
        log.error("Invalid configuration", error=str(e))
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(EXIT_FATAL)

    log.debug(
        "Resolved run configuration",
        command=list(config.command),
        roots=list(config.roots),
        list_only=config.list_only,
        quiet_level=config.quiet_level.value,
        inline=config.inline,
        jobs=config.jobs,
    )

    terminal = Terminal(color=config.color)
    found = find_repositories(
        config.roots,
        include=config.include,
        exclude=config.exclude,
        follow_links=config.follow_links,
    )
    exit_code = _run_coordinator(RunCoordinator(config, terminal), found)
    ctx.exit(exit_code)


if __name__ == "__main__":
    cli()

# 🖥️⚙️

# src/gitfind/runtime/coordinator.py

"""
High-level coordinator for a git-find run.
Sequences discovery and execution, keeps failures apart and reports them.
"""

import asyncio
from collections import deque
from collections.abc import Iterable

import structlog

from gitfind.config.models import QuietLevel, RunConfig
from gitfind.console import Terminal
from gitfind.runtime.failure_log import FailureLog
from gitfind.runtime.process_runner import ProcessRunner
from gitfind.runtime.sinks import BufferedSink
from gitfind.state import RepoTarget, RunOutcome, Stream
from gitfind.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.coordinator")

EXIT_OK = 0
EXIT_FAILURES = 1
MAX_EXCERPT_LINES = 20
SUMMARY_INDENT = "    "
EXCERPT_PREFIX = "    >   "


def format_excerpt(stderr: str, max_lines: int = MAX_EXCERPT_LINES) -> str:
    """Indents the tail of a stderr capture for the end-of-run summary."""
    text = stderr.rstrip()
    if not text.strip():
        return ""
    lines = text.splitlines()
    omitted = len(lines) - max_lines
    if omitted > 0:
        lines = [f"... ({omitted} earlier lines omitted)", *lines[-max_lines:]]
    return "".join(f"{EXCERPT_PREFIX}{line}\n" for line in lines)


class RunCoordinator:
    """
    Consumes repository targets one at a time and runs the command in each.

    One repository failing never stops the pass over the rest. Failures,
    the exit status and the failure log are owned here and touched only
    from the coordinator's own task.
    """

    def __init__(self, config: RunConfig, terminal: Terminal):
        self.config = config
        self.terminal = terminal
        self.failures: list[RunOutcome] = []
        self.completed = 0
        self.exit_code = EXIT_OK
        self.failure_log = FailureLog(config.failure_log) if config.failure_log else None

    @property
    def _shows_progress(self) -> bool:
        return (
            self.config.progress or self.config.quiet_level is QuietLevel.QUIET
        ) and not self.config.inline

    async def run(self, targets: Iterable[RepoTarget]) -> int:
        """Runs every target and returns the process exit status."""
        log.debug(
            "Run starting",
            command=list(self.config.command),
            list_only=self.config.list_only,
            jobs=self.config.jobs,
        )
        try:
            if self.config.list_only:
                self._list(targets)
            elif self.config.parallel:
                await self._run_parallel(targets)
            else:
                await self._run_sequential(targets)
        finally:
            self.terminal.clear_progress()
            if self.failure_log is not None:
                self.failure_log.close()

        self.report()
        log.info(
            "Run complete",
            repositories=self.completed,
            failures=len(self.failures),
            exit_code=self.exit_code,
        )
        return self.exit_code

    def _list(self, targets: Iterable[RepoTarget]) -> None:
        for target in targets:
            self.terminal.line(target.display_name)
            self.completed += 1

    async def _run_sequential(self, targets: Iterable[RepoTarget]) -> None:
        runner = ProcessRunner(self.config, self.terminal)
        for target in targets:
            if self._shows_progress:
                self.terminal.show_progress(target.display_name)
            outcome = await runner.run(target.path, target.display_name)
            self._record(outcome)

    async def _run_parallel(self, targets: Iterable[RepoTarget]) -> None:
        semaphore = asyncio.Semaphore(self.config.jobs)
        inflight: deque[tuple[asyncio.Task[RunOutcome], BufferedSink]] = deque()

        async def _bounded(target: RepoTarget, sink: BufferedSink) -> RunOutcome:
            async with semaphore:
                runner = ProcessRunner(self.config, sink)
                return await runner.run(target.path, target.display_name)

        try:
            for target in targets:
                sink = BufferedSink(self.terminal)
                inflight.append((asyncio.create_task(_bounded(target, sink)), sink))
                await asyncio.sleep(0)
                while inflight and inflight[0][0].done():
                    await self._complete(*inflight.popleft())
            while inflight:
                await self._complete(*inflight.popleft())
        finally:
            for task, _ in inflight:
                task.cancel()
            if inflight:
                await asyncio.gather(*(task for task, _ in inflight), return_exceptions=True)

    async def _complete(self, task: "asyncio.Task[RunOutcome]", sink: BufferedSink) -> None:
        try:
            outcome = await task
        finally:
            sink.replay()
        self._record(outcome)

    def _record(self, outcome: RunOutcome) -> None:
        self.completed += 1
        if not outcome.failed:
            return
        log.info("Repository failed", repo=outcome.name, cause=outcome.cause, emoji_key="fail")
        self.failures.append(outcome)
        self.exit_code = EXIT_FAILURES
        if self.failure_log is not None:
            self.failure_log.record(outcome)

    def report(self) -> None:
        """Prints the failure summary to stderr, in discovery order."""
        if not self.failures:
            return
        self.terminal.line(f"{len(self.failures)} repositories had issues:", Stream.STDERR)
        for outcome in self.failures:
            self.terminal.line(f"{SUMMARY_INDENT}{outcome.name} ({outcome.cause})", Stream.STDERR)
            self.terminal.write(Stream.STDERR, format_excerpt(outcome.stderr))


# 🔼⚙️

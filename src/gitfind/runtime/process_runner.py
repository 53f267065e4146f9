#
# src/gitfind/runtime/process_runner.py
#
"""
Runs the command in one repository and multiplexes its output.

Both pipes are drained from a single readiness-driven loop: a read is kept
outstanding on each stream and the loop wakes for whichever completes
first. Neither stream is ever read to completion before the other is
serviced, so a child that fills one pipe while the other stays silent
cannot stall.
"""
import asyncio
import signal
from collections.abc import Sequence
from pathlib import Path

import structlog
from attrs import field, mutable

from gitfind.config.models import QuietLevel, RunConfig
from gitfind.exceptions import SpawnError
from gitfind.runtime.line_framer import LineFramer
from gitfind.runtime.sinks import OutputSink
from gitfind.state import RunOutcome, Stream
from gitfind.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.process_runner")

CHUNK_SIZE = 4096
PAGER_TOOL = "git"
NO_PAGER_FLAG = "--no-pager"
DEFAULT_TERM_TIMEOUT = 2.0  # seconds between SIGTERM and SIGKILL on cancel
STREAM_ORDER = (Stream.STDOUT, Stream.STDERR)
TRANSCRIPT_TAGS = {Stream.STDOUT: "out| ", Stream.STDERR: "err| "}


def build_argv(command: Sequence[str]) -> list[str]:
    """Adds `--no-pager` after a leading `git` so long output never blocks on a pager."""
    argv = list(command)
    if argv and argv[0] == PAGER_TOOL and (len(argv) < 2 or argv[1] != NO_PAGER_FLAG):
        argv.insert(1, NO_PAGER_FLAG)
    return argv


def describe_signal(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


@mutable(slots=True)
class _Invocation:
    """Per-run state; lives exactly as long as one run() call."""

    name: str
    sink: OutputSink
    framers: dict[Stream, LineFramer]
    header_pending: bool
    transcript_framers: dict[Stream, LineFramer] = field(
        factory=lambda: {s: LineFramer(prefix=tag) for s, tag in TRANSCRIPT_TAGS.items()}
    )
    stderr: bytearray = field(factory=bytearray)
    transcript: list[str] = field(factory=list)
    errors: list[str] = field(factory=list)
    flushed: bool = False

    def emit_header(self) -> None:
        if self.header_pending:
            self.header_pending = False
            self.sink.header(self.name)

    def on_chunk(self, stream: Stream, chunk: bytes) -> None:
        self.emit_header()
        self.sink.write(stream, self.framers[stream].feed(chunk))
        self.transcript.append(self.transcript_framers[stream].feed(chunk))
        if stream is Stream.STDERR:
            self.stderr += chunk

    def flush(self) -> None:
        if self.flushed:
            return
        self.flushed = True
        for stream in STREAM_ORDER:
            self.sink.write(stream, self.framers[stream].finish())
            self.transcript.append(self.transcript_framers[stream].finish())


class ProcessRunner:
    """
    Owns one child process at a time: spawn, drain, wait, classify.

    Per-repository problems (nonzero exit, signal, stream or wait errors)
    end up on the returned RunOutcome. Only a failure to start the command
    at all raises, as SpawnError.
    """

    def __init__(
        self,
        config: RunConfig,
        sink: OutputSink,
        *,
        chunk_size: int = CHUNK_SIZE,
        term_timeout: float = DEFAULT_TERM_TIMEOUT,
    ):
        self.config = config
        self.sink = sink
        self.chunk_size = chunk_size
        self.term_timeout = term_timeout

    def _new_invocation(self, display_name: str) -> _Invocation:
        prefixes: dict[Stream, str | None] = {Stream.STDOUT: None, Stream.STDERR: None}
        if self.config.inline:
            prefixes = {
                s: self.sink.inline_prefix(display_name, s, self.config.width) for s in STREAM_ORDER
            }
        return _Invocation(
            name=display_name,
            sink=self.sink,
            framers={s: LineFramer(prefix=prefixes[s]) for s in STREAM_ORDER},
            header_pending=self.config.shows_header,
        )

    async def run(
        self,
        repo_path: Path,
        display_name: str,
        argv: Sequence[str] | None = None,
    ) -> RunOutcome:
        """
        Runs `argv` (default: the configured command) inside `repo_path`.

        Raises:
            SpawnError: the executable is missing or cannot be started.
        """
        argv = build_argv(self.config.command if argv is None else argv)
        if not argv:
            raise ValueError("ProcessRunner.run() needs a command; list mode never spawns.")

        run_log = log.bind(repo=display_name)
        inv = self._new_invocation(display_name)
        if self.config.quiet_level is QuietLevel.VERBOSE:
            inv.emit_header()

        process = await self._spawn(argv, repo_path)
        run_log = run_log.bind(pid=process.pid)
        run_log.debug("Started command", argv=argv, cwd=str(repo_path), emoji_key="spawn")

        exit_code: int | None = None
        signal_name: str | None = None
        try:
            await self._drain(process, inv)
            inv.flush()
            try:
                returncode = await process.wait()
            except OSError as e:
                inv.errors.append(f"wait failed: {e}")
            else:
                if returncode < 0:
                    signal_name = describe_signal(-returncode)
                else:
                    exit_code = returncode
        finally:
            inv.flush()
            if process.returncode is None:
                run_log.warning("Run interrupted, terminating command")
                await asyncio.shield(self._terminate(process))

        failed = bool(exit_code) or signal_name is not None or bool(inv.errors)
        if failed:
            inv.emit_header()
        outcome = RunOutcome(
            name=display_name,
            path=repo_path,
            failed=failed,
            exit_code=exit_code,
            signal_name=signal_name,
            errors=tuple(inv.errors),
            stderr=inv.stderr.decode("utf-8", errors="replace"),
            transcript="".join(inv.transcript),
        )
        run_log.debug(
            "Command finished",
            failed=failed,
            exit_code=exit_code,
            signal=signal_name,
            stderr_len=len(inv.stderr),
        )
        return outcome

    async def _spawn(self, argv: list[str], repo_path: Path) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                cwd=repo_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.error("Failed to start command", argv=argv, repo=str(repo_path), error=str(e))
            raise SpawnError(
                f"Cannot start '{argv[0]}': {e.strerror or e}",
                argv=argv,
                repo_path=str(repo_path),
                details=e,
            ) from e

    async def _drain(self, process: asyncio.subprocess.Process, inv: _Invocation) -> None:
        readers = {Stream.STDOUT: process.stdout, Stream.STDERR: process.stderr}
        pending: dict[asyncio.Future[bytes], Stream] = {
            asyncio.ensure_future(reader.read(self.chunk_size)): stream
            for stream, reader in readers.items()
            if reader is not None
        }
        try:
            while pending:
                done, _ = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for fut in sorted(done, key=lambda f: STREAM_ORDER.index(pending[f])):
                    stream = pending.pop(fut)
                    try:
                        chunk = fut.result()
                    except OSError as e:
                        inv.errors.append(f"read error on {stream.value}: {e}")
                        continue
                    if not chunk:
                        continue  # EOF
                    inv.on_chunk(stream, chunk)
                    pending[asyncio.ensure_future(readers[stream].read(self.chunk_size))] = stream
        finally:
            for fut in pending:
                fut.cancel()

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL if the child outlives `term_timeout`."""
        try:
            process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=self.term_timeout)
                return
            except TimeoutError:
                log.debug("Force killing command", pid=process.pid)
            process.kill()
            await process.wait()
        except ProcessLookupError:
            log.debug("Command already exited", pid=process.pid)


# 🔼⚙️

# src/gitfind/console.py

"""
Terminal colour and width helpers.

Forwarded command output is written verbatim; only the headers, inline
prefixes and the progress line are styled, through rich.
"""

import sys
from typing import TextIO

from rich.console import Console
from rich.text import Text

from gitfind.config.models import ColorMode
from gitfind.state import Stream

HEADER_STYLE = "green"
PROGRESS_STYLE = "green"
CLEAR_LINE = "\r\x1b[K"


def _make_console(file: TextIO, color: ColorMode) -> Console:
    force_terminal = True if color is ColorMode.ALWAYS else None
    return Console(
        file=file,
        force_terminal=force_terminal,
        no_color=color is ColorMode.NEVER,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


class Terminal:
    """The real OutputSink: the invoking process's stdout and stderr."""

    def __init__(
        self,
        color: ColorMode = ColorMode.AUTO,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.color = color
        self._consoles = {
            Stream.STDOUT: _make_console(self.stdout, color),
            Stream.STDERR: _make_console(self.stderr, color),
        }
        self._progress_shown = False

    def _file(self, stream: Stream) -> TextIO:
        return self.stdout if stream is Stream.STDOUT else self.stderr

    def styled(self, text: str, stream: Stream = Stream.STDOUT, style: str = HEADER_STYLE) -> str:
        """Renders `text` with ANSI styling when that stream gets colour."""
        console = self._consoles[stream]
        if console.no_color or not console.is_terminal:
            return text
        with console.capture() as capture:
            console.print(Text(text, style=style), end="")
        return capture.get()

    # --- OutputSink ---
    def header(self, name: str) -> None:
        self.clear_progress()
        self.write(Stream.STDOUT, self.styled(f"==> {name} <==") + "\n")

    def write(self, stream: Stream, text: str) -> None:
        if not text:
            return
        if self._progress_shown:
            self.clear_progress()
        fh = self._file(stream)
        fh.write(text)
        fh.flush()

    def inline_prefix(self, name: str, stream: Stream, width: int | None = None) -> str:
        prefix = self.styled(f"[{name}]", stream) + " "
        if width:
            pad = width - len(name) - 2
            if pad > 0:
                prefix += " " * pad
        return prefix

    # --- plain output ---
    def line(self, text: str, stream: Stream = Stream.STDOUT) -> None:
        self.write(stream, text + "\n")

    # --- progress line (quiet mode) ---
    @property
    def supports_progress(self) -> bool:
        return self._consoles[Stream.STDERR].is_terminal

    def show_progress(self, name: str) -> None:
        if not self.supports_progress:
            return
        cols = self._consoles[Stream.STDERR].width
        msg = f"{name} ..."
        if cols and len(msg) > cols - 1:
            msg = "... " + name[-max(cols - 5, 1):]
        self.stderr.write("\r" + self.styled(msg, Stream.STDERR, PROGRESS_STYLE) + "\x1b[K")
        self.stderr.flush()
        self._progress_shown = True

    def clear_progress(self) -> None:
        if not self._progress_shown:
            return
        self._progress_shown = False
        self.stderr.write(CLEAR_LINE)
        self.stderr.flush()


# 🔼⚙️

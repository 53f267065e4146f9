#
# src/gitfind/runtime/sinks.py
#
"""
Defines where formatted command output goes.
"""
from typing import Protocol, runtime_checkable

from gitfind.state import Stream


@runtime_checkable
class OutputSink(Protocol):
    """
    Destination for one repository's formatted output.
    """

    def header(self, name: str) -> None:
        """Prints the `==> name <==` line."""
        ...

    def write(self, stream: Stream, text: str) -> None:
        """Forwards already-framed text to the given stream."""
        ...

    def inline_prefix(self, name: str, stream: Stream, width: int | None = None) -> str:
        """Returns the `[name] ` prefix used in inline mode."""
        ...


class BufferedSink:
    """
    Records output so a repository run in parallel can be replayed later,
    in discovery order, without interleaving with its neighbours.
    """

    def __init__(self, target: OutputSink):
        self._target = target
        self._events: list[tuple[Stream | None, str]] = []

    def header(self, name: str) -> None:
        self._events.append((None, name))

    def write(self, stream: Stream, text: str) -> None:
        if text:
            self._events.append((stream, text))

    def inline_prefix(self, name: str, stream: Stream, width: int | None = None) -> str:
        return self._target.inline_prefix(name, stream, width)

    def replay(self) -> None:
        for stream, payload in self._events:
            if stream is None:
                self._target.header(payload)
            else:
                self._target.write(stream, payload)
        self._events.clear()


# 🔼⚙️

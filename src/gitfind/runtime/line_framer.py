# src/gitfind/runtime/line_framer.py

"""
Reassembles raw byte chunks from one output stream into whole lines.

Commands write in chunk sizes unrelated to line boundaries. Holding back
everything after the last newline means each flushed unit is a set of
complete lines, so stdout and stderr never interleave mid-line. Only
`finish()` may flush a fragment that arrived without a newline, and it
terminates it.
"""

import re

NEWLINE = b"\n"
# Start of every line except the empty position after a trailing newline.
_LINE_START = re.compile(r"^(?!\Z)", re.MULTILINE)


class LineFramer:
    """Buffers one stream and hands back newline-terminated text."""

    def __init__(self, prefix: str | None = None, encoding: str = "utf-8"):
        self.prefix = prefix or None
        self.encoding = encoding
        self._pending = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline, not yet flushed."""
        return bytes(self._pending)

    def feed(self, chunk: bytes) -> str:
        """
        Appends `chunk` and returns every complete line now available.

        Returns an empty string when the buffer still holds no newline.
        """
        if not chunk:
            return ""
        self._pending += chunk
        index = self._pending.rfind(NEWLINE)
        if index == -1:
            return ""
        complete = bytes(self._pending[: index + 1])
        del self._pending[: index + 1]
        return self._format(complete)

    def finish(self) -> str:
        """Flushes the trailing fragment, adding the missing newline."""
        if not self._pending:
            return ""
        data = bytes(self._pending)
        self._pending.clear()
        if not data.endswith(NEWLINE):
            data += NEWLINE
        return self._format(data)

    def _format(self, data: bytes) -> str:
        # Splitting only at newlines keeps multi-byte characters intact.
        text = data.decode(self.encoding, errors="replace")
        if self.prefix:
            text = _LINE_START.sub(lambda _m: self.prefix, text)
        return text


# 🔼⚙️

#
# src/gitfind/runtime/failure_log.py
#
"""
Persists failure details for post-hoc inspection.
"""
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

import structlog

from gitfind.state import RunOutcome

log = structlog.get_logger("runtime.failure_log")


class FailureLog:
    """
    Append-only log of failed repositories.

    The file is only created when the first failure is recorded, so a
    clean run leaves nothing behind.
    """

    def __init__(self, path: Path):
        self.path = path
        self._fh: TextIO | None = None
        self._unwritable = False

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def record(self, outcome: RunOutcome) -> None:
        if self._unwritable:
            return
        if self._fh is None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._fh = self.path.open("a", encoding="utf-8")
            except OSError as e:
                # The run itself goes on; the summary still lists the failure.
                self._unwritable = True
                log.error("Cannot open failure log", path=str(self.path), error=str(e))
                return
            log.info("Opened failure log", path=str(self.path))
        timestamp = datetime.now(UTC).isoformat(timespec="seconds")
        self._fh.write(f"=== {timestamp} {outcome.name} ({outcome.cause}) ===\n")
        self._fh.write(f"path: {outcome.path}\n")
        self._fh.write(outcome.transcript)
        self._fh.write("\n")
        self._fh.flush()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


# 🔼⚙️

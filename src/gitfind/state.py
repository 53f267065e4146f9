# src/gitfind/state.py
#
"""
Value objects passed between the locator, the process runner and the
run coordinator.
"""

from enum import Enum
from pathlib import Path

from attrs import define, field


class Stream(Enum):
    """The two output streams of a child process."""

    STDOUT = "stdout"
    STDERR = "stderr"


@define(frozen=True, slots=True)
class RepoTarget:
    """One discovered repository, in traversal order."""

    path: Path = field()
    display_name: str = field()


@define(frozen=True, slots=True)
class RunOutcome:
    """
    Result of running the command in one repository.

    `failed` is the disjunction of a nonzero exit, a terminating signal and
    any OS-level error hit while draining or waiting. `stderr` is the raw
    stderr capture used for the end-of-run summary; `transcript` holds both
    streams interleaved in arrival order for the failure log.
    """

    name: str
    path: Path
    failed: bool = False
    exit_code: int | None = None
    signal_name: str | None = None
    errors: tuple[str, ...] = ()
    stderr: str = ""
    transcript: str = ""

    @property
    def cause(self) -> str:
        """Human-readable reason for failure, empty for a success."""
        parts: list[str] = []
        if self.signal_name:
            parts.append(f"killed by signal {self.signal_name}")
        elif self.exit_code:
            parts.append(f"exit code {self.exit_code}")
        parts.extend(self.errors)
        return "; ".join(parts)


# 🔼⚙️

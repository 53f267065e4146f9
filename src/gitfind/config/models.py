#
# config/models.py
#
"""
Attrs-based models for git-find run configuration and the optional
config file.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from attrs import define, field
from attrs.validators import instance_of

from gitfind.locator.matchers import Matcher


class QuietLevel(Enum):
    """When the per-repository header is printed."""

    VERBOSE = "verbose"  # before the command runs
    QUIET = "quiet"  # only on first output or failure


class ColorMode(Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if not isinstance(value, str):
        raise ValueError(f"Invalid log_level {value!r}. Must be one of {list(valid)}.")
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_positive_int(inst: Any, attr: Any, value: int) -> None:
    """Validator ensures integer is positive."""
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be positive integer, got {value!r}")


def _validate_optional_width(inst: Any, attr: Any, value: int | None) -> None:
    if value is None:
        return
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"Field '{attr.name}' must be a non-negative integer, got {value!r}")


@define(frozen=True, slots=True)
class RunConfig:
    """
    Immutable configuration resolved once at startup.

    An empty `command` always means list-only mode.
    """

    command: tuple[str, ...] = field(default=(), converter=tuple)
    list_only: bool = field(default=False)
    quiet_level: QuietLevel = field(default=QuietLevel.VERBOSE)
    inline: bool = field(default=False)
    width: int | None = field(default=None, validator=_validate_optional_width)
    no_header: bool = field(default=False)
    progress: bool = field(default=False)
    color: ColorMode = field(default=ColorMode.AUTO)
    jobs: int = field(default=1, validator=_validate_positive_int)
    roots: tuple[str, ...] = field(default=(".",), converter=tuple)
    include: tuple[Matcher, ...] = field(default=(), converter=tuple)
    exclude: tuple[Matcher, ...] = field(default=(), converter=tuple)
    follow_links: bool = field(default=False)
    failure_log: Path | None = field(default=None)

    def __attrs_post_init__(self) -> None:
        if not self.command and not self.list_only:
            object.__setattr__(self, "list_only", True)
        if not self.roots:
            object.__setattr__(self, "roots", (".",))
        if self.inline and self.quiet_level is QuietLevel.QUIET:
            object.__setattr__(self, "quiet_level", QuietLevel.VERBOSE)

    @property
    def shows_header(self) -> bool:
        return not (self.inline or self.no_header or self.list_only)

    @property
    def parallel(self) -> bool:
        return self.jobs > 1 and not self.list_only


@define(frozen=True, slots=True)
class FindDefaults:
    """Defaults read from the `[find]` table of the config file."""

    include: tuple[str, ...] = field(factory=tuple, converter=tuple)
    exclude: tuple[str, ...] = field(factory=tuple, converter=tuple)
    follow: bool = field(default=False, validator=instance_of(bool))
    color: ColorMode = field(default=ColorMode.AUTO, converter=ColorMode)
    width: int | None = field(default=None, validator=_validate_optional_width)
    jobs: int = field(default=1, validator=_validate_positive_int)
    progress: bool = field(default=False, validator=instance_of(bool))


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global settings for git-find."""

    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class GitFindConfig:
    """Root object of the config file."""

    find: FindDefaults = field(factory=FindDefaults)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    source: Path | None = field(default=None)


# 🔼⚙️

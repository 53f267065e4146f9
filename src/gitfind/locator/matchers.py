# src/gitfind/locator/matchers.py

"""
Include/exclude matchers.

A matcher is either a literal directory name or a compiled regular
expression, written on the command line as `/regex/`.
"""

import os
import re
from typing import TypeAlias

from attrs import define, field

from gitfind.exceptions import ConfigurationError


@define(frozen=True, slots=True)
class Literal:
    """Matches a directory whose basename or display path equals `text`."""

    text: str = field()

    def matches(self, candidate: str) -> bool:
        if candidate == self.text:
            return True
        return os.path.basename(candidate.rstrip(os.sep)) == self.text

    def __str__(self) -> str:
        return self.text


@define(frozen=True, slots=True)
class Pattern:
    """Matches a directory whose display path contains a regex match."""

    regex: re.Pattern[str] = field()

    def matches(self, candidate: str) -> bool:
        return self.regex.search(candidate) is not None

    def __str__(self) -> str:
        return f"/{self.regex.pattern}/"


Matcher: TypeAlias = Literal | Pattern


def parse_matcher(text: str) -> Matcher:
    """Turn `/expr/` into a Pattern and anything else into a Literal."""
    if len(text) >= 2 and text.startswith("/") and text.endswith("/"):
        try:
            return Pattern(re.compile(text[1:-1]))
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern '{text}': {e}") from e
    if not text:
        raise ConfigurationError("Empty include/exclude name is not allowed.")
    return Literal(text)


def any_matches(matchers: tuple[Matcher, ...], candidate: str) -> bool:
    return any(m.matches(candidate) for m in matchers)


# 🔼⚙️

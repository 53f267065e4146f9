#
# src/gitfind/locator/__init__.py
#
"""
Repository discovery sub-package for git-find.
"""
from .discovery import find_repositories, is_repository
from .matchers import Literal, Matcher, Pattern, parse_matcher

__all__ = [
    "Literal",
    "Matcher",
    "Pattern",
    "find_repositories",
    "is_repository",
    "parse_matcher",
]

# 🔼⚙️

# src/gitfind/locator/discovery.py

"""
Repository Locator: walks directory trees and yields repository roots in
traversal order.
"""

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from gitfind.locator.matchers import Matcher, any_matches
from gitfind.state import RepoTarget

log = structlog.get_logger("locator.discovery")

VCS_MARKER = ".git"
PRUNED_NAMES = frozenset({"node_modules", ".git", "log", "logs"})
VENDOR_DIR = "vendor"
VENDOR_MANIFESTS = ("composer.json", "composer.lock")


def _display_name(root: str, rel: str) -> str:
    if rel in ("", "."):
        return root
    return os.path.join(root, rel)


def _is_pruned(dirpath: str, name: str, follow_links: bool) -> bool:
    if name in PRUNED_NAMES:
        return True
    path = os.path.join(dirpath, name)
    if not follow_links and os.path.islink(path):
        # A link is reported when it points at a repository, never descended.
        return not is_repository(path)
    if name == VENDOR_DIR:
        return any(os.path.isfile(os.path.join(dirpath, m)) for m in VENDOR_MANIFESTS)
    return False


def is_repository(path: str | Path) -> bool:
    """A repository root holds a `.git` directory (or a `.git` file for worktrees)."""
    return os.path.exists(os.path.join(path, VCS_MARKER))


def _walk_root(
    root: str,
    include: tuple[Matcher, ...],
    exclude: tuple[Matcher, ...],
    follow_links: bool,
    seen: set[str],
) -> Iterator[RepoTarget]:
    root_path = Path(root)
    if not root_path.is_dir():
        log.warning("Skipping root that is not a directory", root=root)
        return

    def _on_error(err: OSError) -> None:
        log.debug("Skipping unreadable directory", path=err.filename, error=str(err))

    for dirpath, dirnames, _filenames in os.walk(root, onerror=_on_error, followlinks=True):
        rel = os.path.relpath(dirpath, root)
        name = _display_name(root, rel)

        if follow_links:
            real = os.path.realpath(dirpath)
            if real in seen:
                dirnames.clear()
                continue
            seen.add(real)

        if rel != "." and exclude and any_matches(exclude, name):
            log.debug("Pruning excluded directory", path=name)
            dirnames.clear()
            continue

        if is_repository(dirpath):
            dirnames.clear()
            if include and not any_matches(include, name):
                log.debug("Repository not included", path=name)
                continue
            log.debug("Found repository", path=name, emoji_key="repo")
            yield RepoTarget(path=Path(dirpath), display_name=name)
            continue

        # os.walk honours in-place edits of dirnames when walking top-down
        dirnames[:] = sorted(d for d in dirnames if not _is_pruned(dirpath, d, follow_links))


def find_repositories(
    roots: Iterable[str] = (".",),
    *,
    include: tuple[Matcher, ...] = (),
    exclude: tuple[Matcher, ...] = (),
    follow_links: bool = False,
) -> Iterator[RepoTarget]:
    """
    Lazily yields a RepoTarget for every repository under `roots`.

    Roots are walked in the order given; within a root the walk is
    top-down, siblings in name order, and does not descend into a
    repository once one is found.
    Exclude matchers prune whole subtrees, include matchers decide which
    repositories are reported.
    """
    seen: set[str] = set()
    for root in roots or (".",):
        yield from _walk_root(root, include, exclude, follow_links, seen)


# 🔼⚙️

#
# tests/unit/test_locator.py
#
"""
Tests for repository discovery.
"""

import os
from pathlib import Path

import pytest

from gitfind.locator import find_repositories, is_repository, parse_matcher


def _names(root: Path, **kwargs) -> list[str]:
    return [t.display_name for t in find_repositories([str(root)], **kwargs)]


class TestDiscovery:
    def test_finds_repositories_in_name_order(self, make_repos):
        root = make_repos("b", "a", "c/d")
        assert _names(root) == [f"{root}/a", f"{root}/b", f"{root}/c/d"]

    def test_targets_carry_paths(self, make_repos):
        root = make_repos("one")
        (target,) = find_repositories([str(root)])
        assert target.path == root / "one"
        assert is_repository(target.path)

    def test_does_not_descend_into_repositories(self, make_repos):
        root = make_repos("outer", "outer/inner")
        assert _names(root) == [f"{root}/outer"]

    def test_root_that_is_a_repository(self, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        assert _names(tmp_path) == [str(tmp_path)]

    def test_relative_root_gives_find_style_names(self, make_repos, monkeypatch):
        root = make_repos("x/y")
        monkeypatch.chdir(root)
        names = [t.display_name for t in find_repositories(["."])]
        assert names == [os.path.join(".", "x", "y")]

    def test_roots_walked_in_given_order(self, tmp_path: Path):
        for name in ("r2/p", "r1/q"):
            (tmp_path / name / ".git").mkdir(parents=True)
        roots = [str(tmp_path / "r2"), str(tmp_path / "r1")]
        names = [t.display_name for t in find_repositories(roots)]
        assert names == [f"{roots[0]}/p", f"{roots[1]}/q"]

    def test_missing_root_is_skipped(self, make_repos, tmp_path: Path):
        root = make_repos("ok")
        roots = [str(tmp_path / "nope"), str(root)]
        assert [t.display_name for t in find_repositories(roots)] == [f"{root}/ok"]

    def test_worktree_git_file_counts(self, tmp_path: Path):
        wt = tmp_path / "wt"
        wt.mkdir()
        (wt / ".git").write_text("gitdir: /elsewhere\n")
        assert _names(tmp_path) == [str(wt)]


class TestPruning:
    def test_node_modules_is_pruned(self, make_repos):
        root = make_repos("app", "web/node_modules/dep")
        assert _names(root) == [f"{root}/app"]

    def test_log_directories_are_pruned(self, make_repos):
        root = make_repos("logs/old", "log/older", "svc")
        assert _names(root) == [f"{root}/svc"]

    def test_vendor_pruned_only_next_to_composer_manifest(self, make_repos):
        root = make_repos("php/vendor/lib", "go/vendor/mod")
        (root / "php" / "composer.json").write_text("{}")
        assert _names(root) == [f"{root}/go/vendor/mod"]

    def test_exclude_literal_prunes_subtree(self, make_repos):
        root = make_repos("keep/a", "archive/b", "archive/deep/c")
        names = _names(root, exclude=(parse_matcher("archive"),))
        assert names == [f"{root}/keep/a"]

    def test_exclude_pattern(self, make_repos):
        root = make_repos("proj-1", "proj-2", "tmp-3")
        names = _names(root, exclude=(parse_matcher(r"/tmp-\d$/"),))
        assert names == [f"{root}/proj-1", f"{root}/proj-2"]

    def test_include_filters_reported_repositories(self, make_repos):
        root = make_repos("work/api", "work/web", "play/api")
        names = _names(root, include=(parse_matcher("api"),))
        assert names == [f"{root}/play/api", f"{root}/work/api"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
class TestSymlinks:
    def test_symlinks_not_followed_by_default(self, make_repos, tmp_path: Path):
        root = make_repos("real/r")
        (root / "link").symlink_to(root / "real", target_is_directory=True)
        assert _names(root) == [f"{root}/real/r"]

    def test_follow_visits_each_real_directory_once(self, make_repos):
        root = make_repos("real/r")
        (root / "real" / "loop").symlink_to(root, target_is_directory=True)
        (root / "alias").symlink_to(root / "real", target_is_directory=True)
        names = _names(root, follow_links=True)
        assert names == [f"{root}/alias/r"]

    def test_link_to_repository_reported_without_follow(self, make_repos):
        root = make_repos("real/r")
        (root / "shortcut").symlink_to(root / "real" / "r", target_is_directory=True)
        assert _names(root) == [f"{root}/real/r", f"{root}/shortcut"]

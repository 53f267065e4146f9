import io
import logging
import shutil
import subprocess
from pathlib import Path

import pytest

from gitfind.config import ColorMode
from gitfind.console import Terminal
from gitfind.telemetry import setup_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    setup_logging(level=logging.WARNING)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def terminal() -> Terminal:
    """A colourless Terminal writing into in-memory buffers."""
    return Terminal(color=ColorMode.NEVER, stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def make_repos(tmp_path: Path):
    """Creates fake repositories (directories holding `.git/`) under tmp_path/root."""
    root = tmp_path / "root"
    root.mkdir()

    def _make(*relpaths: str) -> Path:
        for rel in relpaths:
            (root / rel / ".git").mkdir(parents=True)
        return root

    return _make


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    repo_path = tmp_path / "test_repo"
    if repo_path.exists():
        shutil.rmtree(repo_path)
    repo_path.mkdir()

    try:
        subprocess.run(["git", "--version"], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        pytest.skip(f"Git is not available or `git --version` failed: {e}")

    subprocess.run(["git", "init"], cwd=repo_path, check=True, capture_output=True)
    subprocess.run(["git", "config", "user.name", "Test User"], cwd=repo_path, check=True)
    subprocess.run(["git", "config", "user.email", "test@example.com"], cwd=repo_path, check=True)

    (repo_path / "README.md").write_text("initial commit")
    subprocess.run(["git", "add", "README.md"], cwd=repo_path, check=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"], cwd=repo_path, check=True, capture_output=True
    )
    return repo_path

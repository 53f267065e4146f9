# src/gitfind/exceptions.py

"""
Exception hierarchy for git-find.

Per-repository command failures are never raised; they are recorded on a
RunOutcome. Only errors that make the whole run meaningless escape.
"""


class GitFindError(Exception):
    """Base class for all git-find errors."""


class ConfigurationError(GitFindError):
    """Raised when options or the config file are invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message = f"{message} (File: '{path}')"
        super().__init__(full_message)


class SpawnError(GitFindError):
    """Raised when a child process cannot be started at all."""

    def __init__(
        self,
        message: str,
        argv: list[str] | tuple[str, ...] | None = None,
        repo_path: str | None = None,
        details: Exception | None = None,
    ):
        self.argv = list(argv or [])
        self.repo_path = repo_path
        self.details = details
        full_message = f"[Spawn] {message}"
        if repo_path:
            full_message += f" (Repo: '{repo_path}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


# 🔼⚙️

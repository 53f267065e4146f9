"""git-find: find repositories and run a command in each of them."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("git-find")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from .config import ColorMode, QuietLevel, RunConfig
from .exceptions import ConfigurationError, GitFindError, SpawnError
from .state import RepoTarget, RunOutcome, Stream

__all__ = [
    "ColorMode",
    "ConfigurationError",
    "GitFindError",
    "QuietLevel",
    "RepoTarget",
    "RunConfig",
    "RunOutcome",
    "SpawnError",
    "Stream",
    "__version__",
]

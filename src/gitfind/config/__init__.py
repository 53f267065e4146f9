#
# config/__init__.py
#
"""
Configuration handling sub-package for git-find.

Exports the loading function and the configuration models.
"""

from .loader import default_config_path, load_config
from .models import (
    ColorMode,
    FindDefaults,
    GitFindConfig,
    GlobalConfig,
    QuietLevel,
    RunConfig,
)

__all__ = [
    "ColorMode",
    "FindDefaults",
    "GitFindConfig",
    "GlobalConfig",
    "QuietLevel",
    "RunConfig",
    "default_config_path",
    "load_config",
]

# 🔼⚙️

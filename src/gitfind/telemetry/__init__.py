#
# src/gitfind/telemetry/__init__.py
#
"""
Logging setup for git-find.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️

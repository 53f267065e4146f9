#
# src/gitfind/runtime/__init__.py
#
"""
Execution sub-package: line framing, the process runner and the run
coordinator.
"""
from .coordinator import RunCoordinator, format_excerpt
from .failure_log import FailureLog
from .line_framer import LineFramer
from .process_runner import ProcessRunner, build_argv
from .sinks import BufferedSink, OutputSink

__all__ = [
    "BufferedSink",
    "FailureLog",
    "LineFramer",
    "OutputSink",
    "ProcessRunner",
    "RunCoordinator",
    "build_argv",
    "format_excerpt",
]

# 🔼⚙️

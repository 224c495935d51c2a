"""Command-execution backends used by the SHELL and HELP tools."""

from apprentice.backends.base import BackendError, ExecResult, ExecutionBackend
from apprentice.backends.local import LocalBackend

__all__ = ["BackendError", "ExecResult", "ExecutionBackend", "LocalBackend"]

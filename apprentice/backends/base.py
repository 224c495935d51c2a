"""Execution Backend Interface (abstract)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class BackendError(Exception):
    """Structured error from a backend operation."""

    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.code = code


@dataclass
class ExecResult:
    """Captured output of one command run."""

    stdout: str
    stderr: str
    exit_code: int

    def format(self) -> str:
        """Render the result the way it is reported back to the model."""
        return f"STDOUT:\n{self.stdout}\nSTDERR:\n{self.stderr}"


class ExecutionBackend(ABC):
    """Runs a shell command line and returns its captured output."""

    @abstractmethod
    async def execute(self, command: str) -> ExecResult:
        """
        Run *command* to completion.

        Raises ``BackendError`` if the command cannot be started.
        """
        ...

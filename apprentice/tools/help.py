"""HELP tool -- returns the help page of a cloud CLI subcommand."""

from __future__ import annotations

import logging
from typing import Sequence

from apprentice.backends.base import BackendError, ExecutionBackend
from apprentice.config import Goal
from apprentice.llm.types import ParamType, ToolParam, ToolParamSpec
from apprentice.tools.base import Tool, command_param

logger = logging.getLogger(__name__)

# goal -> (allowed program prefixes, help flag appended to the command)
_GOAL_CLI: dict[Goal, tuple[tuple[str, ...], str]] = {
    Goal.GCP: (("gcloud ", "bq ", "gsutil "), " --help"),
    Goal.AWS: (("aws ",), " help"),
    Goal.AZURE: (("az ",), " --help"),
}


def _quote_prefixes(prefixes: tuple[str, ...]) -> str:
    quoted = [f'"{p}"' for p in prefixes]
    if len(quoted) == 1:
        return quoted[0]
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


class HelpTool(Tool):
    """Runs ``<command> --help`` (or the goal's equivalent) for allowed CLIs."""

    def __init__(self, goal: Goal, backend: ExecutionBackend) -> None:
        self._goal = goal
        self._backend = backend

    @property
    def name(self) -> str:
        return "HELP"

    @property
    def description(self) -> str:
        return "Returns a help page for a specific CLI tool subcommand."

    @property
    def params(self) -> tuple[ToolParamSpec, ...]:
        return (
            ToolParamSpec(
                name="command",
                description="command for which the help is required",
                type=ParamType.STRING,
                required=True,
            ),
        )

    def help_command(self, command: str) -> str | None:
        """Return the full help command line, or ``None`` if not allowed."""
        prefixes, flag = _GOAL_CLI[self._goal]
        if command.startswith(prefixes):
            return command + flag
        return None

    async def call(self, params: Sequence[ToolParam]) -> str:
        command, diagnostic = command_param(params, self.params)
        if command is None:
            return diagnostic or ""

        full_cmd = self.help_command(command)
        if full_cmd is None:
            prefixes, _ = _GOAL_CLI[self._goal]
            return f"command must start with {_quote_prefixes(prefixes)}."

        logger.info("Fetching help: %s", full_cmd)
        try:
            result = await self._backend.execute(full_cmd)
        except BackendError as e:
            return str(e)
        return result.format()

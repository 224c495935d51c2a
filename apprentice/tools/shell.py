"""SHELL tool -- runs a model-proposed command after the user confirms it."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from apprentice.backends.base import BackendError, ExecutionBackend
from apprentice.llm.types import ToolParam
from apprentice.tools.base import Tool, command_param

if TYPE_CHECKING:
    from apprentice.cli.term import Terminal

logger = logging.getLogger(__name__)

CONFIRM_PROMPT = "Execute command? (y - yes / n - no): "
REASON_PROMPT = "reason: "


class ConfirmState(Enum):
    PROMPTING = "prompting"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


_ANSWERS = {
    "y": ConfirmState.CONFIRMED,
    "n": ConfirmState.DECLINED,
}


class ShellTool(Tool):
    """
    Shows the proposed command and asks the user for ``y``/``n``.

    ``y`` runs it through the backend and returns the captured output;
    ``n`` asks for a reason and returns it without running anything.  Any
    other answer repeats the question.
    """

    def __init__(self, backend: ExecutionBackend, term: Terminal) -> None:
        self._backend = backend
        self._term = term

    @property
    def name(self) -> str:
        return "SHELL"

    @property
    def description(self) -> str:
        if sys.platform == "win32":
            desc = "Executes an arbitrary command in Windows shell (cmd) environment and returns its stdout and stderr."
        else:
            desc = "Executes an arbitrary command in a Unix/Linux shell (sh) environment and returns its stdout and stderr."
        return desc + " User may cancel execution of the command and will provide reason."

    async def call(self, params: Sequence[ToolParam]) -> str:
        command, diagnostic = command_param(params, self.params)
        if command is None:
            return diagnostic or ""
        return await self.confirm_and_run(command)

    def _ask(self) -> ConfirmState:
        answer = self._term.tool_key(self.name, CONFIRM_PROMPT).strip()
        return _ANSWERS.get(answer, ConfirmState.PROMPTING)

    async def confirm_and_run(self, command: str) -> str:
        self._term.print_tool_message(self.name, command)

        state = ConfirmState.PROMPTING
        while state is ConfirmState.PROMPTING:
            state = self._ask()

        if state is ConfirmState.DECLINED:
            reason = self._term.tool_input(self.name, REASON_PROMPT)
            logger.info("User declined command: %s", command)
            return f"User cancelled the operation with the reason: {reason}"

        logger.info("Executing confirmed command: %s", command)
        self._term.begin_tool_format()
        try:
            result = await self._backend.execute(command)
        except BackendError as e:
            return str(e)
        finally:
            self._term.end_tool_format()
        return result.format()

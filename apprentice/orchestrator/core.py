"""
Orchestrator core -- the conversation state machine.

The agent:
1. Takes user input (or the one-shot initial message)
2. Sends it to the chat adapter with tools enabled
3. Classifies the reply: text goes to the user, a tool call is dispatched
4. Feeds the tool result straight back to the model
5. Returns control to the user when the model answers with text only
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from apprentice.cli.term import Terminal
from apprentice.errors import ProtocolViolation, ProviderError
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.types import (
    Message,
    Role,
    Text,
    ToolCall,
    ToolChoice,
    ToolResult,
)
from apprentice.tools.registry import ToolRegistry, unknown_tool_message

logger = logging.getLogger(__name__)

HELP_TOKEN = "?"


class AgentState(Enum):
    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"
    PROCESSING_TOOL_CALL = "processing_tool_call"
    TERMINATED = "terminated"


class Agent:
    """
    Drives the dialogue between the user, the model and the tools.

    Parameters
    ----------
    chat : ChatProvider
        Adapter for the configured vendor; owns the conversation history.
    registry : ToolRegistry
        Tools the model may call.
    term : Terminal
        User interaction.
    initial_message : str
        Optional first user message; when given, the user is not prompted
        for the first turn.
    """

    def __init__(
        self,
        chat: ChatProvider,
        registry: ToolRegistry,
        term: Terminal,
        initial_message: str | None = None,
    ) -> None:
        self.chat = chat
        self.registry = registry
        self.term = term
        self.initial_message = initial_message
        self.state = AgentState.AWAITING_USER_INPUT
        self.turns = 0
        self._unsent_result: ToolResult | None = None

    def _set_state(self, state: AgentState) -> None:
        logger.debug("state %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self) -> None:
        """
        Run the dialogue until the user ends it.

        Returns normally on end of input or interrupt at the user prompt.
        Fatal errors (transport, response format, protocol violations)
        propagate to the caller.
        """
        self.term.print_intro()
        try:
            if self.initial_message:
                pending: Message | None = Text(Role.USER, self.initial_message)
            else:
                pending = self.get_user_message()

            while pending is not None:
                pending = await self.step(pending)
        finally:
            self._set_state(AgentState.TERMINATED)

    def get_user_message(self) -> Text | None:
        """Prompt until the user enters a request; ``None`` ends the session."""
        self._set_state(AgentState.AWAITING_USER_INPUT)
        while True:
            try:
                line = self.term.user_input()
            except (EOFError, KeyboardInterrupt):
                logger.debug("User input closed")
                return None
            line = line.strip()
            if not line:
                continue
            if line == HELP_TOKEN:
                self.term.print_help()
                continue
            return Text(Role.USER, line)

    async def step(self, message: Text | ToolResult) -> Text | ToolResult | None:
        """
        Run one turn for *message* and return the next input.

        The next input is a tool result when the model called a tool, the
        user's next message otherwise, or ``None`` once the user is done.

        A tool result whose turn failed with a provider error is not
        answered yet; it is sent ahead of the user's next message.
        """
        self._set_state(AgentState.AWAITING_MODEL_RESPONSE)
        self.turns += 1
        inputs: list[Message] = [message]
        if isinstance(message, Text) and self._unsent_result is not None:
            inputs.insert(0, self._unsent_result)
        try:
            batch = await self.chat.get_inference(inputs, ToolChoice.AUTO)
        except ProviderError as e:
            if isinstance(message, ToolResult):
                self._unsent_result = message
            self.term.print_error(str(e))
            return self.get_user_message()
        self._unsent_result = None

        tool_call = self.classify(batch)
        if tool_call is None:
            return self.get_user_message()
        return await self.process_tool_call(tool_call)

    def classify(self, batch: Sequence[Message]) -> ToolCall | None:
        """
        Print the text of *batch* and return its single tool call, if any.

        Raises ``ProtocolViolation`` for more than one tool call or for a
        model-authored tool result.  Nothing is dispatched in that case.
        """
        if len(batch) == 1:
            message = batch[0]
            if isinstance(message, Text):
                self.term.apprentice_print(message.content)
                return None
            if isinstance(message, ToolCall):
                return message
            raise ProtocolViolation("unexpected message type from the LLM.")

        tool_call: ToolCall | None = None
        for message in batch:
            if isinstance(message, Text):
                self.term.apprentice_print(message.content)
            elif isinstance(message, ToolCall):
                if tool_call is not None:
                    raise ProtocolViolation("parallel tool call is requested.")
                tool_call = message
            else:
                raise ProtocolViolation('unexpected "tool result" message from LLM.')
        return tool_call

    async def process_tool_call(self, tool_call: ToolCall) -> ToolResult:
        """Dispatch *tool_call* and wrap its output as the next model input."""
        self._set_state(AgentState.PROCESSING_TOOL_CALL)
        logger.info("Tool call %s (id=%r)", tool_call.name, tool_call.call_id)

        tool = self.registry.get(tool_call.name)
        if tool is None:
            result = unknown_tool_message(tool_call.name)
        else:
            result = await tool.call(tool_call.params)
        return ToolResult(tool_call.call_id, tool_call.name, result)

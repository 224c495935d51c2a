"""Abstract base class for vendor chat adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

from apprentice.config import ModelConfig
from apprentice.errors import ProtocolViolation, ProviderError, ResponseFormatError
from apprentice.llm.schema import require_str
from apprentice.llm.transport import Transport
from apprentice.llm.types import (
    Message,
    ModelProvider,
    Text,
    ToolChoice,
    ToolParam,
    ToolResult,
    ToolSpec,
)

logger = logging.getLogger(__name__)


class ChatProvider(ABC):
    """
    A chat with one vendor model that owns its conversation history.

    The history is an append-only list of vendor-native JSON fragments that
    is replayed verbatim on every request.  Input messages and the vendor's
    response fragments are committed together, and only after the response
    has been parsed successfully, so a failed call leaves the history as it
    was.

    Implementations must provide:
      - ``_input_entry`` -- one input message in the vendor's shape.
      - ``_payload`` -- the full request body.
      - ``_auth`` -- credential headers and query parameters.
      - ``_parse_response`` -- history fragments and normalized messages.
    """

    provider: ModelProvider

    def __init__(
        self,
        config: ModelConfig,
        transport: Transport,
        tools: Sequence[ToolSpec] = (),
    ) -> None:
        self._config = config
        self._transport = transport
        self._tools: tuple[ToolSpec, ...] = tuple(tools)
        self._system_prompt = ""
        self._history: list[dict] = []

    # ------------------------------------------------------------------
    # Chat interface
    # ------------------------------------------------------------------

    @property
    def history(self) -> tuple[dict, ...]:
        """Read-only snapshot of the vendor-native history."""
        return tuple(self._history)

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def tools(self) -> tuple[ToolSpec, ...]:
        return self._tools

    def set_system_prompt(self, prompt: str) -> None:
        self._system_prompt = prompt

    def clear_history(self) -> None:
        self._history.clear()

    def build_payload(
        self,
        messages: Sequence[Message],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> dict:
        """Build the request body for *messages* without touching history."""
        return self._payload(self._input_entries(messages), tool_choice)

    async def get_inference(
        self,
        messages: Sequence[Message],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> list[Message]:
        """
        Send *messages* (``Text`` or ``ToolResult``) and return the model's
        reply as ``Text`` / ``ToolCall`` messages in vendor order.

        Raises ``ProviderError`` for a vendor error envelope,
        ``ResponseFormatError`` for an unexpected response shape and
        ``TransportError`` for network failures.
        """
        staged = self._input_entries(messages)
        payload = self._payload(staged, tool_choice)
        headers, params = self._auth()
        logger.info(
            "REQUEST: provider=%s model=%s history=%d new=%d tools=%d choice=%s",
            self.provider.value,
            self._config.name,
            len(self._history),
            len(staged),
            len(self._tools) if tool_choice.uses_tools else 0,
            tool_choice.mode.value,
        )

        response = await self._transport.send(
            self._config.api_url, payload, headers, params
        )
        self._check_for_error(response)
        fragments, result = self._parse_response(response)

        self._history.extend(staged)
        self._history.extend(fragments)
        return result

    # ------------------------------------------------------------------
    # Vendor hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _input_entry(self, message: Text | ToolResult) -> dict:
        ...

    @abstractmethod
    def _payload(self, staged: list[dict], tool_choice: ToolChoice) -> dict:
        ...

    @abstractmethod
    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        ...

    @abstractmethod
    def _parse_response(self, response: dict) -> tuple[list[dict], list[Message]]:
        ...

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _input_entries(self, messages: Sequence[Message]) -> list[dict]:
        entries = []
        for msg in messages:
            if not isinstance(msg, (Text, ToolResult)):
                raise ProtocolViolation(
                    f"only text and tool result messages can be sent, got {type(msg).__name__}"
                )
            entries.append(self._input_entry(msg))
        return entries

    def _replay(self, staged: list[dict]) -> list[dict]:
        return [*self._history, *staged]

    def _check_for_error(self, response: dict) -> None:
        error = response.get("error")
        if error is None:
            return
        if not isinstance(error, dict):
            raise ResponseFormatError("can't extract error message from LLM API response.")
        message = require_str(error.get("message"), "error message")
        logger.warning("Provider %s returned an error: %s", self.provider.value, message)
        raise ProviderError(message)

    @staticmethod
    def _params_from_object(args: Any, element: str) -> list[ToolParam]:
        if not isinstance(args, dict):
            raise ResponseFormatError(f"can't enumerate {element}.")
        return [ToolParam(name=k, value=v) for k, v in args.items()]

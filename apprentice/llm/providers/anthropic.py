"""
Anthropic messages adapter.

Speaks the ``/v1/messages`` wire protocol.  The system prompt is a dedicated
top-level field, every response content block is stored as its own history
entry, and ``api_version`` / ``max_tokens`` are mandatory.
"""

from __future__ import annotations

import logging
from typing import Sequence

from apprentice.config import ModelConfig
from apprentice.errors import MissingArgumentError, ResponseFormatError
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.schema import (
    llm_to_role,
    require_str,
    role_to_llm,
    set_float_param,
    set_int_param,
    tool_params_to_schema,
)
from apprentice.llm.transport import Transport
from apprentice.llm.types import (
    Message,
    ModelProvider,
    Role,
    Text,
    ToolCall,
    ToolChoice,
    ToolChoiceMode,
    ToolResult,
    ToolSpec,
)

logger = logging.getLogger(__name__)


class AnthropicChat(ChatProvider):
    """Adapter for Anthropic-shaped endpoints (``x-api-key`` auth)."""

    provider = ModelProvider.ANTHROPIC

    def __init__(
        self,
        config: ModelConfig,
        transport: Transport,
        tools: Sequence[ToolSpec] = (),
    ) -> None:
        if config.api_version is None:
            raise MissingArgumentError("api-version is mandatory for anthropic.")
        if config.max_tokens is None:
            raise MissingArgumentError("max-tokens is mandatory for anthropic.")
        super().__init__(config, transport, tools)

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def _input_entry(self, message: Text | ToolResult) -> dict:
        if isinstance(message, Text):
            return {
                "role": role_to_llm(self.provider, message.role),
                "content": message.content,
            }
        return {
            "role": role_to_llm(self.provider, Role.USER),
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": message.call_id,
                    "content": message.result,
                }
            ],
        }

    def _payload(self, staged: list[dict], tool_choice: ToolChoice) -> dict:
        cfg = self._config
        payload: dict = {
            "model": cfg.name,
            "system": self._system_prompt,
            "messages": self._replay(staged),
        }
        set_int_param(payload, "max_tokens", cfg.max_tokens)
        set_float_param(payload, "top_p", cfg.top_p)
        set_int_param(payload, "top_k", cfg.top_k)
        set_float_param(payload, "temperature", cfg.temperature)
        if cfg.stop_sequence is not None:
            payload["stop_sequences"] = [cfg.stop_sequence]

        self._add_tool_use(payload, tool_choice)
        return payload

    def _add_tool_use(self, payload: dict, tool_choice: ToolChoice) -> None:
        if not tool_choice.uses_tools:
            return
        if tool_choice.mode is ToolChoiceMode.AUTO:
            choice: dict = {"type": "auto"}
        elif tool_choice.mode is ToolChoiceMode.CALL_ONE:
            choice = {"type": "any"}
        else:
            choice = {"type": "tool", "name": tool_choice.name}
        choice["disable_parallel_tool_use"] = True
        payload["tool_choice"] = choice
        payload["tools"] = [
            {
                "description": spec.description,
                "name": spec.name,
                "input_schema": tool_params_to_schema(spec.params, self.provider),
            }
            for spec in self._tools
        ]

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        return {
            "x-api-key": self._config.api_key,
            "anthropic-version": self._config.api_version or "",
        }, {}

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def _parse_response(self, response: dict) -> tuple[list[dict], list[Message]]:
        vendor_role = require_str(response.get("role"), "role")
        role = llm_to_role(vendor_role)
        content = response.get("content")
        if not isinstance(content, list):
            raise ResponseFormatError("can't enumerate messages in the response.")

        fragments: list[dict] = []
        result: list[Message] = []
        for block in content:
            if not isinstance(block, dict):
                raise ResponseFormatError("unexpected content block format.")
            fragments.append({"role": vendor_role, "content": [block]})
            block_type = require_str(block.get("type"), "message type")
            if block_type == "text":
                result.append(Text(role, require_str(block.get("text"), "text")))
            elif block_type == "tool_use":
                call_id = require_str(block.get("id"), "tool call id")
                name = require_str(block.get("name"), "tool name")
                params = self._params_from_object(block.get("input"), "tool call parameters")
                result.append(ToolCall(call_id, name, params))
            else:
                raise ResponseFormatError(f"unexpected message type: {block_type}.")
        return fragments, result

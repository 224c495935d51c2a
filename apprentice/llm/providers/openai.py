"""
OpenAI chat-completions adapter.

Speaks the ``/v1/chat/completions`` wire protocol.  The system prompt is
sent as the first entry of ``messages``; tool arguments arrive as a JSON
string and are decoded here.
"""

from __future__ import annotations

import json
import logging

from apprentice.errors import ResponseFormatError
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.schema import (
    llm_to_role,
    require_str,
    role_to_llm,
    set_float_param,
    set_int_param,
    tool_params_to_schema,
)
from apprentice.llm.types import (
    Message,
    ModelProvider,
    Text,
    ToolCall,
    ToolChoice,
    ToolChoiceMode,
    ToolResult,
)

logger = logging.getLogger(__name__)


class OpenAIChat(ChatProvider):
    """Adapter for OpenAI-shaped endpoints (bearer-token auth)."""

    provider = ModelProvider.OPENAI

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
            "role": "tool",
            "content": message.result,
            "tool_call_id": message.call_id,
        }

    def _payload(self, staged: list[dict], tool_choice: ToolChoice) -> dict:
        messages = self._replay(staged)
        if self._system_prompt:
            messages.insert(0, {"role": "system", "content": self._system_prompt})

        cfg = self._config
        payload: dict = {"model": cfg.name, "messages": messages}
        set_float_param(payload, "frequency_penalty", cfg.frequency_penalty)
        set_float_param(payload, "presence_penalty", cfg.presence_penalty)
        set_int_param(payload, "n", cfg.n)
        set_float_param(payload, "top_p", cfg.top_p)
        set_float_param(payload, "temperature", cfg.temperature)
        set_int_param(payload, "max_completion_tokens", cfg.max_tokens)
        if cfg.stop_sequence is not None:
            payload["stop"] = cfg.stop_sequence

        self._add_tool_use(payload, tool_choice)
        return payload

    def _add_tool_use(self, payload: dict, tool_choice: ToolChoice) -> None:
        if not tool_choice.uses_tools:
            return
        if tool_choice.mode is ToolChoiceMode.AUTO:
            payload["tool_choice"] = "auto"
        elif tool_choice.mode is ToolChoiceMode.CALL_ONE:
            payload["tool_choice"] = "required"
        else:
            payload["tool_choice"] = {
                "type": "function",
                "function": {"name": tool_choice.name},
            }
        payload["tools"] = [
            {
                "type": "function",
                "function": {
                    "description": spec.description,
                    "name": spec.name,
                    "parameters": tool_params_to_schema(spec.params, self.provider),
                    "strict": True,
                },
            }
            for spec in self._tools
        ]
        payload["parallel_tool_calls"] = False

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        return {"Authorization": f"Bearer {self._config.api_key}"}, {}

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def _parse_response(self, response: dict) -> tuple[list[dict], list[Message]]:
        choices = response.get("choices")
        if not isinstance(choices, list):
            raise ResponseFormatError(
                "unexpected answer format, can't enumerate response messages."
            )

        fragments: list[dict] = []
        result: list[Message] = []
        for choice in choices:
            msg = choice.get("message") if isinstance(choice, dict) else None
            if not isinstance(msg, dict):
                raise ResponseFormatError("unexpected answer format, choice has no message.")
            fragments.append(msg)
            role = llm_to_role(msg.get("role"))

            if msg.get("content") is not None:
                result.append(Text(role, require_str(msg["content"], "message content")))
            if msg.get("refusal") is not None:
                result.append(Text(role, require_str(msg["refusal"], "refusal content")))

            tool_calls = msg.get("tool_calls")
            if tool_calls is None:
                continue
            if not isinstance(tool_calls, list):
                raise ResponseFormatError(
                    "unexpected answer format, can't enumerate tool call requests."
                )
            for call in tool_calls:
                result.append(self._parse_tool_call(call))
        return fragments, result

    def _parse_tool_call(self, call: dict) -> ToolCall:
        if not isinstance(call, dict) or not isinstance(call.get("function"), dict):
            raise ResponseFormatError("unexpected tool call format.")
        call_id = require_str(call.get("id"), "tool call id")
        func = call["function"]
        name = require_str(func.get("name"), "tool name")
        arguments = require_str(func.get("arguments"), "tool arguments")
        try:
            args = json.loads(arguments)
        except json.JSONDecodeError as exc:
            raise ResponseFormatError(f"tool arguments are not valid JSON: {exc}") from exc
        return ToolCall(call_id, name, self._params_from_object(args, "arguments"))

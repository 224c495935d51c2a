"""
Google Cloud (Gemini ``generateContent``) adapter.

The API key travels as the ``key`` query parameter, sampling parameters live
under ``generationConfig`` and function calls carry no identifier, so
``ToolCall.call_id`` is always empty for this provider.
"""

from __future__ import annotations

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


class GcpChat(ChatProvider):
    """Adapter for GCP-shaped endpoints (API key as query parameter)."""

    provider = ModelProvider.GCP

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def _input_entry(self, message: Text | ToolResult) -> dict:
        if isinstance(message, Text):
            return {
                "role": role_to_llm(self.provider, message.role),
                "parts": [{"text": message.content}],
            }
        return {
            "role": "user",
            "parts": [
                {
                    "functionResponse": {
                        "name": message.name,
                        "response": {
                            "name": message.name,
                            "content": message.result,
                        },
                    }
                }
            ],
        }

    def _payload(self, staged: list[dict], tool_choice: ToolChoice) -> dict:
        cfg = self._config
        generation: dict = {}
        set_int_param(generation, "maxOutputTokens", cfg.max_tokens)
        set_float_param(generation, "topP", cfg.top_p)
        set_int_param(generation, "topK", cfg.top_k)
        set_float_param(generation, "temperature", cfg.temperature)
        set_float_param(generation, "presencePenalty", cfg.presence_penalty)
        set_float_param(generation, "frequencyPenalty", cfg.frequency_penalty)
        if cfg.stop_sequence is not None:
            generation["stopSequences"] = [cfg.stop_sequence]

        payload: dict = {
            "systemInstruction": {"parts": {"text": self._system_prompt}},
            "contents": self._replay(staged),
            "generationConfig": generation,
        }
        self._add_tool_use(payload, tool_choice)
        return payload

    def _add_tool_use(self, payload: dict, tool_choice: ToolChoice) -> None:
        if not tool_choice.uses_tools:
            return
        if tool_choice.mode is ToolChoiceMode.AUTO:
            calling: dict = {"mode": "AUTO"}
        elif tool_choice.mode is ToolChoiceMode.CALL_ONE:
            calling = {"mode": "ANY"}
        else:
            calling = {"mode": "ANY", "allowed_function_names": [tool_choice.name]}
        # The protocol has no switch for parallel calls; a batch with more
        # than one functionCall is rejected by the orchestrator instead.
        payload["tool_config"] = {"function_calling_config": calling}
        payload["tools"] = [
            {
                "function_declarations": [
                    {
                        "name": spec.name,
                        "description": spec.description,
                        "parameters": tool_params_to_schema(spec.params, self.provider),
                    }
                    for spec in self._tools
                ]
            }
        ]

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        return {}, {"key": self._config.api_key}

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def _parse_response(self, response: dict) -> tuple[list[dict], list[Message]]:
        candidates = response.get("candidates")
        if not isinstance(candidates, list):
            raise ResponseFormatError("can't enumerate messages in the response.")

        fragments: list[dict] = []
        result: list[Message] = []
        for candidate in candidates:
            content = candidate.get("content") if isinstance(candidate, dict) else None
            if not isinstance(content, dict):
                raise ResponseFormatError("candidate has no content.")
            fragments.append(content)
            role = llm_to_role(content.get("role"))
            parts = content.get("parts")
            if not isinstance(parts, list):
                raise ResponseFormatError(
                    "unexpected answer format, can't enumerate message parts."
                )
            for part in parts:
                if not isinstance(part, dict):
                    raise ResponseFormatError("unexpected message part format.")
                call = part.get("functionCall")
                if isinstance(call, dict):
                    name = require_str(call.get("name"), "tool name")
                    params = self._params_from_object(
                        call.get("args", {}), "tool call parameters"
                    )
                    result.append(ToolCall("", name, params))
                elif isinstance(part.get("text"), str):
                    result.append(Text(role, part["text"]))
                else:
                    raise ResponseFormatError("unexpected message type.")
        return fragments, result

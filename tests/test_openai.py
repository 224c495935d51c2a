"""Tests for the OpenAI chat-completions adapter."""

import pytest

from apprentice.errors import ProtocolViolation, ProviderError, ResponseFormatError, TransportError
from apprentice.llm.providers.openai import OpenAIChat
from apprentice.llm.types import (
    ModelProvider,
    Role,
    Text,
    ToolCall,
    ToolChoice,
    ToolParam,
    ToolResult,
    ToolSpec,
)
from apprentice.tools.base import COMMAND_PARAM

from tests.mock_chat import make_model_config
from tests.mock_transport import StubTransport, error_envelope, openai_text, openai_tool_call

SHELL_SPEC = ToolSpec("SHELL", "runs a command", (COMMAND_PARAM,))
HELLO = Text(Role.USER, "hello")


def make_chat(responses=None, tools=(SHELL_SPEC,), **config):
    transport = StubTransport(responses)
    chat = OpenAIChat(make_model_config(ModelProvider.OPENAI, **config), transport, tools)
    return chat, transport


class TestPayload:

    def test_absent_parameters_are_omitted(self):
        chat, _ = make_chat()
        payload = chat.build_payload([HELLO], ToolChoice.NONE)
        assert payload == {
            "model": "test-model",
            "messages": [{"role": "user", "content": "hello"}],
        }

    def test_configured_parameters_use_vendor_names(self):
        chat, _ = make_chat(
            max_tokens=100, n=2, temperature=0.5, top_p=0.9, top_k=40,
            frequency_penalty=0.1, presence_penalty=0.2, stop_sequence="END",
        )
        payload = chat.build_payload([HELLO], ToolChoice.NONE)
        assert payload["max_completion_tokens"] == 100
        assert payload["n"] == 2
        assert payload["temperature"] == 0.5
        assert payload["top_p"] == 0.9
        assert payload["frequency_penalty"] == 0.1
        assert payload["presence_penalty"] == 0.2
        assert payload["stop"] == "END"
        assert "top_k" not in payload

    def test_system_prompt_is_first_message(self):
        chat, _ = make_chat()
        chat.set_system_prompt("be brief")
        payload = chat.build_payload([HELLO], ToolChoice.NONE)
        assert payload["messages"][0] == {"role": "system", "content": "be brief"}
        assert payload["messages"][1]["content"] == "hello"

    def test_tool_declarations(self):
        chat, _ = make_chat()
        payload = chat.build_payload([HELLO], ToolChoice.AUTO)
        assert payload["tool_choice"] == "auto"
        assert payload["tools"] == [
            {
                "type": "function",
                "function": {
                    "description": "runs a command",
                    "name": "SHELL",
                    "parameters": {
                        "type": "object",
                        "properties": {
                            "command": {"type": "string", "description": "command to execute"},
                        },
                        "required": ["command"],
                        "additionalProperties": False,
                    },
                    "strict": True,
                },
            }
        ]

    @pytest.mark.parametrize(
        "choice, expected",
        [
            (ToolChoice.AUTO, "auto"),
            (ToolChoice.CALL_ONE, "required"),
            (ToolChoice.force("SHELL"), {"type": "function", "function": {"name": "SHELL"}}),
        ],
    )
    def test_parallel_calls_always_disabled(self, choice, expected):
        chat, _ = make_chat()
        payload = chat.build_payload([HELLO], choice)
        assert payload["tool_choice"] == expected
        assert payload["parallel_tool_calls"] is False

    def test_no_tools_for_tool_choice_none(self):
        chat, _ = make_chat()
        payload = chat.build_payload([HELLO], ToolChoice.NONE)
        assert "tools" not in payload
        assert "tool_choice" not in payload
        assert "parallel_tool_calls" not in payload

    def test_tool_result_echo(self):
        chat, _ = make_chat()
        payload = chat.build_payload([ToolResult("call_9", "SHELL", "done")], ToolChoice.NONE)
        assert payload["messages"] == [
            {"role": "tool", "content": "done", "tool_call_id": "call_9"}
        ]

    def test_tool_call_input_is_rejected(self):
        chat, _ = make_chat()
        with pytest.raises(ProtocolViolation):
            chat.build_payload([ToolCall("x", "SHELL")], ToolChoice.NONE)


class TestInference:

    async def test_bearer_auth_and_url(self):
        chat, transport = make_chat([openai_text("hi")])
        await chat.get_inference([HELLO])
        assert transport.last.url == "https://llm.example/v1"
        assert transport.last.headers == {"Authorization": "Bearer sk-test-key"}
        assert transport.last.params == {}

    async def test_text_response(self):
        chat, _ = make_chat([openai_text("hi there")])
        result = await chat.get_inference([HELLO])
        assert result == [Text(Role.MODEL, "hi there")]

    async def test_tool_call_arguments_are_decoded(self):
        chat, _ = make_chat([openai_tool_call("SHELL", '{"command": "ls -la"}', "call_7")])
        result = await chat.get_inference([HELLO])
        assert result == [ToolCall("call_7", "SHELL", [ToolParam("command", "ls -la")])]

    async def test_content_refusal_then_tool_calls_in_order(self):
        response = openai_tool_call("HELP", '{"command": "gcloud"}')
        message = response["choices"][0]["message"]
        message["content"] = "thinking"
        message["refusal"] = "partly refused"
        chat, _ = make_chat([response])
        result = await chat.get_inference([HELLO])
        assert [type(m) for m in result] == [Text, Text, ToolCall]
        assert result[0].content == "thinking"
        assert result[1].content == "partly refused"

    async def test_history_replayed_verbatim(self):
        chat, transport = make_chat([openai_text("one"), openai_text("two")])
        chat.set_system_prompt("sys")
        await chat.get_inference([HELLO])
        await chat.get_inference([Text(Role.USER, "again")])
        assert transport.last.payload["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": "one"},
            {"role": "user", "content": "again"},
        ]
        assert len(chat.history) == 4

    async def test_error_envelope_leaves_history_unchanged(self):
        chat, _ = make_chat([openai_text("ok"), error_envelope("rate limited")])
        await chat.get_inference([HELLO])
        before = chat.history
        with pytest.raises(ProviderError) as exc_info:
            await chat.get_inference([Text(Role.USER, "more")])
        assert exc_info.value.message == "rate limited"
        assert str(exc_info.value) == "LLM provider responded with error: rate limited"
        assert chat.history == before

    async def test_invalid_arguments_json(self):
        chat, _ = make_chat([openai_tool_call("SHELL", "{not json")])
        with pytest.raises(ResponseFormatError):
            await chat.get_inference([HELLO])
        assert chat.history == ()

    async def test_missing_choices(self):
        chat, _ = make_chat([{"id": "x"}])
        with pytest.raises(ResponseFormatError):
            await chat.get_inference([HELLO])

    async def test_transport_error_propagates(self):
        chat, _ = make_chat([TransportError("connection refused")])
        with pytest.raises(TransportError):
            await chat.get_inference([HELLO])
        assert chat.history == ()

    async def test_clear_history(self):
        chat, _ = make_chat([openai_text("hi")])
        await chat.get_inference([HELLO])
        chat.clear_history()
        assert chat.history == ()

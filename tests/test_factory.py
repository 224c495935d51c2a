"""Tests for adapter selection."""

import pytest

from apprentice.llm.factory import get_llm_chat
from apprentice.llm.providers import AnthropicChat, GcpChat, OpenAIChat
from apprentice.llm.types import ModelProvider, ToolSpec
from apprentice.tools.base import COMMAND_PARAM

from tests.mock_chat import make_model_config
from tests.mock_transport import StubTransport


class TestGetLlmChat:

    @pytest.mark.parametrize(
        "provider, cls",
        [
            (ModelProvider.OPENAI, OpenAIChat),
            (ModelProvider.ANTHROPIC, AnthropicChat),
            (ModelProvider.GCP, GcpChat),
        ],
    )
    def test_selects_adapter(self, provider, cls):
        config = make_model_config(provider, api_version="2023-06-01", max_tokens=512)
        chat = get_llm_chat(config, StubTransport())
        assert type(chat) is cls
        assert chat.provider is provider

    def test_binds_tools(self):
        spec = ToolSpec("SHELL", "runs", (COMMAND_PARAM,))
        chat = get_llm_chat(make_model_config(), StubTransport(), [spec])
        assert chat.tools == (spec,)
        assert chat.history == ()

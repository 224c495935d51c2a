"""Scripted chat adapter for orchestrator tests."""

from __future__ import annotations

from typing import Sequence

from apprentice.config import ModelConfig
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.types import Message, ModelProvider, ToolChoice

from tests.mock_transport import StubTransport


def make_model_config(provider: ModelProvider = ModelProvider.OPENAI, **kwargs) -> ModelConfig:
    defaults = dict(
        provider=provider,
        name="test-model",
        api_key="sk-test-key",
        api_url="https://llm.example/v1",
    )
    defaults.update(kwargs)
    return ModelConfig(**defaults)


class ScriptedChat(ChatProvider):
    """
    A chat that returns pre-configured message batches.

    Each entry in *script* is either a list of messages returned by one
    ``get_inference`` call or an exception raised by it.  Every call's input
    is recorded in ``inputs``.
    """

    provider = ModelProvider.OPENAI

    def __init__(self, script: list[list[Message] | Exception]) -> None:
        super().__init__(make_model_config(), StubTransport())
        self._script = list(script)
        self.inputs: list[list[Message]] = []
        self.choices: list[ToolChoice] = []

    async def get_inference(
        self,
        messages: Sequence[Message],
        tool_choice: ToolChoice = ToolChoice.AUTO,
    ) -> list[Message]:
        self.inputs.append(list(messages))
        self.choices.append(tool_choice)
        if not self._script:
            raise AssertionError("ScriptedChat ran out of responses")
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def _input_entry(self, message):
        return {}

    def _payload(self, staged, tool_choice):
        return {}

    def _auth(self):
        return {}, {}

    def _parse_response(self, response):
        return [], []

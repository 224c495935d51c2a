"""Selects the vendor adapter for the configured provider."""

from __future__ import annotations

from typing import Sequence

from apprentice.config import ModelConfig
from apprentice.llm.providers.anthropic import AnthropicChat
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.providers.gcp import GcpChat
from apprentice.llm.providers.openai import OpenAIChat
from apprentice.llm.transport import Transport
from apprentice.llm.types import ModelProvider, ToolSpec

_ADAPTERS: dict[ModelProvider, type[ChatProvider]] = {
    ModelProvider.OPENAI: OpenAIChat,
    ModelProvider.ANTHROPIC: AnthropicChat,
    ModelProvider.GCP: GcpChat,
}


def get_llm_chat(
    config: ModelConfig,
    transport: Transport,
    tools: Sequence[ToolSpec] = (),
) -> ChatProvider:
    """
    Construct the adapter for ``config.provider``.

    The provider has already been validated by the config loader.  Adapter
    constructors may still raise ``ConfigError`` for provider-specific
    requirements.
    """
    return _ADAPTERS[config.provider](config, transport, tools)

"""Vendor adapters behind the ``ChatProvider`` contract."""

from apprentice.llm.providers.anthropic import AnthropicChat
from apprentice.llm.providers.base import ChatProvider
from apprentice.llm.providers.gcp import GcpChat
from apprentice.llm.providers.openai import OpenAIChat

__all__ = ["AnthropicChat", "ChatProvider", "GcpChat", "OpenAIChat"]

"""Model-server clients."""

from term_ai.llm.client import ChatReply, LLMClient, OllamaClient

__all__ = ["ChatReply", "LLMClient", "OllamaClient"]

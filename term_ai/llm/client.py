"""
LLM client abstraction for term-ai.

Provides a pluggable interface so the model server can be swapped (or stubbed
in tests) without touching the tool-calling loop.  The current implementation
talks to a local Ollama server:

  - ``POST {endpoint}/api/generate``  single-shot prompt -> ``response`` text
  - ``POST {endpoint}/api/chat``      messages + tools   -> assistant message

Failures are raised, never retried: a dead server should surface immediately.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from term_ai.exceptions import ModelServerError, UnsupportedToolsError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"
DEFAULT_TIMEOUT = 30


@dataclass
class ChatReply:
    """Assistant message returned by the chat endpoint."""

    content: str = ""
    tool_calls: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class LLMClient(ABC):
    """Abstract LLM client interface.

    Subclass this and implement ``generate`` and ``chat`` to plug in a new
    model backend.
    """

    model: str = ""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Single-shot completion of a full prompt."""
        ...

    @abstractmethod
    def chat(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]] = None) -> ChatReply:
        """Send the conversation (and optional tool schema) and return the reply.

        Parameters
        ----------
        messages : list of dict
            Conversation in chat-endpoint wire format.
        tools : list of dict, optional
            Function tool definitions the model may call.

        Returns
        -------
        ChatReply
            Either final ``content`` or a non-empty ``tool_calls`` list.
        """
        ...


# ---------------------------------------------------------------------------
# Ollama implementation (current default)
# ---------------------------------------------------------------------------

class OllamaClient(LLMClient):
    """LLM client for a local Ollama server."""

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, model: str = DEFAULT_MODEL,
                 timeout: int = DEFAULT_TIMEOUT):
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.timeout = timeout

    # -- factory helpers ---------------------------------------------------

    @classmethod
    def from_settings(cls, settings) -> "OllamaClient":
        """Create a client from a loaded ``Settings`` object."""
        return cls(endpoint=settings.endpoint, model=settings.model, timeout=settings.model_timeout)

    # -- core -------------------------------------------------------------

    def generate(self, prompt: str) -> str:
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        body = self._post_json("/api/generate", payload, purpose="generate")

        text = body.get("response")
        if not isinstance(text, str):
            raise ModelServerError("Ollama generate response has no 'response' text", kind="decode")
        return text

    def chat(self, messages: List[Dict[str, Any]], tools: Optional[List[Dict[str, Any]]] = None) -> ChatReply:
        payload: Dict[str, Any] = {"model": self.model, "messages": messages, "stream": False}
        if tools:
            payload["tools"] = tools
        body = self._post_json("/api/chat", payload, purpose="chat")

        message = body.get("message")
        if not isinstance(message, dict):
            raise ModelServerError("Ollama chat response has no 'message' object", kind="decode")
        tool_calls = message.get("tool_calls") or []
        if not isinstance(tool_calls, list):
            raise ModelServerError("Ollama chat response 'tool_calls' is not a list", kind="decode")
        return ChatReply(content=message.get("content") or "", tool_calls=tool_calls)

    # -- internal helpers -------------------------------------------------

    def _post_json(self, path: str, payload: Dict[str, Any], purpose: str) -> Dict[str, Any]:
        url = f"{self.endpoint}{path}"
        start_time = time.time()
        logger.info("LLM call: purpose=%s model=%s messages=%d", purpose, self.model,
                    len(payload.get("messages", [])))

        try:
            resp = requests.post(url, json=payload, timeout=self.timeout)
        except requests.Timeout as exc:
            raise ModelServerError(
                f"Ollama did not answer within {self.timeout}s ({url})", kind="timeout"
            ) from exc
        except requests.RequestException as exc:
            raise ModelServerError(f"could not reach Ollama at {url}: {exc}", kind="http") from exc

        if not resp.ok:
            error_text = resp.text or "Unknown error"
            if "does not support tools" in error_text:
                raise UnsupportedToolsError(
                    f"model '{self.model}' does not support tools: {error_text}",
                    status_code=resp.status_code,
                )
            raise ModelServerError(
                f"Ollama returned status {resp.status_code}: {error_text}",
                kind="http",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise ModelServerError(f"Ollama returned malformed JSON: {exc}", kind="decode") from exc
        if not isinstance(body, dict):
            raise ModelServerError("Ollama returned an unexpected JSON document", kind="decode")

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info("LLM call ok: purpose=%s model=%s elapsed_ms=%d", purpose, self.model, elapsed_ms)
        return body

import copy
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest

from term_ai.exceptions import ProviderError
from term_ai.llm.client import ChatReply, LLMClient
from term_ai.search.abstract_search_client_interface import SearchProvider, SearchResult


class MockResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "",
                 json_error: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self._json_error = json_error

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class StubLLMClient(LLMClient):
    """Scripted model: returns ``replies`` in order, repeating the last one."""

    model = "stub-model"

    def __init__(self, replies: Sequence[Union[ChatReply, Callable[[List[Dict[str, Any]]], ChatReply]]] = (),
                 generate_text: str = "") -> None:
        self._replies = list(replies)
        self.generate_text = generate_text
        self.chat_calls: List[Dict[str, Any]] = []
        self.generate_calls: List[str] = []

    @property
    def total_calls(self) -> int:
        return len(self.chat_calls) + len(self.generate_calls)

    def generate(self, prompt: str) -> str:
        self.generate_calls.append(prompt)
        return self.generate_text

    def chat(self, messages, tools=None) -> ChatReply:
        self.chat_calls.append({"messages": copy.deepcopy(messages), "tools": copy.deepcopy(tools)})
        index = min(len(self.chat_calls) - 1, len(self._replies) - 1)
        reply = self._replies[index]
        if callable(reply):
            return reply(messages)
        return reply


class StubSearchProvider(SearchProvider):
    """Provider returning canned results, or raising ``error`` when set."""

    name = "stub"

    def __init__(self, results: Sequence[SearchResult] = (), error: Optional[ProviderError] = None) -> None:
        self.results = list(results)
        self.error = error
        self.queries: List[str] = []

    def search(self, query: str, max_results: int) -> List[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.results[:max_results]


def tool_call_reply(*queries: str, tool_name: str = "web_search", with_ids: bool = True) -> ChatReply:
    calls = []
    for idx, query in enumerate(queries):
        call = {"function": {"name": tool_name, "arguments": {"query": query}}}
        if with_ids:
            call["id"] = f"call_{idx}_{query[:10]}"
        calls.append(call)
    return ChatReply(content="", tool_calls=calls)


@pytest.fixture
def rust_results() -> List[SearchResult]:
    return [
        SearchResult(
            title="Announcing Rust 1.93.0 | Rust Blog",
            url="https://blog.rust-lang.org/2026/01/22/Rust-1.93.0/",
            snippet="The Rust team is happy to announce a new version of Rust, 1.93.0. " * 3,
        ),
        SearchResult(
            title="Rust Versions",
            url="https://releases.rs/",
            snippet="Stable: 1.93.0",
        ),
    ]


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Isolate settings from the developer's real environment and home config."""
    for name in ("TERM_AI_MODEL", "TERM_AI_ENDPOINT", "TERM_AI_SEARCH_PROVIDER", "BRAVE_API_KEY",
                 "TERM_AI_MAX_RESULTS", "TERM_AI_LOG_LEVEL", "TERM_AI_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("term_ai.config.DEFAULT_CONFIG_PATH", tmp_path / "missing" / "config.yaml")
    return tmp_path


@pytest.fixture
def no_network(monkeypatch):
    """Count (and refuse) every outbound HTTP call."""
    import requests

    calls: List[str] = []

    def _refuse(url, *args, **kwargs):
        calls.append(url)
        raise AssertionError(f"unexpected network call to {url}")

    monkeypatch.setattr(requests, "get", _refuse)
    monkeypatch.setattr(requests, "post", _refuse)
    return calls

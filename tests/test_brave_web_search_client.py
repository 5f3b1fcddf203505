from typing import Any, Dict

import pytest
import requests

from term_ai.exceptions import ProviderDecodeError, ProviderHttpError, ProviderTimeoutError
from term_ai.search.abstract_search_client_interface import SearchResult
from term_ai.search.brave_web_search_client import BRAVE_API_URL, BraveWebSearchClient
from conftest import MockResponse

BRAVE_PAYLOAD: Dict[str, Any] = {
    "web": {
        "results": [
            {
                "title": "Node.js — Download",
                "url": "https://nodejs.org/en/download",
                "description": "Latest LTS Version: 24.11.0",
                "meta_url": {"host": "nodejs.org"},
            },
            {
                "title": "Missing url",
                "description": "should be skipped",
            },
            {
                "title": "node — Homebrew Formulae",
                "url": "https://formulae.brew.sh/formula/node",
            },
            {
                "title": "Third",
                "url": "https://example.com/3",
                "description": "third",
            },
        ]
    }
}


@pytest.fixture
def fake_get(monkeypatch):
    captured = {}

    def install(response=None, error=None):
        def _fake_get(url, headers=None, params=None, timeout=None):
            captured.update(url=url, headers=headers, params=params, timeout=timeout)
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(requests, "get", _fake_get)
        return captured

    return install


def test_requires_api_key():
    with pytest.raises(ValueError):
        BraveWebSearchClient(api_key="")


def test_maps_results_and_sends_credential_header(fake_get):
    captured = fake_get(MockResponse(200, payload=BRAVE_PAYLOAD))

    results = BraveWebSearchClient(api_key="test-key", timeout=9).search("latest node lts", max_results=5)

    assert captured["url"] == BRAVE_API_URL
    assert captured["headers"]["X-Subscription-Token"] == "test-key"
    assert captured["params"] == {"q": "latest node lts", "count": 5}
    assert captured["timeout"] == 9
    assert results == [
        SearchResult(title="Node.js — Download", url="https://nodejs.org/en/download",
                     snippet="Latest LTS Version: 24.11.0"),
        SearchResult(title="node — Homebrew Formulae", url="https://formulae.brew.sh/formula/node", snippet=""),
        SearchResult(title="Third", url="https://example.com/3", snippet="third"),
    ]


def test_truncates_to_max_results(fake_get):
    fake_get(MockResponse(200, payload=BRAVE_PAYLOAD))

    results = BraveWebSearchClient(api_key="test-key").search("node", max_results=1)

    assert [r.title for r in results] == ["Node.js — Download"]


def test_missing_web_section_is_empty(fake_get):
    fake_get(MockResponse(200, payload={"type": "search"}))

    assert BraveWebSearchClient(api_key="test-key").search("node", max_results=5) == []


def test_non_2xx_status_raises_http_error(fake_get):
    fake_get(MockResponse(401, payload={"error": "unauthorized"}))

    with pytest.raises(ProviderHttpError) as exc_info:
        BraveWebSearchClient(api_key="bad-key").search("node", max_results=5)
    assert str(exc_info.value) == "Brave API returned status 401"
    assert exc_info.value.provider == "brave"


def test_malformed_json_raises_decode_error(fake_get):
    fake_get(MockResponse(200, json_error=True))

    with pytest.raises(ProviderDecodeError) as exc_info:
        BraveWebSearchClient(api_key="test-key").search("node", max_results=5)
    assert exc_info.value.kind == "decode"


def test_timeout_raises_timeout_error(fake_get):
    fake_get(error=requests.Timeout("timed out"))

    with pytest.raises(ProviderTimeoutError):
        BraveWebSearchClient(api_key="test-key").search("node", max_results=5)

"""Brave Web Search client: JSON API, requires a subscription token.

Why: Brave's API returns clean structured results and is not subject to the
bot challenges the scraped DuckDuckGo page sometimes serves.  It is picked
automatically whenever a key is configured.
"""

import logging
import time
from typing import Any, Dict, List

import requests

from term_ai.exceptions import ProviderDecodeError, ProviderHttpError, ProviderTimeoutError
from term_ai.search.abstract_search_client_interface import (
    AbstractSearchClientInterface,
    SearchResult,
)

logger = logging.getLogger(__name__)

BRAVE_API_URL = "https://api.search.brave.com/res/v1/web/search"


def parse_brave_response_into_search_results(data: Dict[str, Any], max_results: int) -> List[SearchResult]:
    """Map ``web.results`` entries onto SearchResult, dropping untitled or url-less ones."""
    web = data.get("web") or {}
    raw_results = web.get("results") or []

    results: List[SearchResult] = []
    for item in raw_results[:max_results]:
        if not isinstance(item, dict):
            continue
        title = item.get("title") or ""
        url = item.get("url") or ""
        if title and url:
            results.append(SearchResult(title=title, url=url, snippet=item.get("description") or ""))
    return results


class BraveWebSearchClient(AbstractSearchClientInterface):
    """Brave Web Search over the direct HTTP API."""

    name = "brave"

    def __init__(self, api_key: str, timeout: int = 10):
        if not api_key:
            raise ValueError("BraveWebSearchClient requires an api_key")
        self.api_key = api_key
        self.timeout = timeout

    def search(self, query: str, max_results: int) -> List[SearchResult]:
        start_time = time.time()
        logger.info("Brave search: query=%s", query[:80])

        try:
            response = requests.get(
                BRAVE_API_URL,
                headers={"Accept": "application/json", "Accept-Encoding": "gzip",
                         "X-Subscription-Token": self.api_key},
                params={"q": query, "count": max_results},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise ProviderTimeoutError(
                f"Brave API request timed out after {self.timeout}s", provider=self.name
            ) from exc
        except requests.RequestException as exc:
            raise ProviderHttpError(f"Brave API request failed: {exc}", provider=self.name) from exc

        if not response.ok:
            raise ProviderHttpError(
                f"Brave API returned status {response.status_code}", provider=self.name
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderDecodeError(f"Brave API returned malformed JSON: {exc}", provider=self.name) from exc
        if not isinstance(data, dict):
            raise ProviderDecodeError("Brave API returned an unexpected JSON document", provider=self.name)

        results = parse_brave_response_into_search_results(data, max_results)

        elapsed_ms = int((time.time() - start_time) * 1000)
        top_titles = [r.title[:60] for r in results[:3]]
        logger.info("Brave search ok: elapsed_ms=%d query=%s results=%d top=%s",
                    elapsed_ms, query[:80], len(results), top_titles)
        return results

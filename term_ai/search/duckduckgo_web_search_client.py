"""DuckDuckGo Web Search client: free, no API key required.

Why: DuckDuckGo's HTML lite endpoint gives usable results without any
credential, so it is the default backend.  Results are scraped from the
``.result`` blocks with BeautifulSoup.

When DuckDuckGo serves a bot-challenge page instead of results, no block
matches and the client returns an empty list rather than failing: the model
can still rephrase the query or answer from its own knowledge.
"""

import logging
import re as _re
import time
from typing import List, Optional
from urllib.parse import unquote as _unquote

import requests
from bs4 import BeautifulSoup

from term_ai.exceptions import ProviderHttpError, ProviderTimeoutError
from term_ai.search.abstract_search_client_interface import (
    AbstractSearchClientInterface,
    SearchResult,
)

logger = logging.getLogger(__name__)

DUCKDUCKGO_HTML_SEARCH_URL = "https://html.duckduckgo.com/html/"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; term-ai/0.1)"

RESULT_SELECTOR = ".result"
TITLE_SELECTOR = ".result__title"
URL_SELECTOR = ".result__url"
SNIPPET_SELECTOR = ".result__snippet"


def _element_text(container, selector: str) -> str:
    element = container.select_one(selector)
    if element is None:
        return ""
    return element.get_text().strip()


def _resolve_result_url(container) -> str:
    """Prefer the real destination hidden in DuckDuckGo's redirect link."""
    element = container.select_one(URL_SELECTOR)
    if element is None:
        return ""
    # DuckDuckGo wraps URLs in a redirect: //duckduckgo.com/l/?uddg=<encoded_url>&...
    href = element.get("href") or ""
    uddg_match = _re.search(r"uddg=([^&]+)", href)
    if uddg_match:
        return _unquote(uddg_match.group(1))
    return element.get_text().strip()


def parse_duckduckgo_html_into_search_results(html_text: str, max_results: int) -> List[SearchResult]:
    """Parse DuckDuckGo HTML lite results into at most ``max_results`` records.

    Only the first ``max_results`` containers are considered; a container
    without a title or url yields nothing.
    """
    soup = BeautifulSoup(html_text, "lxml")
    results: List[SearchResult] = []
    for container in soup.select(RESULT_SELECTOR)[:max_results]:
        title = _element_text(container, TITLE_SELECTOR)
        url = _resolve_result_url(container)
        snippet = _element_text(container, SNIPPET_SELECTOR)
        if title and url:
            results.append(SearchResult(title=title, url=url, snippet=snippet))
    return results


class DuckDuckGoWebSearchClient(AbstractSearchClientInterface):
    """DuckDuckGo web search via the HTML lite endpoint: free, no API key."""

    name = "duckduckgo"

    def __init__(self, timeout: int = 10, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    def search(self, query: str, max_results: int) -> List[SearchResult]:
        """Send query to DuckDuckGo HTML lite and return parsed results."""
        start_time = time.time()
        logger.info("DuckDuckGo search: query=%s", query[:80])

        try:
            response = requests.get(
                DUCKDUCKGO_HTML_SEARCH_URL,
                params={"q": query},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise ProviderTimeoutError(
                f"DuckDuckGo request timed out after {self.timeout}s", provider=self.name
            ) from exc
        except requests.RequestException as exc:
            raise ProviderHttpError(f"DuckDuckGo request failed: {exc}", provider=self.name) from exc

        if not response.ok:
            raise ProviderHttpError(
                f"DuckDuckGo returned status {response.status_code}", provider=self.name
            )

        results = parse_duckduckgo_html_into_search_results(response.text, max_results)

        elapsed_ms = int((time.time() - start_time) * 1000)
        top_titles = [r.title[:60] for r in results[:3]]
        if not results:
            logger.info("DuckDuckGo returned no result blocks (possibly a bot challenge): query=%s",
                        query[:80])
        logger.info("DuckDuckGo search ok: elapsed_ms=%d query=%s results=%d top=%s",
                    elapsed_ms, query[:80], len(results), top_titles)
        return results

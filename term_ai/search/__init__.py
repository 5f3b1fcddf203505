"""Search package: provider interface, the two backends, and the resolver."""

from term_ai.search.abstract_search_client_interface import (
    AbstractSearchClientInterface,
    SearchProvider,
    SearchResult,
)
from term_ai.search.brave_web_search_client import BraveWebSearchClient
from term_ai.search.duckduckgo_web_search_client import DuckDuckGoWebSearchClient
from term_ai.search.search_provider_resolver import (
    ProviderSelection,
    resolve_provider_selection,
    resolve_search_provider,
)

__all__ = [
    "AbstractSearchClientInterface",
    "SearchProvider",
    "SearchResult",
    "BraveWebSearchClient",
    "DuckDuckGoWebSearchClient",
    "ProviderSelection",
    "resolve_provider_selection",
    "resolve_search_provider",
]

"""Pick the search backend from explicit choice and available credential.

Decision order (first match wins):

  1. choice ``duckduckgo`` / ``ddg``          -> DuckDuckGo
  2. choice ``brave`` with a credential       -> Brave
  3. choice ``brave`` without a credential    -> ConfigError
  4. no choice, credential present            -> Brave (auto-detect)
  5. no choice, no credential                 -> DuckDuckGo (default)
  6. any other choice                         -> ConfigError

Resolution has no side effects: building a client does not touch the network.
"""

from dataclasses import dataclass
from typing import Optional

from term_ai.exceptions import ConfigError
from term_ai.search.abstract_search_client_interface import SearchProvider
from term_ai.search.brave_web_search_client import BraveWebSearchClient
from term_ai.search.duckduckgo_web_search_client import DuckDuckGoWebSearchClient

DUCKDUCKGO_PROVIDER_NAMES = frozenset({"duckduckgo", "ddg"})
BRAVE_PROVIDER_NAME = "brave"


@dataclass(frozen=True)
class ProviderSelection:
    """Provider inputs captured once, before the loop starts."""

    explicit_choice: Optional[str] = None
    credential: Optional[str] = None


def _normalize_choice(explicit_choice: Optional[str]) -> Optional[str]:
    if explicit_choice is None:
        return None
    choice = explicit_choice.strip().lower()
    return choice or None


def resolve_search_provider(
    explicit_choice: Optional[str],
    credential: Optional[str],
    timeout: int = 10,
) -> SearchProvider:
    """Return the provider instance for the given choice and credential."""
    choice = _normalize_choice(explicit_choice)
    has_credential = bool(credential)

    if choice in DUCKDUCKGO_PROVIDER_NAMES:
        return DuckDuckGoWebSearchClient(timeout=timeout)
    if choice == BRAVE_PROVIDER_NAME:
        if has_credential:
            return BraveWebSearchClient(api_key=credential, timeout=timeout)
        raise ConfigError(
            "credential required for this provider: brave needs an API key "
            "(use --brave-api-key or BRAVE_API_KEY)"
        )
    if choice is None:
        if has_credential:
            return BraveWebSearchClient(api_key=credential, timeout=timeout)
        return DuckDuckGoWebSearchClient(timeout=timeout)
    raise ConfigError(f"unknown provider: {explicit_choice} (valid options: duckduckgo, ddg, brave)")


def resolve_provider_selection(selection: ProviderSelection, timeout: int = 10) -> SearchProvider:
    return resolve_search_provider(selection.explicit_choice, selection.credential, timeout=timeout)

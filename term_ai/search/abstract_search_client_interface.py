"""Abstract search interface: all search backends implement this contract.

Why: The tool-calling loop only needs ``search(query, max_results)``.  Swap
DuckDuckGo / Brave without touching the loop.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Dict, List


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit, identical in shape for every provider."""

    title: str
    url: str
    snippet: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class AbstractSearchClientInterface(ABC):
    """Contract every search backend must fulfil."""

    name: str = ""

    @abstractmethod
    def search(self, query: str, max_results: int) -> List[SearchResult]:
        """Run a web search.

        Returns at most ``max_results`` results, best first.  Raises a
        ``ProviderError`` subclass on http, decode or timeout failures.
        """
        ...


# Short alias used by the loop and the resolver
SearchProvider = AbstractSearchClientInterface

"""Verbose trace of the searches made while answering one request.

The collector is filled from inside the tool-calling loop and only read once
the model has produced its final answer.  Rendering is pure post-processing:
nothing recorded here is ever sent back to the model.

Rendered layout::

    Searched for: rust latest stable version
    Sources:
    1. Rust Blog - https://blog.rust-lang.org/
       Announcing Rust 1.93.0 ...

    1.93.0
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from term_ai.search.abstract_search_client_interface import SearchResult

NO_SEARCH_SENTINEL = "no search required"
NO_SOURCES_SENTINEL = "N/A"
MAX_SUMMARIES_PER_SEARCH = 3
SNIPPET_CHAR_LIMIT = 100


@dataclass(frozen=True)
class ResultSummary:
    title: str
    url: str
    snippet: str

    @classmethod
    def from_result(cls, result: SearchResult) -> "ResultSummary":
        snippet = result.snippet
        if len(snippet) > SNIPPET_CHAR_LIMIT:
            snippet = snippet[:SNIPPET_CHAR_LIMIT].rstrip() + "..."
        return cls(title=result.title, url=result.url, snippet=snippet)


class VerboseSearchTraceCollector:
    """Append-only record of (query, top result summaries) pairs."""

    def __init__(self) -> None:
        self._entries: List[Tuple[str, Tuple[ResultSummary, ...]]] = []

    def record_query(self, query: str) -> None:
        self._entries.append((query, ()))

    def record_results(self, results: Iterable[SearchResult]) -> None:
        """Attach summaries of the top results to the most recent query."""
        if not self._entries:
            return
        query, _ = self._entries[-1]
        summaries = tuple(ResultSummary.from_result(r) for r in list(results)[:MAX_SUMMARIES_PER_SEARCH])
        self._entries[-1] = (query, summaries)

    @property
    def queries(self) -> List[str]:
        return [query for query, _ in self._entries]

    @property
    def summaries(self) -> List[ResultSummary]:
        return [summary for _, group in self._entries for summary in group]

    @property
    def has_searches(self) -> bool:
        return bool(self._entries)

    def render(self, answer: str) -> str:
        queries = self.queries
        searched_line = "Searched for: " + ("; ".join(queries) if queries else NO_SEARCH_SENTINEL)

        summaries = self.summaries
        if summaries:
            source_lines = ["Sources:"]
            for idx, summary in enumerate(summaries, 1):
                source_lines.append(f"{idx}. {summary.title} - {summary.url}")
                if summary.snippet:
                    source_lines.append(f"   {summary.snippet}")
        else:
            source_lines = [f"Sources: {NO_SOURCES_SENTINEL}"]

        return "\n".join([searched_line, *source_lines, "", answer])

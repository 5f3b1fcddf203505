"""The ``web_search`` tool: the only tool offered to the model.

Wraps a resolved search provider.  Every query is recorded in the verbose
trace collector before the provider is called, so failed searches still
show up in the trace.
"""

import json
import logging
from typing import Any, Optional

from term_ai.agent.tool_base_and_registry import ToolBase
from term_ai.search.abstract_search_client_interface import SearchProvider
from term_ai.utils.verbose_search_trace_collector import VerboseSearchTraceCollector

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL_NAME = "web_search"


class WebSearchTool(ToolBase):
    """Search the web through the configured provider."""

    name = WEB_SEARCH_TOOL_NAME
    description = (
        "Search the web for current information, latest versions, recent documentation, "
        "or up-to-date facts. Use this when you need information that may have changed "
        "recently or when the user asks about 'latest' or 'current' versions."
    )
    parameters_schema = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "The search query to execute",
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        provider: SearchProvider,
        max_results: int = 5,
        trace_collector: Optional[VerboseSearchTraceCollector] = None,
    ) -> None:
        self._provider = provider
        self._max_results = max_results
        self._trace_collector = trace_collector

    def execute(self, query: str = "", **kwargs: Any) -> str:
        """Run the search and return results as a pretty-printed JSON array."""
        if self._trace_collector is not None:
            self._trace_collector.record_query(query)

        results = self._provider.search(query, self._max_results)

        if self._trace_collector is not None:
            self._trace_collector.record_results(results)
        logger.debug("web_search via %s: query=%s results=%d",
                     getattr(self._provider, "name", "?"), query[:80], len(results))
        return json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)

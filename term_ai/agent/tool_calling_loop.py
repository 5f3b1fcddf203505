"""Tool-calling loop: drives the model through web searches to a final answer.

Each iteration sends the whole conversation plus the tool schema to the chat
endpoint.  A reply with tool calls has every call executed in the order the
model emitted it, one at a time, with the results appended before the next
request.  A reply without tool calls is the answer.  The loop gives up after
``max_iterations`` requests.

Provider failures never abort the loop: they become the tool result text so
the model can rephrase or answer without search results.  Model-server
failures and malformed tool calls do abort it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from term_ai.agent.conversation_state import (
    AssistantTextTurn,
    AssistantToolCallTurn,
    ConversationState,
    ToolCall,
    ToolResultTurn,
)
from term_ai.agent.tool_base_and_registry import ToolRegistry
from term_ai.agent.web_search_tools import WebSearchTool
from term_ai.exceptions import IterationLimitExceededError
from term_ai.llm.client import LLMClient
from term_ai.search.abstract_search_client_interface import SearchProvider
from term_ai.utils.verbose_search_trace_collector import VerboseSearchTraceCollector

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MAX_ITERATIONS = 10
DEFAULT_MAX_RESULTS = 5


@dataclass
class FinalAnswer:
    """Outcome of one loop run.

    ``text`` is what the caller should print: the bare ``answer``, or the
    rendered trace followed by the answer when verbose output was requested
    and at least one search ran.
    """

    text: str
    answer: str
    trace: VerboseSearchTraceCollector
    iterations: int
    tool_calls_count: int


# ---------------------------------------------------------------------------
# Registry builder
# ---------------------------------------------------------------------------

def _build_tool_registry(
    provider: SearchProvider,
    max_results: int,
    trace_collector: VerboseSearchTraceCollector,
) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_tool(WebSearchTool(provider, max_results=max_results, trace_collector=trace_collector))
    return registry


# ---------------------------------------------------------------------------
# Main loop
# ---------------------------------------------------------------------------

def run_tool_calling_loop(
    user_request: str,
    llm_client: LLMClient,
    provider: SearchProvider,
    max_results: int = DEFAULT_MAX_RESULTS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    verbose: bool = False,
    trace_collector: Optional[VerboseSearchTraceCollector] = None,
) -> FinalAnswer:
    """Run the conversation until the model answers without tool calls.

    Args:
        user_request: The natural-language request.
        llm_client: Client for the model server's chat endpoint.
        provider: Resolved search provider backing ``web_search``.
        max_results: Maximum results per search.
        max_iterations: Maximum number of chat requests.
        verbose: Prefix the answer with the search trace.
        trace_collector: Collector to fill; a fresh one is created if omitted.

    Raises:
        IterationLimitExceededError: the model was still calling tools after
            ``max_iterations`` requests.
        MalformedToolCallError: a ``web_search`` call had no usable query.
        ModelServerError: the chat endpoint failed.
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be positive")
    if max_results < 1:
        raise ValueError("max_results must be positive")

    start_time = time.time()
    if trace_collector is None:
        trace_collector = VerboseSearchTraceCollector()
    conversation = ConversationState(user_request)
    registry = _build_tool_registry(provider, max_results, trace_collector)
    tools = registry.generate_tool_schemas()
    tool_calls_count = 0

    for iteration in range(max_iterations):
        reply = llm_client.chat(conversation.to_messages(), tools)

        if not reply.has_tool_calls:
            conversation.append(AssistantTextTurn(reply.content))
            answer = reply.content
            text = trace_collector.render(answer) if verbose and trace_collector.has_searches else answer
            logger.info("ToolLoop done: iterations=%d tool_calls=%d elapsed_ms=%d",
                        iteration + 1, tool_calls_count, int((time.time() - start_time) * 1000))
            return FinalAnswer(
                text=text,
                answer=answer,
                trace=trace_collector,
                iterations=iteration + 1,
                tool_calls_count=tool_calls_count,
            )

        calls = tuple(
            ToolCall.from_wire(raw, fallback_id=f"call_{iteration}_{idx}")
            for idx, raw in enumerate(reply.tool_calls)
        )
        conversation.append(AssistantToolCallTurn(calls))
        logger.info("ToolLoop iter %d: tool_calls=%s", iteration + 1, [c.tool_name for c in calls])

        for call in calls:
            payload = registry.execute_tool_by_name(call.tool_name, call.arguments)
            conversation.append(ToolResultTurn(call_id=call.id, payload=payload, tool_name=call.tool_name))
            tool_calls_count += 1

    logger.warning("ToolLoop gave up: max_iterations=%d tool_calls=%d", max_iterations, tool_calls_count)
    raise IterationLimitExceededError(max_iterations)

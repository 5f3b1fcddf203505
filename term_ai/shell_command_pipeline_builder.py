"""Standalone command-generation pipeline: decoupled from the console.

Why: The same wiring (settings -> search provider -> model client -> loop)
is used by the CLI and by anything embedding term-ai as a library.

Usage::

    from term_ai.config import load_settings
    from term_ai.shell_command_pipeline_builder import build_shell_command_pipeline, generate_shell_commands
    pipeline = build_shell_command_pipeline(load_settings(overrides={"websearch": True}))
    print(generate_shell_commands(pipeline, "install the latest node LTS"))
"""

import logging
import time
from typing import Optional

from term_ai.agent.prompt_builder import build_single_shot_prompt
from term_ai.agent.tool_calling_loop import (
    DEFAULT_MAX_ITERATIONS,
    FinalAnswer,
    run_tool_calling_loop,
)
from term_ai.config import Settings
from term_ai.llm.client import LLMClient, OllamaClient
from term_ai.search.abstract_search_client_interface import SearchProvider
from term_ai.search.search_provider_resolver import resolve_search_provider

logger = logging.getLogger(__name__)


class ShellCommandPipeline:
    """Holds all wired components needed to answer a request."""

    def __init__(self, settings: Settings, llm: LLMClient, search: Optional[SearchProvider] = None):
        self.settings = settings
        self.llm = llm
        self.search = search


def build_shell_command_pipeline(
    settings: Settings,
    llm_client: Optional[LLMClient] = None,
    search_provider: Optional[SearchProvider] = None,
) -> ShellCommandPipeline:
    """Factory: resolve the search provider and create the model client.

    The provider is resolved first so configuration errors surface before
    anything talks to the network.  Override ``llm_client`` /
    ``search_provider`` for testing.
    """
    if settings.websearch and search_provider is None:
        search_provider = resolve_search_provider(
            settings.search_provider,
            settings.brave_api_key,
            timeout=settings.search_timeout,
        )
        logger.info("Search provider: %s", search_provider.name)

    if llm_client is None:
        llm_client = OllamaClient.from_settings(settings)

    return ShellCommandPipeline(settings=settings, llm=llm_client, search=search_provider)


def generate_shell_commands(pipeline: ShellCommandPipeline, user_request: str) -> str:
    """Return the text to print for ``user_request``."""
    start_time = time.time()
    settings = pipeline.settings
    logger.info("Pipeline: request=%s websearch=%s", user_request[:100], settings.websearch)

    if settings.websearch:
        result = run_tool_calling_loop(
            user_request,
            pipeline.llm,
            pipeline.search,
            max_results=settings.max_results,
            max_iterations=settings.max_iterations,
            verbose=settings.verbose,
        )
        text = result.text
    else:
        text = pipeline.llm.generate(build_single_shot_prompt(user_request))

    logger.info("Pipeline: elapsed=%.1fs", time.time() - start_time)
    return text


def run(
    user_request: str,
    model: str,
    endpoint: str,
    provider: SearchProvider,
    max_results: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    verbose: bool = False,
    llm_client: Optional[LLMClient] = None,
) -> FinalAnswer:
    """One-call entry point: talk to ``model`` at ``endpoint`` using ``provider``."""
    if llm_client is None:
        llm_client = OllamaClient(endpoint=endpoint, model=model)
    return run_tool_calling_loop(
        user_request,
        llm_client,
        provider,
        max_results=max_results,
        max_iterations=max_iterations,
        verbose=verbose,
    )

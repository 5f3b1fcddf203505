"""Command-line interface: ``term-ai "install redis"``.

Why: Thin shell over the pipeline.  Any failure becomes one ``Error: ...``
line on stderr and exit status 1.
"""

import argparse
import sys
from typing import List, Optional, TextIO

from term_ai import __version__
from term_ai.config import load_settings
from term_ai.exceptions import TermAiError
from term_ai.shell_command_pipeline_builder import build_shell_command_pipeline, generate_shell_commands
from term_ai.utils.logger_config import configure_logging, get_logger

logger = get_logger("console")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="term-ai",
        description="Query a local Ollama server for shell commands",
    )
    parser.add_argument("prompt", nargs="?", default=None, metavar="PROMPT",
                        help="The natural language request (read from stdin when omitted)")
    parser.add_argument("-m", "--model", default=None,
                        help="Model name (default: llama3.2, or TERM_AI_MODEL)")
    parser.add_argument("-e", "--endpoint", default=None,
                        help="Ollama endpoint URL (default: http://localhost:11434)")
    parser.add_argument("-w", "--websearch", "--ws", action="store_true", default=None,
                        help="Enable web search through tool calling")
    parser.add_argument("--search-provider", default=None, metavar="NAME",
                        help="Search provider: duckduckgo (ddg) or brave. "
                             "Auto-detects brave when BRAVE_API_KEY is set.")
    parser.add_argument("--brave-api-key", default=None, metavar="KEY",
                        help="Brave API key (or BRAVE_API_KEY)")
    parser.add_argument("--max-results", type=int, default=None, metavar="N",
                        help="Maximum number of search results per query (default: 5)")
    parser.add_argument("--max-iterations", type=int, default=None, metavar="N",
                        help="Maximum number of model round-trips in web search mode (default: 10)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="Show the searches made and their sources before the answer")
    parser.add_argument("--config", default=None, metavar="PATH",
                        help="YAML config file (default: ~/.config/term-ai/config.yaml)")
    parser.add_argument("--log-level", default=None, metavar="LEVEL",
                        help="Logging level for stderr diagnostics (default: ERROR)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def read_user_prompt(cli_prompt: Optional[str], stdin: TextIO) -> str:
    """Prompt from the argument if given, else from stdin."""
    if cli_prompt is not None:
        return cli_prompt

    try:
        text = stdin.read().strip()
    except UnicodeDecodeError as exc:
        raise TermAiError(f"cannot read prompt from stdin: {exc}") from exc
    if not text:
        raise TermAiError("No prompt provided via argument or stdin")
    return text


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    args = parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    configure_logging(args.log_level or "ERROR", stream=stderr)
    try:
        settings = load_settings(
            config_path=args.config,
            overrides={
                "model": args.model,
                "endpoint": args.endpoint,
                "websearch": args.websearch,
                "search_provider": args.search_provider,
                "brave_api_key": args.brave_api_key,
                "max_results": args.max_results,
                "max_iterations": args.max_iterations,
                "verbose": args.verbose,
                "log_level": args.log_level,
            },
        )
        configure_logging(settings.log_level, stream=stderr)
        user_prompt = read_user_prompt(args.prompt, stdin)
        pipeline = build_shell_command_pipeline(settings)
        text = generate_shell_commands(pipeline, user_prompt)
    except (TermAiError, OSError) as exc:
        logger.debug("Fatal error", exc_info=True)
        message = " ".join(str(exc).splitlines())
        print(f"Error: {message}", file=stderr)
        return 1

    print(text, file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())

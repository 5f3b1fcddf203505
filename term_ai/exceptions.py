"""Exception hierarchy for term-ai.

Three families matter to callers:

  - ``ConfigError``   bad or missing configuration, raised before any network call
  - ``ProviderError`` a search backend failed (absorbed by the tool-calling loop)
  - ``EngineError``   the conversation with the model server cannot continue

Everything derives from ``TermAiError`` so the console entry point can turn
any of them into a single error line.
"""

from typing import Optional


class TermAiError(Exception):
    """Base class for all term-ai errors."""

    pass


class ConfigError(TermAiError):
    """Invalid or incomplete configuration."""

    pass


# ---------------------------------------------------------------------------
# Search provider errors
# ---------------------------------------------------------------------------

class ProviderError(TermAiError):
    """Search backend failure."""

    kind = "provider"

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.message = message
        self.provider = provider


class ProviderHttpError(ProviderError):
    """Non-2xx status or transport failure talking to a search backend."""

    kind = "http"


class ProviderDecodeError(ProviderError):
    """Search backend answered with a body that could not be decoded."""

    kind = "decode"


class ProviderTimeoutError(ProviderError):
    """Search backend did not answer within the timeout."""

    kind = "timeout"


# ---------------------------------------------------------------------------
# Engine errors
# ---------------------------------------------------------------------------

class EngineError(TermAiError):
    """The tool-calling engine cannot produce an answer."""

    kind = "engine"


class MalformedToolCallError(EngineError):
    """A tool call is missing required arguments or carries undecodable ones."""

    kind = "malformed_tool_call"


class IterationLimitExceededError(EngineError):
    """The model kept requesting tools past the iteration bound."""

    kind = "iteration_limit_exceeded"

    def __init__(self, max_iterations: int):
        super().__init__(
            f"Maximum iterations ({max_iterations}) exceeded. "
            "The model may be stuck in a tool-calling loop."
        )
        self.max_iterations = max_iterations


class ModelServerError(EngineError):
    """The model server failed (http, decode or timeout)."""

    def __init__(self, message: str, kind: str = "http", status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class UnsupportedToolsError(ModelServerError):
    """The selected model rejected the tool schema."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, kind="unsupported_tools", status_code=status_code)

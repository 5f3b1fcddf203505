"""term-ai: turn natural-language requests into shell commands via a local Ollama model."""

__version__ = "0.1.0"

"""Settings loader for term-ai.

Sources, highest priority first:

  1. explicit overrides (command-line flags)
  2. environment variables (``TERM_AI_MODEL``, ``BRAVE_API_KEY``, ...)
  3. YAML config file (``--config``, ``TERM_AI_CONFIG`` or ~/.config/term-ai/config.yaml)
  4. built-in defaults

Settings are loaded once per process and are immutable afterwards.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from term_ai.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "term-ai" / "config.yaml"

# Environment variable -> settings field
ENVIRONMENT_VARIABLES = {
    "TERM_AI_MODEL": "model",
    "TERM_AI_ENDPOINT": "endpoint",
    "TERM_AI_SEARCH_PROVIDER": "search_provider",
    "BRAVE_API_KEY": "brave_api_key",
    "TERM_AI_MAX_RESULTS": "max_results",
    "TERM_AI_LOG_LEVEL": "log_level",
}

_INTEGER_FIELDS = ("max_results", "max_iterations", "model_timeout", "search_timeout")
_BOOLEAN_FIELDS = ("websearch", "verbose")
_REQUIRED_STRING_FIELDS = ("model", "endpoint", "log_level")


@dataclass(frozen=True)
class Settings:
    model: str = "llama3.2"
    endpoint: str = "http://localhost:11434"
    websearch: bool = False
    search_provider: Optional[str] = None
    brave_api_key: Optional[str] = None
    max_results: int = 5
    max_iterations: int = 10
    verbose: bool = False
    log_level: str = "ERROR"
    model_timeout: int = 30
    search_timeout: int = 10


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return number


def _as_non_empty_str(name: str, value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{name} must be a string, got {type(value).__name__}")
    text = str(value).strip()
    if not text:
        raise ConfigError(f"{name} must not be empty")
    return text


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def _resolve_config_path(config_path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    explicit = config_path or environ.get("TERM_AI_CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        return path
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_settings(
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge defaults, config file, environment and overrides into ``Settings``.

    ``None`` values in ``overrides`` mean "not given" and do not mask lower
    priority sources.
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(Settings)}
    merged: Dict[str, Any] = {}

    path = _resolve_config_path(config_path, environ)
    if path is not None:
        file_values = _load_yaml(path)
        ignored = sorted(set(file_values) - known)
        if ignored:
            logger.warning("Ignoring unknown config keys in %s: %s", path, ignored)
        merged.update({k: v for k, v in file_values.items() if k in known and v is not None})
        logger.debug("Loaded config file %s", path)

    for env_name, field_name in ENVIRONMENT_VARIABLES.items():
        value = environ.get(env_name)
        if value:
            merged[field_name] = value

    for key, value in (overrides or {}).items():
        if key in known and value is not None:
            merged[key] = value

    for name in _INTEGER_FIELDS:
        if name in merged:
            merged[name] = _as_positive_int(name, merged[name])
    for name in _BOOLEAN_FIELDS:
        if name in merged:
            merged[name] = _as_bool(merged[name])
    for name in _REQUIRED_STRING_FIELDS:
        if name in merged:
            merged[name] = _as_non_empty_str(name, merged[name])
    for name in ("search_provider", "brave_api_key"):
        if name in merged:
            merged[name] = str(merged[name]).strip() or None
    # Placeholder left over from the example config
    if (merged.get("brave_api_key") or "").startswith("YOUR_"):
        merged["brave_api_key"] = None

    return Settings(**merged)

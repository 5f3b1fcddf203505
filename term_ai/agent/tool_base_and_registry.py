"""Tool base class and registry for the tool-calling loop.

Why: Each tool is a self-contained class carrying its own name, description,
parameter schema and execution logic.  The registry turns them into the
``tools`` array the chat endpoint expects and dispatches calls by name, so
the loop never needs to know which tools exist.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from term_ai.exceptions import MalformedToolCallError, ProviderError

logger = logging.getLogger(__name__)

TOOL_ERROR_PREFIX = "Error executing tool: "


# ---------------------------------------------------------------------------
# Abstract base class
# ---------------------------------------------------------------------------

class ToolBase(ABC):
    """Abstract base class for all model-callable tools."""

    name: str = ""
    description: str = ""
    parameters_schema: Dict[str, Any] = {}

    def validate_parameters(self, params: Dict[str, Any]) -> List[str]:
        """Validate tool parameters against the declared schema.

        Required string parameters must also be non-blank.  Returns a list of
        error strings (empty if valid).
        """
        errors: List[str] = []
        schema = self.parameters_schema
        if not schema:
            return errors

        required = schema.get("required", [])
        properties = schema.get("properties", {})

        for key in required:
            if key not in params:
                errors.append(f"missing required parameter: {key}")

        for key, value in params.items():
            if key in properties:
                prop_schema = properties[key]
                expected_type = prop_schema.get("type", "")
                if expected_type == "string" and not isinstance(value, str):
                    errors.append(f"parameter '{key}' must be a string, got {type(value).__name__}")
                elif expected_type == "string" and key in required and not value.strip():
                    errors.append(f"parameter '{key}' must not be empty")
                elif expected_type == "integer" and not isinstance(value, int):
                    errors.append(f"parameter '{key}' must be an integer, got {type(value).__name__}")

        return errors

    @abstractmethod
    def execute(self, **kwargs: Any) -> str:
        """Execute the tool and return the payload shown to the model."""
        ...

    def to_schema(self) -> Dict[str, Any]:
        """Chat-endpoint tool definition for this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema,
            },
        }


# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

class ToolRegistry:
    """Registry for managing and executing tools."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolBase] = {}

    def register_tool(self, tool: ToolBase) -> None:
        """Register a tool instance by its name."""
        if not tool.name:
            raise ValueError(f"Tool {type(tool).__name__} has no name")
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def generate_tool_schemas(self) -> List[Dict[str, Any]]:
        return [tool.to_schema() for tool in self._tools.values()]

    def validate_tool_call(self, name: str, args: Dict[str, Any]) -> None:
        """Raise MalformedToolCallError when a known tool gets bad arguments.

        Unknown tool names pass: they are reported back to the model by
        ``execute_tool_by_name`` instead.
        """
        tool = self._tools.get(name)
        if tool is None:
            return
        validation_errors = tool.validate_parameters(args)
        if validation_errors:
            raise MalformedToolCallError(f"invalid arguments for {name}: {'; '.join(validation_errors)}")

    def execute_tool_by_name(self, name: str, args: Dict[str, Any]) -> str:
        """Validate parameters and execute a tool by name.

        Returns the tool payload, or an error string for an unknown tool or a
        failed provider.  Malformed arguments raise.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Model requested unknown tool: %s", name)
            return f"{TOOL_ERROR_PREFIX}Unknown tool: {name}"

        self.validate_tool_call(name, args)

        # Only declared parameters reach execute(); the model picks the keys
        declared = tool.parameters_schema.get("properties", {})
        ignored = sorted(key for key in args if key not in declared)
        if ignored:
            logger.warning("Ignoring undeclared arguments for %s: %s", name, ignored)
        call_args = {key: value for key, value in args.items() if key in declared}

        try:
            return tool.execute(**call_args)
        except ProviderError as exc:
            logger.warning("Tool execution error: %s(%s): %s", name, args, exc)
            return f"{TOOL_ERROR_PREFIX}{exc}"

"""Tool-calling agent: conversation state, tools, prompts and the loop."""

from term_ai.agent.conversation_state import (
    AssistantTextTurn,
    AssistantToolCallTurn,
    ConversationState,
    SystemTurn,
    ToolCall,
    ToolResultTurn,
    UserTurn,
)
from term_ai.agent.tool_calling_loop import FinalAnswer, run_tool_calling_loop

__all__ = [
    "AssistantTextTurn",
    "AssistantToolCallTurn",
    "ConversationState",
    "SystemTurn",
    "ToolCall",
    "ToolResultTurn",
    "UserTurn",
    "FinalAnswer",
    "run_tool_calling_loop",
]

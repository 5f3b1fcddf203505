"""Conversation state for one tool-calling run.

The state is an append-only list of turns:

    0  SystemTurn               fixed instruction, never replaceable
    1  UserTurn                 the original request
    .. AssistantToolCallTurn    followed by one ToolResultTurn per call, in order
    .. AssistantTextTurn        the final answer

``ConversationState`` enforces that ordering on every append, and refuses to
be sent to the model while tool results are still outstanding.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from term_ai.agent.prompt_builder import build_websearch_system_instruction
from term_ai.exceptions import MalformedToolCallError


@dataclass(frozen=True)
class ToolCall:
    id: str
    tool_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, raw: Any, fallback_id: str) -> "ToolCall":
        """Build from a model-server ``tool_calls`` entry.

        Arguments may arrive as an object or as a JSON-encoded string.
        """
        if not isinstance(raw, dict):
            raise MalformedToolCallError(f"tool call is not an object: {raw!r}")
        function = raw.get("function")
        if not isinstance(function, dict):
            raise MalformedToolCallError("tool call has no 'function' object")

        arguments = function.get("arguments")
        if arguments is None or arguments == "":
            arguments = {}
        elif isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except ValueError as exc:
                raise MalformedToolCallError(f"tool call arguments are not valid JSON: {exc}") from exc
        if not isinstance(arguments, dict):
            raise MalformedToolCallError("tool call arguments must be an object")

        return cls(
            id=str(raw.get("id") or fallback_id),
            tool_name=str(function.get("name") or ""),
            arguments=arguments,
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class SystemTurn:
    instruction: str

    def to_message(self) -> Dict[str, Any]:
        return {"role": "system", "content": self.instruction}


@dataclass(frozen=True)
class UserTurn:
    text: str

    def to_message(self) -> Dict[str, Any]:
        return {"role": "user", "content": self.text}


@dataclass(frozen=True)
class AssistantTextTurn:
    text: str

    def to_message(self) -> Dict[str, Any]:
        return {"role": "assistant", "content": self.text}


@dataclass(frozen=True)
class AssistantToolCallTurn:
    calls: Tuple[ToolCall, ...]

    def to_message(self) -> Dict[str, Any]:
        return {
            "role": "assistant",
            "content": "",
            "tool_calls": [call.to_wire() for call in self.calls],
        }


@dataclass(frozen=True)
class ToolResultTurn:
    call_id: str
    payload: str
    tool_name: str = ""

    def to_message(self) -> Dict[str, Any]:
        message = {"role": "tool", "content": self.payload, "tool_call_id": self.call_id}
        if self.tool_name:
            message["tool_name"] = self.tool_name
        return message


Turn = Union[SystemTurn, UserTurn, AssistantTextTurn, AssistantToolCallTurn, ToolResultTurn]


class ConversationState:
    """Append-only turn log seeded with the fixed system turn and the user turn."""

    def __init__(self, user_request: str) -> None:
        self._turns: List[Turn] = [
            SystemTurn(build_websearch_system_instruction()),
            UserTurn(user_request),
        ]
        self._pending_call_ids: List[str] = []

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def pending_call_ids(self) -> Tuple[str, ...]:
        return tuple(self._pending_call_ids)

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, turn: Turn) -> None:
        if isinstance(turn, (SystemTurn, UserTurn)):
            raise ValueError(f"{type(turn).__name__} can only appear at the start of a conversation")

        if isinstance(turn, ToolResultTurn):
            if not self._pending_call_ids:
                raise ValueError(f"tool result {turn.call_id!r} has no matching tool call")
            expected = self._pending_call_ids[0]
            if turn.call_id != expected:
                raise ValueError(f"tool result {turn.call_id!r} out of order, expected {expected!r}")
            self._pending_call_ids.pop(0)
        elif self._pending_call_ids:
            raise ValueError(
                f"{len(self._pending_call_ids)} tool result(s) outstanding before {type(turn).__name__}"
            )

        if isinstance(turn, AssistantToolCallTurn):
            if not turn.calls:
                raise ValueError("AssistantToolCallTurn needs at least one call")
            self._pending_call_ids.extend(call.id for call in turn.calls)

        self._turns.append(turn)

    def last_answer(self) -> Optional[str]:
        last = self._turns[-1]
        return last.text if isinstance(last, AssistantTextTurn) else None

    def to_messages(self) -> List[Dict[str, Any]]:
        """Serialize for the chat endpoint; refuses while tool results are outstanding."""
        if self._pending_call_ids:
            raise ValueError(
                f"cannot send conversation with {len(self._pending_call_ids)} tool result(s) outstanding"
            )
        return [turn.to_message() for turn in self._turns]

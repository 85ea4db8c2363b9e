"""
Conversation state shared by the orchestration loop and inference providers.

A conversation is an ordered list of turns. The one structural rule is
that an assistant turn requesting tool calls must be answered by exactly
one ``ToolResultsTurn`` holding one result per call, in call order, before
anything else is appended.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union


class ConversationStateError(RuntimeError):
    """A turn was appended that breaks the tool call/result pairing."""


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    """The answer to one tool call."""

    call_id: str
    content: str
    is_error: bool = False


@dataclass(frozen=True)
class UserTurn:
    text: str


@dataclass(frozen=True)
class AssistantTurn:
    text: str = ""
    tool_calls: tuple[ToolCall, ...] = ()


@dataclass(frozen=True)
class ToolResultsTurn:
    results: tuple[ToolResult, ...] = ()


Turn = Union[UserTurn, AssistantTurn, ToolResultsTurn]


class Conversation:
    """Ordered turns with tool call/result pairing enforced."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    @property
    def turns(self) -> list[Turn]:
        """A copy of the turns, oldest first."""
        return list(self._turns)

    @property
    def pending_tool_calls(self) -> tuple[ToolCall, ...]:
        """Tool calls of the last assistant turn that have no results yet."""
        if self._turns and isinstance(self._turns[-1], AssistantTurn):
            return self._turns[-1].tool_calls
        return ()

    def _check_nothing_pending(self, what: str) -> None:
        pending = self.pending_tool_calls
        if pending:
            ids = ", ".join(call.id for call in pending)
            raise ConversationStateError(
                f"Cannot append {what}: tool calls {ids} have no results"
            )

    def add_user(self, text: str) -> UserTurn:
        self._check_nothing_pending("user turn")
        turn = UserTurn(text=text)
        self._turns.append(turn)
        return turn

    def add_assistant(
        self, text: str = "", tool_calls: Optional[list[ToolCall]] = None
    ) -> AssistantTurn:
        self._check_nothing_pending("assistant turn")
        turn = AssistantTurn(text=text, tool_calls=tuple(tool_calls or ()))
        self._turns.append(turn)
        return turn

    def add_tool_results(self, results: list[ToolResult]) -> ToolResultsTurn:
        """Answer every pending tool call at once, in call order."""
        expected = [call.id for call in self.pending_tool_calls]
        if not expected:
            raise ConversationStateError("No tool calls are awaiting results")
        got = [result.call_id for result in results]
        if got != expected:
            raise ConversationStateError(
                f"Tool results {got} do not match pending tool calls {expected}"
            )
        turn = ToolResultsTurn(results=tuple(results))
        self._turns.append(turn)
        return turn

    def ensure_ready_for_inference(self) -> None:
        """Raise unless every tool call so far has been answered."""
        self._check_nothing_pending("inference request")

    def clear(self) -> None:
        self._turns.clear()

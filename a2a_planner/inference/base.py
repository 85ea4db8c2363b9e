"""
Inference provider interface.

A provider turns the conversation so far, the tool schema and a system
prompt into either a final answer or a list of requested tool calls.
"""

from dataclasses import dataclass, field
from typing import Protocol, Union

from ..models.conversation import ToolCall, Turn


class InferenceError(RuntimeError):
    """The inference provider failed to produce a response."""


@dataclass(frozen=True)
class FinalAnswer:
    """The model is done; ``text`` is its reply to the user."""

    text: str
    kind: str = field(default="final", init=False)


@dataclass(frozen=True)
class ToolCallsRequested:
    """The model wants tools run before it continues."""

    calls: tuple[ToolCall, ...]
    text: str = ""
    kind: str = field(default="tool_calls", init=False)


InferenceResponse = Union[FinalAnswer, ToolCallsRequested]


class InferenceProvider(Protocol):
    """Anything that can take one planning turn."""

    def __call__(
        self, history: list[Turn], tools: list[dict], system_prompt: str
    ) -> InferenceResponse: ...

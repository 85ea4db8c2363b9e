"""
Events emitted by the orchestration loop.

The loop never renders anything. Presentation layers subscribe an
observer and turn these events into whatever output they like.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanDeclared:
    title: str
    steps: tuple[str, ...] = ()


@dataclass(frozen=True)
class OperationStarted:
    call_id: str
    operation: str
    params: dict = field(default_factory=dict)
    narration: str = ""
    reason: str = ""
    reflection: str = ""


@dataclass(frozen=True)
class OperationFinished:
    """Outcome of one operation; ``error`` is set instead of ``status`` on failure."""

    call_id: str
    operation: str
    status: Optional[str] = None
    data: Any = None
    warning: Optional[str] = None
    error: Optional[str] = None
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.status == "completed"


@dataclass(frozen=True)
class AnswerReady:
    text: str


LoopEvent = Union[PlanDeclared, OperationStarted, OperationFinished, AnswerReady]


class LoopObserver(Protocol):
    def on_event(self, event: LoopEvent) -> None: ...


class NullObserver:
    """Discards every event."""

    def on_event(self, event: LoopEvent) -> None:
        pass


class CollectingObserver:
    """Keeps every event in order; handy in tests and for transcripts."""

    def __init__(self) -> None:
        self.events: list[LoopEvent] = []

    def on_event(self, event: LoopEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]


class LoggingObserver:
    """Logs every event at INFO, or at WARNING for failed operations."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def on_event(self, event: LoopEvent) -> None:
        if isinstance(event, PlanDeclared):
            self.log.info("Plan '%s': %s", event.title, "; ".join(event.steps))
        elif isinstance(event, OperationStarted):
            self.log.info(
                "-> %s %s (%s)",
                event.operation,
                json.dumps(event.params, ensure_ascii=False),
                event.narration,
            )
        elif isinstance(event, OperationFinished):
            if event.error is not None:
                self.log.warning(
                    "<- %s failed after %dms: %s",
                    event.operation,
                    event.elapsed_ms,
                    event.error,
                )
            else:
                self.log.info(
                    "<- %s %s in %dms", event.operation, event.status, event.elapsed_ms
                )
            if event.warning:
                self.log.warning("Low balance: %s", event.warning)
        elif isinstance(event, AnswerReady):
            self.log.info("Final answer: %s", event.text[:500])


class MultiObserver:
    """Fans every event out to several observers, in order."""

    def __init__(self, *observers: LoopObserver):
        self.observers = list(observers)

    def on_event(self, event: LoopEvent) -> None:
        for observer in self.observers:
            observer.on_event(event)

"""
Core orchestration loop.

Alternates inference turns and tool dispatch until the model gives a
final answer:

    IDLE -> INFERRING -> (DISPATCHING -> INFERRING)* -> DONE

Every tool call requested in a turn is answered, in order, before the
next inference call. Failed operations become error tool-results and
the conversation carries on; failures of the inference call itself end
the run and propagate to the caller.
"""

import enum
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from ..catalog import OperationCatalogProvider, OperationDescriptor
from ..inference.base import FinalAnswer, InferenceProvider, ToolCallsRequested
from ..models.conversation import Conversation, ToolCall, ToolResult
from ..protocol.client import A2AClient
from ..protocol.types import Task
from .events import (
    AnswerReady,
    LoopObserver,
    NullObserver,
    OperationFinished,
    OperationStarted,
    PlanDeclared,
)
from .tool_defs import (
    OPERATION_TOOL_NAME,
    PLAN_TOOL_NAME,
    build_system_prompt,
    build_tool_definitions,
)

logger = logging.getLogger(__name__)

PLAN_ACKNOWLEDGEMENT = "Plan acknowledged. Proceed with execution."

DEFAULT_MAX_TURNS = 25
DEFAULT_MAX_TOOL_CALLS_PER_TURN = 10


class OrchestrationError(RuntimeError):
    """Base class for errors raised by the orchestration loop itself."""


class RunawayLoopError(OrchestrationError):
    """The model kept calling tools past the configured limits."""


class LoopState(str, enum.Enum):
    """States of the orchestration loop."""

    IDLE = "idle"
    INFERRING = "inferring"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


@dataclass
class OrchestrationStep:
    """A single dispatched tool call and the result sent back to the model."""

    turn: int
    tool_call: ToolCall
    result: str
    is_error: bool = False

    @property
    def action(self) -> str:
        return self.tool_call.name


@dataclass
class OrchestrationResult:
    """Result from a complete orchestration run."""

    answer: str
    turns: int = 0
    steps: list[OrchestrationStep] = field(default_factory=list)
    operations_called: list[str] = field(default_factory=list)


def format_operation_result(task: Task) -> str:
    """Serialize a finished task into the tool-result payload."""
    payload: dict[str, Any] = {
        "status": task.state,
        "data": A2AClient.extract_data(task),
    }
    warning = task.low_balance_warning
    if warning is not None:
        payload["warning"] = warning.message
    return json.dumps(payload, indent=2, ensure_ascii=False)


def format_error(message: str) -> str:
    """Serialize a failure into the tool-result payload."""
    return json.dumps({"error": message}, ensure_ascii=False)


class OrchestrationLoop:
    """
    Plans and executes remote operations for a user goal.

    Per-turn flow:
        1. Call the inference provider with the whole conversation
        2. Final answer: record it, emit ``AnswerReady``, stop
        3. Tool calls: acknowledge plans, send operations one at a time
        4. Append all tool-results as one turn and go back to 1

    The conversation is kept across ``run()`` calls so several goals can
    be chained; use ``reset()`` to start over.
    """

    def __init__(
        self,
        client: A2AClient,
        provider: InferenceProvider,
        catalog: Optional[OperationCatalogProvider] = None,
        observer: Optional[LoopObserver] = None,
        max_turns: int = DEFAULT_MAX_TURNS,
        max_tool_calls_per_turn: int = DEFAULT_MAX_TOOL_CALLS_PER_TURN,
        agent_name: str = "Planner",
        counterpart_name: str = "the agent",
        system_prompt: Optional[str] = None,
        context_id: Optional[str] = None,
    ):
        if max_turns <= 0 or max_tool_calls_per_turn <= 0:
            raise ValueError("max_turns and max_tool_calls_per_turn must be positive")
        self.client = client
        self.provider = provider
        self.catalog = catalog
        self.observer = observer or NullObserver()
        self.max_turns = max_turns
        self.max_tool_calls_per_turn = max_tool_calls_per_turn
        self.counterpart_name = counterpart_name
        self.system_prompt = system_prompt or build_system_prompt(
            agent_name, counterpart_name
        )
        self.context_id = context_id

        # State
        self.state = LoopState.IDLE
        self.conversation = Conversation()
        self.steps: list[OrchestrationStep] = []

    def reset(self) -> None:
        """Forget the conversation and return to IDLE."""
        self.conversation.clear()
        self.steps = []
        self.state = LoopState.IDLE

    def _operations(self) -> list[OperationDescriptor]:
        if self.catalog is None:
            return []
        return list(self.catalog())

    def run(self, goal: str) -> OrchestrationResult:
        """
        Run the loop for one user goal.

        Args:
            goal: The user's request in natural language.

        Returns:
            OrchestrationResult with the final answer and the dispatched steps.

        Raises:
            RunawayLoopError: If the turn or per-turn tool call limit is hit.
            Exception: Whatever the inference provider raised.
        """
        self.steps = []
        logger.debug("Starting orchestration for: %s", goal)

        tools = build_tool_definitions(self._operations(), self.counterpart_name)
        self.conversation.add_user(goal)

        try:
            result = self._run_loop(tools)
        except Exception:
            self.state = LoopState.FAILED
            raise
        self.state = LoopState.DONE
        return result

    def _run_loop(self, tools: list[dict]) -> OrchestrationResult:
        operations_called: list[str] = []
        turn = 0
        while True:
            turn += 1
            if turn > self.max_turns:
                raise RunawayLoopError(
                    f"No final answer after {self.max_turns} inference turns"
                )

            self.state = LoopState.INFERRING
            self.conversation.ensure_ready_for_inference()
            logger.debug("Turn %d: calling inference provider", turn)
            response = self.provider(
                self.conversation.turns, tools, self.system_prompt
            )

            if isinstance(response, FinalAnswer):
                return self._finish(response.text, turn, operations_called)

            if not isinstance(response, ToolCallsRequested):
                raise OrchestrationError(
                    f"Unexpected inference response: {type(response).__name__}"
                )

            calls = list(response.calls)
            if not calls:
                # No tool calls: the accompanying text is the answer.
                return self._finish(response.text, turn, operations_called)

            if len(calls) > self.max_tool_calls_per_turn:
                raise RunawayLoopError(
                    f"Turn {turn} requested {len(calls)} tool calls, "
                    f"limit is {self.max_tool_calls_per_turn}"
                )

            self.conversation.add_assistant(text=response.text, tool_calls=calls)
            self.state = LoopState.DISPATCHING
            results = self._dispatch(calls, turn, operations_called)
            self.conversation.add_tool_results(results)

    def _finish(
        self, answer: str, turn: int, operations_called: list[str]
    ) -> OrchestrationResult:
        self.conversation.add_assistant(text=answer)
        self.observer.on_event(AnswerReady(text=answer))
        logger.debug("Turn %d: final answer", turn)
        return OrchestrationResult(
            answer=answer,
            turns=turn,
            steps=list(self.steps),
            operations_called=operations_called,
        )

    def _dispatch(
        self, calls: list[ToolCall], turn: int, operations_called: list[str]
    ) -> list[ToolResult]:
        """Handle every tool call of a turn, strictly in order."""
        results: list[ToolResult] = []
        for call in calls:
            if call.name == PLAN_TOOL_NAME:
                content, is_error = self._acknowledge_plan(call)
            elif call.name == OPERATION_TOOL_NAME:
                content, is_error = self._execute_operation(call, operations_called)
            else:
                logger.warning("Unknown tool requested: %s", call.name)
                content, is_error = format_error(f"Unknown tool '{call.name}'"), True

            results.append(ToolResult(call_id=call.id, content=content, is_error=is_error))
            self.steps.append(
                OrchestrationStep(
                    turn=turn, tool_call=call, result=content, is_error=is_error
                )
            )
        return results

    def _acknowledge_plan(self, call: ToolCall) -> tuple[str, bool]:
        """Surface a declared plan; no network call is made."""
        steps = call.arguments.get("steps") or []
        if not isinstance(steps, list):
            steps = [steps]
        self.observer.on_event(
            PlanDeclared(
                title=str(call.arguments.get("title", "")),
                steps=tuple(str(step) for step in steps),
            )
        )
        return PLAN_ACKNOWLEDGEMENT, False

    def _execute_operation(
        self, call: ToolCall, operations_called: list[str]
    ) -> tuple[str, bool]:
        """
        Send one operation and serialize its outcome.

        Never raises: any failure is turned into an ``{"error": ...}``
        payload so the model can react to it.
        """
        args = call.arguments
        operation = args.get("operation")
        params = args.get("params")
        if params is None:
            params = {}

        if not isinstance(operation, str) or not operation:
            return format_error("Missing required argument 'operation'"), True
        if not isinstance(params, dict):
            return format_error("'params' must be a JSON object"), True

        self.observer.on_event(
            OperationStarted(
                call_id=call.id,
                operation=operation,
                params=params,
                narration=str(args.get("narration", "")),
                reason=str(args.get("reason", "")),
                reflection=str(args.get("reflection", "")),
            )
        )

        operations_called.append(operation)
        started = time.monotonic()
        try:
            task = self.client.send(operation, params, context_id=self.context_id)
        except Exception as e:
            elapsed_ms = int((time.monotonic() - started) * 1000)
            logger.error("Operation '%s' failed: %s", operation, e)
            self.observer.on_event(
                OperationFinished(
                    call_id=call.id,
                    operation=operation,
                    error=str(e),
                    elapsed_ms=elapsed_ms,
                )
            )
            return format_error(str(e)), True

        elapsed_ms = int((time.monotonic() - started) * 1000)
        warning = task.low_balance_warning
        self.observer.on_event(
            OperationFinished(
                call_id=call.id,
                operation=operation,
                status=task.state,
                data=A2AClient.extract_data(task),
                warning=warning.message if warning is not None else None,
                elapsed_ms=elapsed_ms,
            )
        )
        return format_operation_result(task), False

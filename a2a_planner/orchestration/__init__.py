"""
Tool-use orchestration loop.

Drives inference turns, dispatches the requested tool calls through the
A2A client and reports progress as structured events.
"""

from .events import (
    AnswerReady,
    CollectingObserver,
    LoggingObserver,
    LoopEvent,
    LoopObserver,
    MultiObserver,
    NullObserver,
    OperationFinished,
    OperationStarted,
    PlanDeclared,
)
from .loop import (
    LoopState,
    OrchestrationError,
    OrchestrationLoop,
    OrchestrationResult,
    OrchestrationStep,
    RunawayLoopError,
)
from .tool_defs import (
    OPERATION_TOOL_NAME,
    PLAN_TOOL,
    PLAN_TOOL_NAME,
    build_operation_tool,
    build_system_prompt,
    build_tool_definitions,
)

__all__ = [
    "AnswerReady",
    "CollectingObserver",
    "LoggingObserver",
    "LoopEvent",
    "LoopObserver",
    "MultiObserver",
    "NullObserver",
    "OperationFinished",
    "OperationStarted",
    "PlanDeclared",
    "LoopState",
    "OrchestrationError",
    "OrchestrationLoop",
    "OrchestrationResult",
    "OrchestrationStep",
    "RunawayLoopError",
    "OPERATION_TOOL_NAME",
    "PLAN_TOOL",
    "PLAN_TOOL_NAME",
    "build_operation_tool",
    "build_system_prompt",
    "build_tool_definitions",
]

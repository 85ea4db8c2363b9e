"""
Tool definitions and system prompt for the orchestration loop.

Two tools are exposed to the model, both in OpenAI function-calling
format: ``declare_plan`` to announce a multi-step plan, and ``a2a_call``
to invoke one remote operation on the counterpart agent.
"""

import logging
from typing import Optional

from ..catalog import OperationDescriptor

logger = logging.getLogger(__name__)

PLAN_TOOL_NAME = "declare_plan"
OPERATION_TOOL_NAME = "a2a_call"

# Plan tool: the model declares its steps before executing anything.
PLAN_TOOL: dict = {
    "type": "function",
    "function": {
        "name": PLAN_TOOL_NAME,
        "description": (
            f"Call this FIRST before any {OPERATION_TOOL_NAME} to declare your "
            "multi-step execution plan. Shows the user your upfront reasoning."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Short title for this plan.",
                },
                "steps": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Ordered list of steps you will execute.",
                },
            },
            "required": ["title", "steps"],
        },
    },
}


def build_operation_tool(
    operations: list[OperationDescriptor], counterpart_name: str = "the agent"
) -> dict:
    """
    Build the ``a2a_call`` tool definition.

    The catalog is listed in the tool description. An empty catalog still
    yields a callable tool; the model then has to rely on error messages
    from the counterpart to find valid operations.

    Args:
        operations: Catalog entries to document.
        counterpart_name: Name of the remote agent, used in the description.

    Returns:
        OpenAI-format tool definition.
    """
    if operations:
        op_list = "\n".join(op.summary_line() for op in operations)
    else:
        op_list = "(no operations documented; ask the agent or read its errors)"

    return {
        "type": "function",
        "function": {
            "name": OPERATION_TOOL_NAME,
            "description": (
                f"Call {counterpart_name} via the A2A protocol.\n\n"
                f"Available operations:\n{op_list}"
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "reflection": {
                        "type": "string",
                        "description": (
                            "What you learned from the PREVIOUS response "
                            "(omit for the first call)."
                        ),
                    },
                    "narration": {
                        "type": "string",
                        "description": "What you are doing now, conversationally.",
                    },
                    "reason": {
                        "type": "string",
                        "description": (
                            "WHY you chose this operation. Cite the user "
                            "request or a prior result."
                        ),
                    },
                    "operation": {
                        "type": "string",
                        "description": "Operation name from the list above.",
                    },
                    "params": {
                        "type": "object",
                        "description": "Parameters. Reuse IDs from previous results.",
                        "additionalProperties": True,
                    },
                },
                "required": ["narration", "reason", "operation"],
            },
        },
    }


def build_tool_definitions(
    operations: Optional[list[OperationDescriptor]] = None,
    counterpart_name: str = "the agent",
) -> list[dict]:
    """Build the full tool list: operation tool first, then the plan tool."""
    ops = operations or []
    logger.debug("Building tool definitions with %d operations", len(ops))
    return [build_operation_tool(ops, counterpart_name), PLAN_TOOL]


def build_system_prompt(agent_name: str, counterpart_name: str) -> str:
    """Build the planning system prompt."""
    return f"""You are {agent_name}, an AI agent that accomplishes user goals by calling a remote agent.
You call {counterpart_name} via the {OPERATION_TOOL_NAME} tool.

WORKFLOW - follow this order every time:
1. Call {PLAN_TOOL_NAME} FIRST to outline your execution steps.
2. Execute each step via {OPERATION_TOOL_NAME}, chaining results from previous calls.
3. Reflect on each response before the next call.
4. Give a concise final reply after all calls complete.

Each {OPERATION_TOOL_NAME} MUST include:
- "narration": what you are doing now
- "reason": WHY you chose this operation (cite user request or prior result)
- "reflection": what you learned from the PREVIOUS response (omit for first call)

Decision rules:
- Check whether a resource already exists before creating it
- Always read error messages carefully - they tell you which operation to use
- Reuse IDs returned by previous calls - never fabricate or guess IDs
- After creating something, verify its status
- Final reply: concise summary, use bullets, no markdown headers"""

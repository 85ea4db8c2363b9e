"""
a2a-planner - LLM planning agent for A2A JSON-RPC services

This package provides:
- A2A protocol client (JSON-RPC over HTTP, task payload decoding)
- Tool-use orchestration loop driven by an inference provider
- OpenAI-compatible inference provider
- Command-line interface for single calls and agent runs
"""

from .orchestration import OrchestrationLoop, OrchestrationResult
from .protocol import A2AClient

__all__ = [
    "A2AClient",
    "OrchestrationLoop",
    "OrchestrationResult",
]

__version__ = "0.1.0"

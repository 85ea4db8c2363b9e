"""
Inference providers for the planning model.
"""

from .base import (
    FinalAnswer,
    InferenceError,
    InferenceProvider,
    InferenceResponse,
    ToolCallsRequested,
)
from .openai_provider import OpenAIProvider, turns_to_messages

__all__ = [
    "FinalAnswer",
    "InferenceError",
    "InferenceProvider",
    "InferenceResponse",
    "ToolCallsRequested",
    "OpenAIProvider",
    "turns_to_messages",
]

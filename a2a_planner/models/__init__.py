"""
Data models for a2a-planner.
"""

from .config import (
    A2AConfig,
    InferenceConfig,
    OrchestrationConfig,
    LoggingConfig,
    AppConfig,
)
from .conversation import (
    AssistantTurn,
    Conversation,
    ConversationStateError,
    ToolCall,
    ToolResult,
    ToolResultsTurn,
    Turn,
    UserTurn,
)

__all__ = [
    # Config models
    "A2AConfig",
    "InferenceConfig",
    "OrchestrationConfig",
    "LoggingConfig",
    "AppConfig",
    # Conversation models
    "AssistantTurn",
    "Conversation",
    "ConversationStateError",
    "ToolCall",
    "ToolResult",
    "ToolResultsTurn",
    "Turn",
    "UserTurn",
]

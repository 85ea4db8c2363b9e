"""
A2A protocol client.

JSON-RPC envelopes, HTTP transport, task models and payload decoding.
"""

from .agent_card import AgentCard, AgentSkill, fetch_agent_card
from .client import A2AClient
from .decode import NO_RESPONSE, TEXT_EXTRACTORS, extract_data, extract_text
from .errors import (
    A2AClientError,
    DecodeError,
    EmptyResultError,
    HttpStatusError,
    MalformedResponseError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
)
from .transport import (
    HttpRequest,
    HttpResponse,
    PaymentRetryTransport,
    RequestsTransport,
    Transport,
)
from .types import Artifact, Task, TaskStatus, TextPart

__all__ = [
    "A2AClient",
    "AgentCard",
    "AgentSkill",
    "fetch_agent_card",
    "NO_RESPONSE",
    "TEXT_EXTRACTORS",
    "extract_data",
    "extract_text",
    "A2AClientError",
    "DecodeError",
    "EmptyResultError",
    "HttpStatusError",
    "MalformedResponseError",
    "ProtocolError",
    "RequestTimeoutError",
    "TransportError",
    "HttpRequest",
    "HttpResponse",
    "PaymentRetryTransport",
    "RequestsTransport",
    "Transport",
    "Artifact",
    "Task",
    "TaskStatus",
    "TextPart",
]

"""
Pydantic models for the A2A wire format.

Only the subset of the protocol that the planner reads is modelled.
Unknown fields are kept (``extra="allow"``) because servers routinely
attach their own bookkeeping to tasks.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TextPart(_WireModel):
    """A single part of a message or artifact."""

    kind: str = "text"
    text: Optional[str] = None


class Message(_WireModel):
    """A protocol message; the planner only ever sends user text messages."""

    role: Literal["user", "agent"] = "user"
    parts: list[TextPart] = Field(default_factory=list)

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(role="user", parts=[TextPart(kind="text", text=text)])


class TaskStatus(_WireModel):
    """Current status of a task."""

    state: str = "submitted"
    timestamp: Optional[str] = None


class Artifact(_WireModel):
    """A named bundle of result parts attached to a task."""

    artifact_id: Optional[str] = Field(default=None, alias="artifactId")
    name: Optional[str] = None
    parts: list[TextPart] = Field(default_factory=list)


class HistoryEntry(_WireModel):
    """One prior state transition of a task (informational only)."""

    state: Optional[str] = None
    timestamp: Optional[str] = None
    message: Optional[Any] = None


class LowBalanceWarning(_WireModel):
    """Out-of-band advisory attached by the server."""

    balance: Optional[Union[str, float]] = None
    message: str = ""


class TaskMetadata(_WireModel):
    """Task metadata; only the low balance advisory is interpreted."""

    low_balance_warning: Optional[LowBalanceWarning] = Field(
        default=None, alias="lowBalanceWarning"
    )


class Task(_WireModel):
    """Server-side record of one submitted message."""

    id: str = ""
    context_id: Optional[str] = Field(default=None, alias="contextId")
    status: TaskStatus = Field(default_factory=TaskStatus)
    artifacts: list[Artifact] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    metadata: Optional[TaskMetadata] = None

    @property
    def state(self) -> str:
        return self.status.state

    @property
    def low_balance_warning(self) -> Optional[LowBalanceWarning]:
        if self.metadata is None:
            return None
        return self.metadata.low_balance_warning


class JSONRPCError(_WireModel):
    """A JSON-RPC error object."""

    code: int = 0
    message: str = ""
    data: Optional[Any] = None


class JSONRPCRequest(BaseModel):
    """A JSON-RPC 2.0 request envelope."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: dict[str, Any] = Field(default_factory=dict)
    id: int


class JSONRPCResponse(_WireModel):
    """A JSON-RPC 2.0 response envelope.

    ``result`` is kept as raw JSON until the caller has checked for an
    error, so a malformed result never hides a server-side error.
    """

    jsonrpc: Optional[str] = None
    id: Optional[Union[int, str]] = None
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None

"""
JSON-RPC client for an A2A agent endpoint.

Speaks ``message/send``, ``tasks/get`` and ``tasks/cancel`` over a single
POST endpoint. Remote operations are carried inside the message text as a
JSON envelope ``{"operation": ..., "params": ...}``.

Nothing is retried here: timeouts, HTTP failures and JSON-RPC errors all
propagate to the caller as distinct ``A2AClientError`` subclasses.
"""

import itertools
import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from .decode import extract_data, extract_text
from .errors import (
    EmptyResultError,
    HttpStatusError,
    MalformedResponseError,
    ProtocolError,
)
from .transport import HttpRequest, RequestsTransport, Transport
from .types import JSONRPCRequest, JSONRPCResponse, Message, Task

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_PATH = "/a2a"
DEFAULT_TIMEOUT = 60.0


class A2AClient:
    """Client for making A2A protocol requests to one agent."""

    def __init__(
        self,
        base_url: str,
        transport: Optional[Transport] = None,
        endpoint_path: str = DEFAULT_ENDPOINT_PATH,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.endpoint_url = f"{self.base_url}{endpoint_path}"
        self.transport = transport or RequestsTransport()
        self.timeout = timeout
        # Per-instance id counter; never shared between clients.
        self._ids = itertools.count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    def _build_jsonrpc_request(self, method: str, params: dict[str, Any]) -> dict:
        """Build a JSON-RPC request object."""
        return JSONRPCRequest(method=method, params=params, id=self._next_id()).model_dump()

    def _rpc(self, method: str, params: dict[str, Any]) -> JSONRPCResponse:
        """POST one JSON-RPC request and return the parsed envelope.

        Raises ``ProtocolError`` when the envelope carries an ``error``,
        regardless of whether a ``result`` is present too.
        """
        payload = self._build_jsonrpc_request(method, params)
        logger.debug("-> %s id=%s", method, payload["id"])

        response = self.transport(
            HttpRequest.post_json(self.endpoint_url, payload, timeout=self.timeout)
        )
        if not response.ok:
            raise HttpStatusError(response.status, response.body)

        try:
            envelope = JSONRPCResponse.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as e:
            raise MalformedResponseError(
                f"Invalid JSON-RPC response to {method}: {e}"
            ) from e

        if envelope.id is not None and envelope.id != payload["id"]:
            logger.warning(
                "Response id %r does not match request id %r for %s",
                envelope.id,
                payload["id"],
                method,
            )

        if envelope.error is not None:
            raise ProtocolError(
                envelope.error.code, envelope.error.message, envelope.error.data
            )
        return envelope

    @staticmethod
    def _to_task(method: str, result: Any) -> Task:
        try:
            return Task.model_validate(result)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Result of {method} is not a task: {e}"
            ) from e

    def _send_message(self, text: str, context_id: Optional[str]) -> Task:
        params: dict[str, Any] = {
            "message": Message.user_text(text).model_dump(exclude_none=True)
        }
        if context_id:
            params["contextId"] = context_id

        envelope = self._rpc("message/send", params)
        if envelope.result is None:
            raise EmptyResultError("message/send")
        task = self._to_task("message/send", envelope.result)
        logger.debug("<- task %s state=%s", task.id, task.state)
        return task

    def send_text(self, text: str, context_id: Optional[str] = None) -> Task:
        """Send free text to the agent as a single user message."""
        return self._send_message(text, context_id)

    def send(
        self,
        operation: str,
        params: Optional[dict[str, Any]] = None,
        context_id: Optional[str] = None,
    ) -> Task:
        """Invoke a remote operation by sending its JSON envelope as text."""
        text = json.dumps({"operation": operation, "params": params or {}})
        logger.debug("Sending operation %s", operation)
        return self._send_message(text, context_id)

    def get_task(self, task_id: str) -> Task:
        """Get task details by ID."""
        envelope = self._rpc("tasks/get", {"id": task_id})
        if envelope.result is None:
            raise EmptyResultError("tasks/get")
        return self._to_task("tasks/get", envelope.result)

    def cancel_task(self, task_id: str) -> Optional[Task]:
        """Cancel a task. The server may legitimately return no result."""
        envelope = self._rpc("tasks/cancel", {"id": task_id})
        if envelope.result is None:
            return None
        return self._to_task("tasks/cancel", envelope.result)

    # Payload decoding lives in .decode; exposed here for convenience.
    extract_text = staticmethod(extract_text)
    extract_data = staticmethod(extract_data)

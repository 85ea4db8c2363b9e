"""
Pytest configuration and fixtures for a2a-planner tests.
"""

import json
from typing import Any, Callable, Optional, Union

import pytest

from a2a_planner.config_loader import reset_config_cache
from a2a_planner.protocol import A2AClient, HttpRequest, HttpResponse


class FakeTransport:
    """Transport double that records requests and replays canned responses.

    Each queued item is an ``HttpResponse``, an exception to raise, or a
    callable ``(HttpRequest) -> HttpResponse``. The last item is reused
    once the queue runs dry.
    """

    def __init__(self, *responses: Union[HttpResponse, Exception, Callable]):
        self.responses = list(responses)
        self.requests: list[HttpRequest] = []

    def __call__(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        return item

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.body) for r in self.requests if r.body]


def make_task(
    text: Optional[str] = None,
    state: str = "completed",
    task_id: str = "task-1",
    warning: Optional[dict] = None,
) -> dict:
    """Build a Task JSON object whose first artifact carries ``text``."""
    task: dict[str, Any] = {
        "id": task_id,
        "contextId": "ctx-1",
        "status": {"state": state, "timestamp": "2025-01-01T00:00:00Z"},
        "artifacts": [],
        "history": [],
    }
    if text is not None:
        task["artifacts"] = [
            {
                "artifactId": "art-1",
                "name": "result",
                "parts": [{"kind": "text", "text": text}],
            }
        ]
    if warning is not None:
        task["metadata"] = {"lowBalanceWarning": warning}
    return task


def rpc_response(
    result: Any = None, error: Optional[dict] = None, rpc_id: int = 1, status: int = 200
) -> HttpResponse:
    """Build an HTTP response carrying a JSON-RPC envelope."""
    envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": rpc_id}
    if result is not None:
        envelope["result"] = result
    if error is not None:
        envelope["error"] = error
    return HttpResponse(status=status, body=json.dumps(envelope))


def echo_handler(request: HttpRequest) -> HttpResponse:
    """Counterpart double that returns the sent message text as the artifact."""
    payload = json.loads(request.body)
    text = payload["params"]["message"]["parts"][0]["text"]
    return rpc_response(make_task(text=text), rpc_id=payload["id"])


@pytest.fixture
def fake_transport() -> type:
    return FakeTransport


@pytest.fixture
def task_factory() -> Callable[..., dict]:
    return make_task


@pytest.fixture
def rpc_factory() -> Callable[..., HttpResponse]:
    return rpc_response


@pytest.fixture
def echo_transport() -> FakeTransport:
    return FakeTransport(echo_handler)


@pytest.fixture
def client_factory() -> Callable[..., A2AClient]:
    """Build a client bound to a FakeTransport with the given responses."""

    def factory(*responses) -> A2AClient:
        return A2AClient("http://agent.test", transport=FakeTransport(*responses))

    return factory


@pytest.fixture(autouse=True)
def reset_config():
    """Reset the cached app config around each test."""
    reset_config_cache()
    yield
    reset_config_cache()

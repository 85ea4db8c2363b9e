"""
Error kinds raised by the A2A protocol client.

Every failure of a JSON-RPC exchange maps onto exactly one of these
classes so that callers can tell a dead network apart from a server
that answered with a JSON-RPC ``error`` object.
"""

from typing import Optional


class A2AClientError(Exception):
    """Base exception for A2A client errors."""


class TransportError(A2AClientError):
    """Network or connection failure before any HTTP response arrived."""


class RequestTimeoutError(TransportError, TimeoutError):
    """No response arrived within the request timeout."""

    def __init__(self, timeout: Optional[float] = None, message: Optional[str] = None):
        self.timeout = timeout
        if message is None:
            message = (
                f"Request timed out after {timeout:g}s"
                if timeout is not None
                else "Request timed out"
            )
        super().__init__(message)


class HttpStatusError(A2AClientError):
    """The endpoint answered with a non-2xx HTTP status."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class ProtocolError(A2AClientError):
    """The JSON-RPC response carried an ``error`` member."""

    def __init__(self, code: int, message: str, data: object = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"A2A error [{code}]: {message}")


class EmptyResultError(A2AClientError):
    """Success envelope with neither ``result`` nor ``error``."""

    def __init__(self, method: str = ""):
        self.method = method
        super().__init__("Empty response from A2A endpoint")


class MalformedResponseError(A2AClientError):
    """Response body is not a JSON-RPC envelope or the result is not a Task."""


class DecodeError(A2AClientError):
    """Artifact text could not be decoded.

    Only raised inside payload decoding, where it is always recovered
    by falling back to the raw text.
    """

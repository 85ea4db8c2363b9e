"""
HTTP transport for the A2A client.

A transport is any callable ``(HttpRequest) -> HttpResponse``. The client
only looks at the status code and body of the response, so transports can
be stacked freely; ``PaymentRetryTransport`` is one such decorator.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Protocol

import requests

from .errors import RequestTimeoutError, TransportError

logger = logging.getLogger(__name__)

PAYMENT_REQUIRED = 402


@dataclass(frozen=True)
class HttpRequest:
    """An outgoing HTTP request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None

    @classmethod
    def post_json(
        cls, url: str, payload: Any, timeout: Optional[float] = None
    ) -> "HttpRequest":
        return cls(
            method="POST",
            url=url,
            headers={"Content-Type": "application/json"},
            body=json.dumps(payload).encode("utf-8"),
            timeout=timeout,
        )

    def with_headers(self, extra: dict[str, str]) -> "HttpRequest":
        """Return a copy of this request with ``extra`` headers merged in."""
        return replace(self, headers={**self.headers, **extra})


@dataclass(frozen=True)
class HttpResponse:
    """An HTTP response, reduced to what the client needs."""

    status: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.body)


class Transport(Protocol):
    """Performs one HTTP exchange."""

    def __call__(self, request: HttpRequest) -> HttpResponse: ...


class RequestsTransport:
    """Transport backed by a ``requests.Session``.

    Enforces ``request.timeout`` and converts ``requests`` failures into
    ``TransportError`` / ``RequestTimeoutError``. HTTP error statuses are
    returned, not raised; deciding what a 500 means is the client's job.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def __call__(self, request: HttpRequest) -> HttpResponse:
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
                timeout=request.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(request.timeout) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {request.url} failed: {e}") from e

        return HttpResponse(
            status=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self.session.close()


# Produces the headers that settle a payment challenge, given the request
# that was refused and the 402 response carrying the challenge.
PaymentSigner = Callable[[HttpRequest, HttpResponse], dict[str, str]]


class PaymentRetryTransport:
    """Decorator that answers a 402 Payment Required challenge once.

    The first attempt is sent unchanged. On a 402 the signer is asked for
    payment headers and the request is retried exactly once with those
    headers attached; whatever the second attempt returns is passed back
    to the caller. How the signature is produced is entirely up to the
    signer.
    """

    def __init__(self, inner: Transport, signer: PaymentSigner):
        self.inner = inner
        self.signer = signer

    def __call__(self, request: HttpRequest) -> HttpResponse:
        logger.debug("%s %s (no payment)", request.method, request.url)
        response = self.inner(request)
        if response.status != PAYMENT_REQUIRED:
            return response

        logger.info("402 Payment Required from %s, signing payment", request.url)
        payment_headers = self.signer(request, response)
        paid = self.inner(request.with_headers(payment_headers))
        logger.debug(
            "%s %s (with payment) -> %d", request.method, request.url, paid.status
        )
        return paid

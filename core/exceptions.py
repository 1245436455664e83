"""Exception hierarchy for the CORS proxy pipeline.

Every stage raises one of these; the handler converts it to a
:class:`~core.results.Failure` and renders it exactly once.
"""

from typing import Any

from core.results import Failure

PRECONDITION_FAILED = 412
UNPROCESSABLE_ENTITY = 422


class ProxyError(Exception):
    """Base exception for all proxy errors.

    Attributes:
        code: HTTP status code written to the client
        message: Human-readable error message
        detail: Diagnostic context for reproducing the failure
    """

    default_code = PRECONDITION_FAILED

    def __init__(
        self,
        message: str,
        detail: dict[str, Any] | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}
        self.code = code if code is not None else self.default_code

    def to_result(self) -> Failure:
        return Failure(self.code, self.message, dict(self.detail))


class MissingTarget(ProxyError):
    """Raised when the request path carries no target URL."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            "URL not provided",
            {"method": method, "requestedURL": path},
        )


class MalformedTarget(ProxyError):
    """Raised when the target URL cannot be parsed."""

    def __init__(self, message: str, method: str, requested_url: str) -> None:
        super().__init__(message, {"method": method, "requestedURL": requested_url})


class BodyReadError(ProxyError):
    """Raised when the inbound request body cannot be read."""

    def __init__(self, message: str, method: str, requested_url: str) -> None:
        super().__init__(message, {"method": method, "requestedURL": requested_url})


class RequestConstructionError(ProxyError):
    """Raised when the outbound request cannot be built."""

    def __init__(self, message: str, method: str, requested_url: str, body: bytes) -> None:
        super().__init__(
            message,
            {"body": body, "method": method, "requestedURL": requested_url},
        )


class TransportError(ProxyError):
    """Raised when the outbound request fails (DNS, refused, timeout)."""

    default_code = UNPROCESSABLE_ENTITY

    def __init__(self, message: str, method: str, requested_url: str, body: bytes) -> None:
        super().__init__(
            message,
            {
                "body": body,
                "method": method,
                "requestedURL": requested_url,
                "response": None,
            },
        )


class RelayReadError(ProxyError):
    """Raised when the downstream body cannot be read.

    The status code is the downstream response's own code.
    """

    def __init__(
        self,
        message: str,
        method: str,
        requested_url: str,
        body: bytes,
        response: Any,
        response_code: int,
    ) -> None:
        super().__init__(
            message,
            {
                "method": method,
                "requestedURL": requested_url,
                "body": body,
                "response": response,
                "responseCode": response_code,
            },
            code=response_code,
        )

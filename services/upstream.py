"""Outbound request execution against the resolved target."""

import re

import httpx

from core.exceptions import RelayReadError, RequestConstructionError, TransportError
from core.protocols import RequestLogger
from core.request_types import PreparedRequest
from core.results import Success

# RFC 9110 token
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class UpstreamClient:
    """Forward prepared requests and buffer the downstream response."""

    def __init__(self, client: httpx.AsyncClient, timeout: float | None = None) -> None:
        self._client = client
        self._timeout = timeout

    def build(self, prepared: PreparedRequest) -> httpx.Request:
        """Build the outbound request, raising RequestConstructionError."""
        method = prepared.method
        requested_url = prepared.target.requested_url
        if not _METHOD_TOKEN.match(method):
            raise RequestConstructionError(
                f'invalid method "{method}"', method, requested_url, prepared.body
            )

        try:
            return self._client.build_request(
                method,
                prepared.target.url,
                content=prepared.body,
                headers=prepared.headers,
                timeout=self._timeout,
            )
        except (httpx.InvalidURL, ValueError) as e:
            raise RequestConstructionError(str(e), method, requested_url, prepared.body) from e

    async def forward(self, prepared: PreparedRequest, logger: RequestLogger) -> Success:
        """Execute the request and return the downstream status and body."""
        method = prepared.method
        requested_url = prepared.target.requested_url
        request = self.build(prepared)

        logger.log_forward(method, request.url.host)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise TransportError(
                _describe(method, requested_url, e), method, requested_url, prepared.body
            ) from e

        try:
            await response.aread()
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise RelayReadError(
                _describe(method, requested_url, e),
                method,
                requested_url,
                prepared.body,
                response,
                response.status_code,
            ) from e
        finally:
            await response.aclose()

        # HEAD responses carry no body
        payload = None if method == "HEAD" else response.content
        return Success(response.status_code, payload)


def _describe(method: str, requested_url: str, exc: Exception) -> str:
    reason = str(exc) or type(exc).__name__
    return f"{method.capitalize()} {requested_url}: {reason}"

"""Proxy endpoint and request pipeline."""

from pathlib import Path

from fastapi import Request, Response
from fastapi.responses import HTMLResponse
from starlette.datastructures import MutableHeaders
from starlette.requests import ClientDisconnect
from starlette.types import Receive, Scope, Send

from api.responses import render
from core.config import Config
from core.decorators import RequestDecorator
from core.exceptions import BodyReadError, ProxyError
from core.protocols import RequestLogger
from core.request_types import PreparedRequest
from core.resolver import is_root_path, resolve_target
from core.results import Result, Success
from ui.log_utils import write_incoming_log


class ProxyEndpoint:
    """ASGI endpoint for ``/{target}`` that accepts every HTTP method."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        decorators: list[RequestDecorator] | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._decorators = decorators or []

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await self.dispatch(request)
        await response(scope, receive, send)

    async def dispatch(self, request: Request) -> Response:
        """Run decorator hooks around the proxy pipeline."""
        self._logger.log_request(request.method, request.scope["path"])

        response = None
        for decorator in self._decorators:
            response = decorator.before(request)
            if response is not None:
                break
        if response is None:
            response = await handle_proxy(request, self._config, self._logger)

        for decorator in reversed(self._decorators):
            decorator.after(request, response)
        return response


async def handle_proxy(request: Request, config: Config, logger: RequestLogger) -> Response:
    """Negotiate CORS, then resolve, forward and relay the request."""
    headers = MutableHeaders()
    if request.app.state.cors.negotiate(request.method, request.headers, headers):
        return render(Success(200), headers, logger)

    path = request.scope["path"]
    if is_root_path(path) and config.proxy.landing_page:
        landing = _landing_page(config.proxy.landing_page, headers, logger)
        if landing is not None:
            return landing

    try:
        result = await _relay(request, path, config, logger)
    except ProxyError as e:
        logger.log_error(e.code, e.message)
        result = e.to_result()
    return render(result, headers, logger)


async def _relay(request: Request, path: str, config: Config, logger: RequestLogger) -> Result:
    method = request.method
    query = request.scope.get("query_string", b"").decode("latin-1")
    target = resolve_target(method, path, query)

    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise BodyReadError(str(e) or "client disconnected", method, target.requested_url) from e

    if config.proxy.debug:
        write_incoming_log(method, path, dict(request.headers), body.decode("utf-8", errors="replace"))

    outbound_headers = request.app.state.header_builder.build_outbound_headers(request.headers)
    prepared = PreparedRequest(method, target, outbound_headers, body)
    return await request.app.state.upstream_client.forward(prepared, logger)


def _landing_page(page: Path, headers: MutableHeaders, logger: RequestLogger) -> Response | None:
    """Serve the configured landing page, or None if it cannot be read."""
    try:
        content = page.read_text(encoding="utf-8")
    except OSError as e:
        logger.log_error(500, f"Landing page unavailable: {e}")
        return None

    response = HTMLResponse(content=content, status_code=200)
    response.raw_headers.extend(headers.raw)
    logger.log_served(200, "OK")
    return response

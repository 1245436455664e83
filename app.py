"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from api.handlers import ProxyEndpoint
from core.config import Config
from core.cors import CorsNegotiator
from core.decorators import LicenseDecorator
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.limits.upstream_timeout,
            limits=limits,
            follow_redirects=True,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, timeout=config.limits.upstream_timeout)
        app.state.cors = CorsNegotiator()
        app.state.header_builder = HeaderBuilder(config.proxy.forward_headers)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="bypass-cors",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    endpoint = ProxyEndpoint(config, logger, decorators=[LicenseDecorator(config.license)])
    app.router.add_route("/{target:path}", endpoint, include_in_schema=False)

    return app

"""Request/response decorators run around the proxy pipeline.

Decorators run in order: every ``before`` hook sees the request first and may
answer it outright; ``after`` hooks then run in reverse order on whatever
response was produced.
"""

from typing import Protocol

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from core.config import LicenseSettings

PERMANENT_REDIRECT = 308


class RequestDecorator(Protocol):
    """Pre/post hooks around the core handler."""

    def before(self, request: Request) -> Response | None: ...
    def after(self, request: Request, response: Response) -> None: ...


class LicenseDecorator:
    """Attach the license URL to every exchange and redirect ``/license*``."""

    def __init__(self, settings: LicenseSettings) -> None:
        self.header = settings.header
        self.url = settings.url

    def before(self, request: Request) -> Response | None:
        # Must run before anything reads request.headers, which caches
        raw = (self.header.lower().encode("latin-1"), self.url.encode("latin-1"))
        request.scope["headers"] = [*request.scope["headers"], raw]

        if self.is_license_path(request.url.path):
            return RedirectResponse(self.url, status_code=PERMANENT_REDIRECT)
        return None

    def after(self, request: Request, response: Response) -> None:
        response.headers.append(self.header, self.url)

    def is_license_path(self, path: str) -> bool:
        prefix = "/" + self.header.lower()
        return path.lower().startswith(prefix)

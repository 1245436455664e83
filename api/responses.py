"""Render pipeline results as HTTP responses."""

import json
from http import HTTPStatus
from typing import Any

import httpx
from fastapi import Response
from starlette.datastructures import MutableHeaders

from core.protocols import RequestLogger
from core.results import Failure, Result

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def render(
    result: Result,
    headers: MutableHeaders,
    logger: RequestLogger,
) -> Response:
    """Write ``result`` with the negotiated headers and log the status served."""
    status = result.status_code
    logger.log_served(status, reason_phrase(status))

    content = b"" if _forbids_body(status) else _body(result)
    response = Response(content=content, status_code=status)
    response.headers["content-type"] = JSON_CONTENT_TYPE
    response.raw_headers.extend(headers.raw)
    return response


def reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def _body(result: Result) -> bytes:
    if isinstance(result, Failure):
        envelope = json.dumps(result.envelope(), default=_json_default, separators=(",", ":"))
        return (envelope + "\n").encode("utf-8")
    if result.payload is None:
        return b""
    return result.payload + b"\n"


def _forbids_body(status: int) -> bool:
    return status < 200 or status in (204, 304)


def _json_default(value: Any) -> Any:
    """Serialize diagnostic values that json cannot handle natively."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, httpx.Response):
        return {
            "Status": f"{value.status_code} {value.reason_phrase}".strip(),
            "StatusCode": value.status_code,
            "Proto": value.http_version,
            "Header": dict(value.headers),
        }
    return str(value)

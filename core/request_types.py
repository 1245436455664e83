"""Shared request data types."""

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class ResolvedTarget:
    """Target URL extracted from the inbound path."""

    url: httpx.URL
    requested_url: str


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an outbound request."""

    method: str
    target: ResolvedTarget
    headers: dict[str, str]
    body: bytes

"""Header construction for outbound requests."""

from collections.abc import Mapping
from typing import Literal

ForwardPolicy = Literal["none", "end-to-end"]

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

# Rewritten by httpx or meaningless to the target
DROPPED_HEADERS = frozenset({"host", "origin", "content-length", "cookie"})


class HeaderBuilder:
    """Build outbound headers according to the forwarding policy."""

    def __init__(self, policy: ForwardPolicy = "none") -> None:
        self.policy = policy

    def build_outbound_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Return the inbound headers to forward.

        ``none`` forwards nothing, so httpx only sends its own defaults.
        """
        if self.policy == "none":
            return {}

        connection_tokens = {
            token.strip().lower()
            for token in headers.get("connection", "").split(",")
            if token.strip()
        }
        upstream: dict[str, str] = {}
        for key, value in headers.items():
            key_lower = key.lower()
            if key_lower in HOP_BY_HOP_HEADERS or key_lower in DROPPED_HEADERS:
                continue
            if key_lower in connection_tokens:
                continue
            upstream[key] = value
        return upstream

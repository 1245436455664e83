"""CORS header negotiation and pre-flight detection."""

from collections.abc import Mapping

from starlette.datastructures import MutableHeaders

VARY_HEADER = "Vary"
ORIGIN_HEADER = "Origin"
QUOTE_HEADER = "quote"
QUOTE = "Be Happy :)"

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"

REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"


class CorsNegotiator:
    """Set CORS response headers for a proxied request."""

    def negotiate(
        self,
        method: str,
        headers: Mapping[str, str],
        sink: MutableHeaders,
    ) -> bool:
        """Apply CORS headers to ``sink``.

        Returns True for a pre-flight request, which the caller must answer
        without forwarding.
        """
        self.apply_default_headers(headers, sink)

        if method == "OPTIONS" and headers.get(REQUEST_METHOD, ""):
            self.apply_preflight_headers(headers, sink)
            return True
        return False

    def apply_default_headers(self, headers: Mapping[str, str], sink: MutableHeaders) -> None:
        """Headers present on every response."""
        sink.append(VARY_HEADER, ORIGIN_HEADER)
        sink[QUOTE_HEADER] = QUOTE
        # Reflect the exact origin; a wildcard is rejected alongside credentials
        sink[ALLOW_ORIGIN] = headers.get(ORIGIN_HEADER, "")
        sink[ALLOW_CREDENTIALS] = "true"

    def apply_preflight_headers(self, headers: Mapping[str, str], sink: MutableHeaders) -> None:
        """Headers answering a pre-flight request."""
        sink.append(VARY_HEADER, REQUEST_METHOD)
        sink.append(VARY_HEADER, REQUEST_HEADERS)
        sink[ALLOW_METHODS] = headers.get(REQUEST_METHOD, "").upper()
        sink[ALLOW_HEADERS] = headers.get(REQUEST_HEADERS, "")

"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard or console)."""

    def log_request(self, method: str, url: str) -> None: ...
    def log_forward(self, method: str, host: str) -> None: ...
    def log_served(self, status: int, reason: str) -> None: ...
    def log_error(self, status: int, message: str) -> None: ...

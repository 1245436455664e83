"""Result types produced by every stage of the proxy pipeline."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Success:
    """A response to relay as-is."""

    status_code: int
    payload: bytes | None = None


@dataclass(frozen=True)
class Failure:
    """A structured error written as the JSON error envelope."""

    status_code: int
    message: str
    detail: dict[str, Any] = field(default_factory=dict)

    def envelope(self) -> dict[str, Any]:
        return {
            "error": {
                "Code": self.status_code,
                "Message": self.message,
                "Detail": self.detail,
            }
        }


Result = Success | Failure

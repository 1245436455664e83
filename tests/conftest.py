"""Shared fixtures for proxy tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

import ui.log_utils
from app import create_app
from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self):
        self.requests: list[tuple[str, str]] = []
        self.forwards: list[tuple[str, str]] = []
        self.served: list[tuple[int, str]] = []
        self.errors: list[tuple[int, str]] = []

    def log_request(self, method: str, url: str) -> None:
        self.requests.append((method, url))

    def log_forward(self, method: str, host: str) -> None:
        self.forwards.append((method, host))

    def log_served(self, status: int, reason: str) -> None:
        self.served.append((status, reason))

    def log_error(self, status: int, message: str) -> None:
        self.errors.append((status, message))


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep CLI log files out of the working directory."""
    monkeypatch.setattr(ui.log_utils, "CLI_LOG_FILE", tmp_path / "logs" / "proxy.log")
    return tmp_path / "logs"


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def downstream():
    """Downstream handler; tests replace ``handler`` to change behavior."""

    class Downstream:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.handler = lambda request: httpx.Response(200, text="Success")

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.handler(request)

    return Downstream()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def client(config, logger, downstream):
    app = create_app(config, logger, transport=httpx.MockTransport(downstream))
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client

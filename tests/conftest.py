"""Pytest configuration - loads .env for live tests and stubs the HTTP transport."""

import email.message
import io
import json
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class FakeResponse:
    """Minimal stand-in for the object returned by urlopen."""

    def __init__(self, payload: bytes, status: int = 200):
        self.payload = payload
        self.status = status

    def read(self) -> bytes:
        return self.payload

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


class StubTransport:
    """Records outgoing requests and replays queued responses in order."""

    def __init__(self):
        self.requests: list[urllib.request.Request] = []
        self._queue: list[tuple[int, bytes]] = []

    def respond(self, payload: Any = None, status: int = 200, raw: bytes | None = None) -> None:
        """Queue a response; raw bytes take precedence over a JSON payload."""
        body = raw if raw is not None else json.dumps(payload).encode("utf-8")
        self._queue.append((status, body))

    def __call__(self, req: urllib.request.Request, *args: Any, **kwargs: Any) -> FakeResponse:
        self.requests.append(req)
        if not self._queue:
            raise AssertionError(f"unexpected request: {req.get_method()} {req.full_url}")
        status, body = self._queue.pop(0)
        if status >= 400:
            raise urllib.error.HTTPError(
                req.full_url,
                status,
                "Error",
                email.message.Message(),
                io.BytesIO(body),
            )
        return FakeResponse(body, status)

    @property
    def last(self) -> urllib.request.Request:
        return self.requests[-1]

    def last_body(self) -> Any:
        return json.loads(self.last.data.decode("utf-8"))


@pytest.fixture
def transport(monkeypatch) -> StubTransport:
    """Replace urllib's urlopen with a recording stub."""
    stub = StubTransport()
    monkeypatch.setattr(urllib.request, "urlopen", stub)
    return stub


@pytest.fixture
def clean_env(monkeypatch):
    """Remove APIAI_* variables that a local .env may have set."""
    for name in ("APIAI_ACCESS_TOKEN", "APIAI_LANG", "APIAI_VERSION", "APIAI_BASE_URL", "APIAI_SESSION_ID"):
        monkeypatch.delenv(name, raising=False)

"""Pytest fixtures for notification-relay tests."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Ensure the package is importable when running pytest from the repo root
# without ``pip install -e .``.
_src = Path(__file__).resolve().parent.parent / "src"
if _src.is_dir() and str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from notification_relay.config import ApiUrls  # noqa: E402
from notification_relay.dispatch import DispatchClient  # noqa: E402

EMAIL_URL = "http://email.test/send"
SMS_URL = "http://sms.test/send"


def make_envelope(inner: dict[str, object] | str) -> bytes:
    """Wrap *inner* as ``{"queuedata": "<json>"}`` message bytes."""
    text = inner if isinstance(inner, str) else json.dumps(inner)
    return json.dumps({"queuedata": text}).encode("utf-8")


class RecordingTransport:
    """httpx.MockTransport handler that records requests and answers per URL."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(
        self,
        url: str,
        status_code: int = 200,
        text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.responses[url] = lambda request: httpx.Response(
            status_code, content=text.encode(), headers=headers
        )

    def fail(self, url: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self.responses[url] = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.responses.get(str(request.url))
        if handler is None:
            return httpx.Response(200, text="ok")
        return handler(request)

    def bodies_for(self, url: str) -> list[dict[str, object]]:
        return [json.loads(r.content) for r in self.requests if str(r.url) == url]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest_asyncio.fixture
async def http_client(transport: RecordingTransport):
    async with httpx.AsyncClient(transport=httpx.MockTransport(transport)) as client:
        yield client


@pytest.fixture
def api_urls() -> ApiUrls:
    return ApiUrls(email=EMAIL_URL, sms=SMS_URL)


@pytest.fixture
def dispatcher(http_client: httpx.AsyncClient, api_urls: ApiUrls) -> DispatchClient:
    return DispatchClient(http_client, api_urls)


@pytest.fixture
def valid_email() -> dict[str, object]:
    return {"to": ["a@x.com"], "subject": "hi", "body": ["hello"]}


@pytest.fixture
def valid_sms() -> dict[str, object]:
    return {"mobileno": ["+15550001"], "message": ["your code is 1234"]}


@pytest.fixture
def redis_config() -> dict[str, str]:
    return {
        "redisserver": "cache.internal",
        "redisport": "6379",
        "redispwd": "s3cret",
        "emailconfigkey": "tenant-a",
    }


@pytest.fixture
def envelope() -> Callable[[dict[str, object] | str], bytes]:
    return make_envelope

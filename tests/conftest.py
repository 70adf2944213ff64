"""Shared fixtures for pact publishing tests."""
from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from src.pact_publishing.broker import PactBrokerPublisher
from src.pact_publishing.config import BrokerEndpoint
from src.pact_publishing.constants import PCAW_CONSUMER_NAME, PROVIDER_NAME


BROKER_BASE_URL = "https://broker.example.test"
CONSUMER_VERSION = "3f2c1a9"


class FakeBroker:
    """In-process Pact Broker double backed by ``httpx.MockTransport``.

    Records every request. Publish and tag responses are configurable, and
    either call can be made to raise a transport error instead.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.publish_status = 201
        self.publish_body: Any = {"_links": {}}
        self.tag_status = 201
        self.publish_error: Exception | None = None
        self.tag_error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if "/tags/" in request.url.path:
            if self.tag_error is not None:
                raise self.tag_error
            return httpx.Response(self.tag_status, json={})
        if self.publish_error is not None:
            raise self.publish_error
        if isinstance(self.publish_body, str):
            return httpx.Response(self.publish_status, text=self.publish_body)
        return httpx.Response(self.publish_status, json=self.publish_body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def publish_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/pacts/")]

    @property
    def tag_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/tags/" in r.url.path]


def make_pact_document(
    consumer: str | None = PCAW_CONSUMER_NAME,
    provider: str | None = PROVIDER_NAME,
) -> dict[str, Any]:
    """Build a minimal pact document. ``None`` leaves the participant out."""
    document: dict[str, Any] = {
        "interactions": [
            {
                "description": "a request from PCAW to update device part number",
                "request": {"method": "POST", "path": "/api/UpdateDeviceInformation"},
                "response": {"status": 200},
            }
        ],
        "metadata": {"pactSpecification": {"version": "2.0.0"}},
    }
    if consumer is not None:
        document["consumer"] = {"name": consumer}
    if provider is not None:
        document["provider"] = {"name": provider}
    return document


@pytest.fixture
def pact_document() -> Callable[..., dict[str, Any]]:
    """Factory for pact documents: ``pact_document(consumer=..., provider=...)``."""
    return make_pact_document


@pytest.fixture
def pact_dir(tmp_path: Path) -> Path:
    """Empty directory for generated pact files."""
    directory = tmp_path / "pacts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_pact(pact_dir: Path) -> Callable[..., Path]:
    """Factory writing a pact file into ``pact_dir`` and returning its path."""

    def _write(filename: str, document: dict[str, Any] | str | None = None) -> Path:
        path = pact_dir / filename
        if document is None:
            document = make_pact_document()
        text = document if isinstance(document, str) else json.dumps(document, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def broker_endpoint() -> BrokerEndpoint:
    """Endpoint with a branch, no extra tag and no credentials."""
    return BrokerEndpoint(base_url=BROKER_BASE_URL, consumer_version=CONSUMER_VERSION, branch="main")


@pytest.fixture
def fake_broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def make_publisher(fake_broker: FakeBroker) -> Callable[[BrokerEndpoint], PactBrokerPublisher]:
    """Factory for publishers wired to the fake broker."""

    def _make(endpoint: BrokerEndpoint) -> PactBrokerPublisher:
        return PactBrokerPublisher(endpoint, client=fake_broker.client())

    return _make


@pytest_asyncio.fixture
async def publisher(
    broker_endpoint: BrokerEndpoint,
    fake_broker: FakeBroker,
) -> AsyncGenerator[PactBrokerPublisher, None]:
    """Publisher for ``broker_endpoint`` talking to the fake broker."""
    client = fake_broker.client()
    async with client:
        yield PactBrokerPublisher(broker_endpoint, client=client)

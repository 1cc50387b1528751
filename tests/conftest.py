"""Shared fixtures for the LINE MCP server tests."""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from line_core.dispatcher import ToolDispatcher
from line_core.line_client import LineClient

TEST_TOKEN = "test-channel-token"


@dataclass
class FakeLineAPI:
    """Stands in for api.line.me behind an httpx.MockTransport.

    Records every request and answers with ``body`` (JSON) or ``raw`` bytes,
    or raises ``error`` to simulate a network failure.
    """

    status_code: int = 200
    body: Any = field(default_factory=dict)
    raw: Optional[bytes] = None
    error: Optional[Exception] = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request reached the fake LINE API"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def line_api():
    return FakeLineAPI()


@pytest_asyncio.fixture
async def line_client(line_api):
    client = LineClient(TEST_TOKEN, transport=httpx.MockTransport(line_api.handler))
    yield client
    await client.aclose()


@pytest.fixture
def dispatcher(line_client):
    return ToolDispatcher(line_client)

"""Shared fixtures: a scripted GraphQL endpoint served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from linear_cli.client import LinearClient

API_URL = "https://api.linear.test/graphql"


class FakeLinear:
    """Replays queued responses and records every request body it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []

    def reply(
        self,
        data: Any = None,
        *,
        errors: list[dict[str, Any]] | None = None,
        status: int = 200,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> "FakeLinear":
        if body is None:
            payload: dict[str, Any] = {"data": data}
            if errors is not None:
                payload["errors"] = errors
            body = json.dumps(payload)
        self._responses.append(httpx.Response(status, text=body, headers=headers))
        return self

    def fail_with(self, exc: Exception) -> "FakeLinear":
        self._responses.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"unexpected request: {request.content!r}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    @property
    def last_body(self) -> dict[str, Any]:
        return self.bodies[-1]

    def client(self, token: str = "test-token") -> LinearClient:
        return LinearClient(token, API_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def linear() -> FakeLinear:
    return FakeLinear()


@pytest.fixture
def client(linear: FakeLinear) -> LinearClient:
    with linear.client() as api_client:
        yield api_client


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Keep credentials and settings out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("LINCTL_HOME", str(home))
    monkeypatch.delenv("LINCTL_API_KEY", raising=False)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    monkeypatch.delenv("LINCTL_API_URL", raising=False)
    return home

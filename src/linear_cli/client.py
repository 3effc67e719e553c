"""HTTP transport for the Linear GraphQL API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, TypeVar

import httpx

from . import config
from .queries import RATE_LIMIT_PROBE_QUERY

LOGGER = logging.getLogger(__name__)

USER_AGENT = "linear-cli/0.1.0"
REQUEST_TIMEOUT_SECONDS = 30.0

T = TypeVar("T")


class LinearApiError(RuntimeError):
    """Raised when a call to the Linear API fails."""


class MarshalError(LinearApiError):
    """The request envelope could not be serialized."""


class TransportError(LinearApiError):
    """The request never produced an HTTP response."""


class HTTPStatusError(LinearApiError):
    """The API answered with a status other than 200."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"API request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(LinearApiError):
    """The response body or its data payload had an unexpected shape."""


@dataclass(frozen=True)
class GraphQLErrorDetail:
    message: str
    locations: list[dict[str, int]] = field(default_factory=list)
    path: list[Any] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "GraphQLErrorDetail":
        if not isinstance(payload, Mapping):
            return cls(message=str(payload))
        return cls(
            message=str(payload.get("message") or "Unknown Linear API error."),
            locations=list(payload.get("locations") or []),
            path=list(payload.get("path") or []),
        )


class GraphQLError(LinearApiError):
    """The server reported one or more operation errors."""

    def __init__(self, errors: list[GraphQLErrorDetail]):
        messages = "; ".join(error.message for error in errors)
        super().__init__(f"GraphQL errors: {messages}")
        self.errors = errors


class OperationFailedError(LinearApiError):
    """A mutation completed but reported ``success: false``."""


@dataclass(frozen=True)
class RateLimit:
    """Request and complexity quotas reported by the last response."""

    request_limit: int = 0
    request_remaining: int = 0
    request_reset: datetime | None = None
    complexity: int = 0
    complexity_limit: int = 0
    complexity_remaining: int = 0
    complexity_reset: datetime | None = None

    HEADERS = (
        "X-RateLimit-Requests-Limit",
        "X-RateLimit-Requests-Remaining",
        "X-RateLimit-Requests-Reset",
        "X-Complexity",
        "X-RateLimit-Complexity-Limit",
        "X-RateLimit-Complexity-Remaining",
        "X-RateLimit-Complexity-Reset",
    )

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimit | None":
        """Build a snapshot, or return ``None`` when no quota header is present."""
        if not any(headers.get(name) for name in cls.HEADERS):
            return None
        return cls(
            request_limit=_header_int(headers, "X-RateLimit-Requests-Limit"),
            request_remaining=_header_int(headers, "X-RateLimit-Requests-Remaining"),
            request_reset=_header_time(headers, "X-RateLimit-Requests-Reset"),
            complexity=_header_int(headers, "X-Complexity"),
            complexity_limit=_header_int(headers, "X-RateLimit-Complexity-Limit"),
            complexity_remaining=_header_int(
                headers, "X-RateLimit-Complexity-Remaining"
            ),
            complexity_reset=_header_time(headers, "X-RateLimit-Complexity-Reset"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestLimit": self.request_limit,
            "requestRemaining": self.request_remaining,
            "requestReset": _isoformat(self.request_reset),
            "complexity": self.complexity,
            "complexityLimit": self.complexity_limit,
            "complexityRemaining": self.complexity_remaining,
            "complexityReset": _isoformat(self.complexity_reset),
        }


class LinearClient:
    """Thin wrapper around the Linear GraphQL API.

    ``last_rate_limit`` holds the quota snapshot of the most recent response
    that carried rate-limit headers. It is overwritten by every such call,
    including calls that end in an error.
    """

    def __init__(
        self,
        token: str,
        endpoint: str | None = None,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        self.endpoint = endpoint or config.get_api_url()
        self.last_rate_limit: RateLimit | None = None
        self._client = httpx.Client(
            headers={
                "Authorization": token,
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "LinearClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        decode: Callable[[Any], T] | None = None,
    ) -> T | None:
        """Run one operation and hand its ``data`` payload to ``decode``.

        Returns ``None`` when no decoder is given. ``decode`` is never called
        for a failed operation.
        """
        data = self._request(query, variables)
        if decode is None:
            return None
        try:
            return decode(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"failed to unmarshal data: {exc}") from exc

    def execute_raw(
        self, query: str, variables: Mapping[str, Any] | None = None
    ) -> Any:
        """Run one operation and return its ``data`` payload untouched."""
        return self._request(query, variables)

    def get_rate_limit(self) -> RateLimit:
        """Issue a throwaway query and return the quotas it reported."""
        self.last_rate_limit = None
        self.execute(RATE_LIMIT_PROBE_QUERY)
        if self.last_rate_limit is None:
            raise LinearApiError("no rate limit info available")
        return self.last_rate_limit

    def _request(self, query: str, variables: Mapping[str, Any] | None) -> Any:
        envelope: dict[str, Any] = {"query": query}
        if variables:
            envelope["variables"] = dict(variables)
        try:
            body = json.dumps(envelope)
        except (TypeError, ValueError) as exc:
            raise MarshalError(f"failed to marshal request: {exc}") from exc

        LOGGER.debug(
            "POST %s (variables: %s)", self.endpoint, sorted(envelope.get("variables", {}))
        )
        try:
            response = self._client.post(self.endpoint, content=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}") from exc

        snapshot = RateLimit.from_headers(response.headers)
        if snapshot is not None:
            self.last_rate_limit = snapshot
            LOGGER.debug(
                "Rate limit: %s/%s requests remaining, last query complexity %s",
                snapshot.request_remaining,
                snapshot.request_limit,
                snapshot.complexity,
            )

        if response.status_code != 200:
            raise HTTPStatusError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"failed to parse response: {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodeError("failed to parse response: expected a JSON object")

        errors = payload.get("errors")
        if errors is not None and not isinstance(errors, list):
            raise DecodeError("failed to parse response: errors must be a list")
        if errors:
            details = [GraphQLErrorDetail.from_payload(error) for error in errors]
            LOGGER.debug("GraphQL errors: %s", [error.message for error in details])
            raise GraphQLError(details)
        return payload.get("data")


def _header_int(headers: Mapping[str, str], name: str) -> int:
    value = headers.get(name)
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def _header_time(headers: Mapping[str, str], name: str) -> datetime | None:
    value = headers.get(name)
    if not value:
        return None
    try:
        millis = int(value)
    except ValueError:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None

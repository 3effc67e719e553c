"""Tests for the LinearClient transport."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import httpx
import pytest

from linear_cli.client import (
    USER_AGENT,
    DecodeError,
    GraphQLError,
    HTTPStatusError,
    LinearApiError,
    LinearClient,
    MarshalError,
    RateLimit,
    TransportError,
)

RATE_HEADERS = {
    "X-RateLimit-Requests-Limit": "1500",
    "X-RateLimit-Requests-Remaining": "1499",
    "X-RateLimit-Requests-Reset": "1700000000000",
    "X-Complexity": "12",
    "X-RateLimit-Complexity-Limit": "250000",
    "X-RateLimit-Complexity-Remaining": "249988",
    "X-RateLimit-Complexity-Reset": "1700000060000",
}


class TestRequestEnvelope:
    """Test what goes over the wire."""

    def test_client_initialization(self) -> None:
        """Test client is initialized with correct headers."""
        with patch("linear_cli.client.httpx.Client") as mock_httpx:
            LinearClient(token="test-token")
            call_kwargs = mock_httpx.call_args[1]
            assert call_kwargs["headers"]["Authorization"] == "test-token"
            assert call_kwargs["headers"]["Content-Type"] == "application/json"
            assert call_kwargs["headers"]["User-Agent"] == USER_AGENT

    def test_context_manager_closes_http_client(self) -> None:
        with patch("linear_cli.client.httpx.Client") as mock_httpx:
            with LinearClient(token="test-token"):
                pass
            mock_httpx.return_value.close.assert_called_once()

    def test_endpoint_defaults_to_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINCTL_API_URL", "https://example.test/graphql")
        with patch("linear_cli.client.httpx.Client"):
            assert LinearClient("k").endpoint == "https://example.test/graphql"

    def test_variables_omitted_when_empty(self, linear, client) -> None:
        """Test a query without variables sends only the query key."""
        linear.reply({"viewer": {"id": "u1"}})

        client.execute("query { viewer { id } }", {})

        assert linear.last_body == {"query": "query { viewer { id } }"}

    def test_variables_sent_when_present(self, linear, client) -> None:
        linear.reply({"issue": None})

        client.execute("query Q($id: String!) { issue(id: $id) { id } }", {"id": "ENG-1"})

        assert linear.last_body["variables"] == {"id": "ENG-1"}

    def test_posts_to_endpoint_with_auth_header(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}})

        client.execute("query { viewer { id } }")

        request = linear.requests[0]
        assert request.method == "POST"
        assert request.headers["Authorization"] == "test-token"
        assert request.headers["User-Agent"] == USER_AGENT

    def test_unserializable_variables_raise_marshal_error(self, linear, client) -> None:
        with pytest.raises(MarshalError, match="failed to marshal request"):
            client.execute("query { viewer { id } }", {"value": object()})
        assert linear.requests == []


class TestResponseHandling:
    """Test classification of responses into results and errors."""

    def test_decode_receives_data_payload(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1", "name": "Ada"}})

        result = client.execute("query { viewer { id name } }", decode=lambda data: data["viewer"])

        assert result == {"id": "u1", "name": "Ada"}

    def test_no_decoder_returns_none(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}})
        assert client.execute("query { viewer { id } }") is None

    def test_non_200_status_raises_before_parsing(self, linear, client) -> None:
        """Test a non-200 body is reported verbatim, even when it is not JSON."""
        linear.reply(status=401, body="Authentication required")

        with pytest.raises(HTTPStatusError) as excinfo:
            client.execute("query { viewer { id } }")

        assert excinfo.value.status_code == 401
        assert "API request failed with status 401: Authentication required" in str(excinfo.value)

    def test_invalid_json_raises_decode_error(self, linear, client) -> None:
        linear.reply(body="<html>oops</html>")

        with pytest.raises(DecodeError, match="failed to parse response"):
            client.execute("query { viewer { id } }")

    def test_graphql_errors_raise_even_with_data(self, linear, client) -> None:
        linear.reply(
            {"viewer": {"id": "u1"}},
            errors=[{"message": "Entity not found", "path": ["issue"]}],
        )

        with pytest.raises(GraphQLError) as excinfo:
            client.execute("query { viewer { id } }", decode=lambda data: data)

        assert str(excinfo.value) == "GraphQL errors: Entity not found"
        assert excinfo.value.errors[0].path == ["issue"]

    def test_all_error_messages_are_joined(self, linear, client) -> None:
        linear.reply(None, errors=[{"message": "first"}, {"message": "second"}])

        with pytest.raises(GraphQLError, match="first; second"):
            client.execute("query { viewer { id } }")

    def test_unauthorized_error_skips_decoder(self, linear, client) -> None:
        linear.reply(None, errors=[{"message": "Unauthorized"}])
        decode = Mock()

        with pytest.raises(GraphQLError, match="Unauthorized") as excinfo:
            client.execute("query Me { viewer { id } }", decode=decode)

        assert len(excinfo.value.errors) == 1
        decode.assert_not_called()

    def test_errors_must_be_a_list(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}}, errors="boom")

        with pytest.raises(DecodeError, match="errors must be a list"):
            client.execute("query { viewer { id } }", decode=lambda data: data)

    def test_decoder_failure_raises_decode_error(self, linear, client) -> None:
        linear.reply({"viewer": None})

        with pytest.raises(DecodeError, match="failed to unmarshal data"):
            client.execute("query { viewer { id } }", decode=lambda data: data["viewer"]["id"])

    def test_connection_failure_raises_transport_error(self, linear, client) -> None:
        linear.fail_with(httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError, match="request failed"):
            client.execute("query { viewer { id } }")

    def test_execute_raw_returns_data_untouched(self, linear, client) -> None:
        linear.reply({"teams": {"nodes": [{"id": "t1"}]}})

        assert client.execute_raw("query { teams { nodes { id } } }") == {
            "teams": {"nodes": [{"id": "t1"}]}
        }

    def test_errors_are_subclasses_of_linear_api_error(self) -> None:
        for error in (MarshalError, TransportError, HTTPStatusError, DecodeError, GraphQLError):
            assert issubclass(error, LinearApiError)


class TestRateLimit:
    """Test the rate-limit snapshot kept on the client."""

    def test_snapshot_recorded_from_headers(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)

        client.execute("query { viewer { id } }")

        snapshot = client.last_rate_limit
        assert snapshot.request_limit == 1500
        assert snapshot.request_remaining == 1499
        assert snapshot.complexity == 12
        assert snapshot.complexity_remaining == 249988
        assert snapshot.request_reset == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_snapshot_recorded_even_when_request_fails(self, linear, client) -> None:
        linear.reply(status=429, body="rate limited", headers=RATE_HEADERS)

        with pytest.raises(HTTPStatusError):
            client.execute("query { viewer { id } }")

        assert client.last_rate_limit.request_remaining == 1499

    def test_snapshot_kept_when_headers_absent(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)
        linear.reply({"viewer": {"id": "u1"}})

        client.execute("query { viewer { id } }")
        client.execute("query { viewer { id } }")

        assert client.last_rate_limit.request_limit == 1500

    def test_snapshots_are_per_client(self, linear) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)
        first = linear.client()
        second = linear.client()

        first.execute("query { viewer { id } }")

        assert first.last_rate_limit is not None
        assert second.last_rate_limit is None

    def test_get_rate_limit_probes_the_api(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)

        snapshot = client.get_rate_limit()

        assert snapshot.complexity_limit == 250000
        assert "viewer" in linear.last_body["query"]

    def test_get_rate_limit_without_headers_fails(self, linear, client) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)
        linear.reply({"viewer": {"id": "u1"}})
        client.execute("query { viewer { id } }")

        with pytest.raises(LinearApiError, match="no rate limit info available"):
            client.get_rate_limit()

    def test_unparseable_headers_default_to_zero(self) -> None:
        snapshot = RateLimit.from_headers(
            {"X-RateLimit-Requests-Limit": "lots", "X-Complexity": "3"}
        )
        assert snapshot.request_limit == 0
        assert snapshot.complexity == 3
        assert snapshot.request_reset is None

    def test_no_headers_means_no_snapshot(self) -> None:
        assert RateLimit.from_headers({}) is None

    def test_to_dict_uses_api_field_names(self) -> None:
        snapshot = RateLimit.from_headers(RATE_HEADERS)
        data = snapshot.to_dict()
        assert data["requestRemaining"] == 1499
        assert data["complexityReset"] == "2023-11-14T22:14:20+00:00"

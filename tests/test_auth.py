"""Tests for credential storage."""

from __future__ import annotations

import json
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from linear_cli import auth
from linear_cli.auth import AuthConfig, AuthError, NotAuthenticatedError, TokenExpiredError


class TestAuthConfig:
    """Test the stored credential record."""

    def test_api_key_is_sent_verbatim(self) -> None:
        assert AuthConfig(api_key="lin_api_123").authorization_header() == "lin_api_123"

    def test_access_token_uses_bearer_scheme(self) -> None:
        assert AuthConfig(access_token="tok").authorization_header() == "Bearer tok"

    def test_api_key_wins_over_access_token(self) -> None:
        config = AuthConfig(api_key="key", access_token="tok")
        assert config.authorization_header() == "key"

    def test_empty_config_is_not_authenticated(self) -> None:
        with pytest.raises(NotAuthenticatedError, match="auth login"):
            AuthConfig().authorization_header()

    def test_expiry(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert not AuthConfig(api_key="k").is_expired(now)
        assert AuthConfig(access_token="t", expires_at=now - timedelta(seconds=1)).is_expired(now)
        assert not AuthConfig(access_token="t", expires_at=now + timedelta(hours=1)).is_expired(now)

    def test_round_trip_through_dict(self) -> None:
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
        config = AuthConfig(access_token="t", expires_at=expires)
        assert AuthConfig.from_dict(config.to_dict()) == config

    def test_naive_expiry_is_treated_as_utc(self) -> None:
        config = AuthConfig.from_dict({"access_token": "t", "expires_at": "2030-01-01T00:00:00"})
        assert config.expires_at.tzinfo is not None

    def test_invalid_expiry_is_rejected(self) -> None:
        with pytest.raises(AuthError, match="invalid expires_at"):
            AuthConfig.from_dict({"expires_at": "soon"})


class TestAuthStore:
    """Test reading and writing the credentials file."""

    def test_save_writes_owner_only_file(self, isolated_home: Path) -> None:
        path = auth.save_auth(AuthConfig(api_key="lin_api_123"))

        assert path == isolated_home / ".linctl-auth.json"
        assert json.loads(path.read_text()) == {"api_key": "lin_api_123"}
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_save_tightens_existing_file(self, isolated_home: Path) -> None:
        path = isolated_home / ".linctl-auth.json"
        path.write_text("{}")
        path.chmod(0o644)

        auth.save_auth(AuthConfig(api_key="k"))

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_load_missing_file_is_not_authenticated(self) -> None:
        with pytest.raises(NotAuthenticatedError):
            auth.load_auth()

    def test_load_corrupt_file(self, isolated_home: Path) -> None:
        (isolated_home / ".linctl-auth.json").write_text("not json")

        with pytest.raises(AuthError, match="Failed to parse"):
            auth.load_auth()

    def test_load_expired_token(self, isolated_home: Path) -> None:
        (isolated_home / ".linctl-auth.json").write_text(
            json.dumps({"access_token": "t", "expires_at": "2000-01-01T00:00:00+00:00"})
        )

        with pytest.raises(TokenExpiredError, match="token expired"):
            auth.load_auth()

    def test_environment_key_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        auth.save_auth(AuthConfig(api_key="stored"))
        monkeypatch.setenv("LINEAR_API_KEY", "  from-env  ")

        assert auth.authorization_header() == "from-env"
        assert auth.auth_source() == "environment ($LINEAR_API_KEY)"

    def test_linctl_variable_is_checked_first(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "second")
        monkeypatch.setenv("LINCTL_API_KEY", "first")

        assert auth.authorization_header() == "first"

    def test_stored_key_used_without_environment(self, isolated_home: Path) -> None:
        auth.save_auth(AuthConfig(api_key="stored"))

        assert auth.authorization_header() == "stored"
        assert auth.auth_source() == str(isolated_home / ".linctl-auth.json")

    def test_logout_removes_file(self, isolated_home: Path) -> None:
        auth.save_auth(AuthConfig(api_key="stored"))

        assert auth.logout() is True
        assert not (isolated_home / ".linctl-auth.json").exists()
        assert auth.logout() is False

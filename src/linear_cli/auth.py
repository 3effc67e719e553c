"""Local credential storage for the Linear API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import config

LOGGER = logging.getLogger(__name__)


class AuthError(RuntimeError):
    """Base class for credential problems."""


class NotAuthenticatedError(AuthError):
    def __init__(self, message: str = "not authenticated"):
        super().__init__(f"{message}. Run 'linctl auth login' first.")


class TokenExpiredError(AuthError):
    def __init__(self) -> None:
        super().__init__("token expired. Run 'linctl auth login' again.")


@dataclass
class AuthConfig:
    api_key: str | None = None
    access_token: str | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthConfig":
        expires_raw = data.get("expires_at")
        expires_at = None
        if expires_raw:
            try:
                expires_at = datetime.fromisoformat(str(expires_raw).replace("Z", "+00:00"))
            except ValueError as exc:
                raise AuthError(f"invalid expires_at value: {expires_raw}") from exc
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        return cls(
            api_key=data.get("api_key") or None,
            access_token=data.get("access_token") or None,
            expires_at=expires_at,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.api_key:
            data["api_key"] = self.api_key
        if self.access_token:
            data["access_token"] = self.access_token
        if self.expires_at is not None:
            data["expires_at"] = self.expires_at.isoformat()
        return data

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        current = now or datetime.now(timezone.utc)
        return current > self.expires_at

    def authorization_header(self) -> str:
        if self.api_key:
            return self.api_key
        if self.access_token:
            return f"Bearer {self.access_token}"
        raise NotAuthenticatedError("no valid authentication found")


def save_auth(auth: AuthConfig, path: Path | None = None) -> Path:
    """Write credentials with owner-only permissions."""
    target = path or config.get_auth_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(auth.to_dict(), indent=2)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(payload)
    # O_CREAT only applies the mode to new files.
    os.chmod(target, 0o600)
    LOGGER.debug("Saved credentials to %s", target)
    return target


def load_auth(path: Path | None = None) -> AuthConfig:
    """Read credentials, refusing ones whose expiry has passed."""
    source = path or config.get_auth_path()
    try:
        raw = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotAuthenticatedError() from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise AuthError(f"Failed to parse {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise AuthError(f"{source} must contain a JSON object.")

    auth = AuthConfig.from_dict(data)
    if auth.is_expired():
        raise TokenExpiredError()
    return auth


def authorization_header(path: Path | None = None) -> str:
    """Value for the Authorization header of the next request.

    An API key exported in the environment wins over the stored credentials.
    """
    env_key = config.get_env_api_key()
    if env_key is not None:
        name, value = env_key
        LOGGER.debug("Using API key from $%s", name)
        return value
    return load_auth(path).authorization_header()


def auth_source(path: Path | None = None) -> str:
    env_key = config.get_env_api_key()
    if env_key is not None:
        return f"environment (${env_key[0]})"
    return str(path or config.get_auth_path())


def logout(path: Path | None = None) -> bool:
    """Remove stored credentials. Returns False when there was nothing to remove."""
    target = path or config.get_auth_path()
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    return True

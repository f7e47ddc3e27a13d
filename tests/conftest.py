"""Common test fixtures and utilities."""

import json
import time
from typing import Any, Callable, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests

from spores.api import SpotifyAPI
from spores.config import AppCredentials
from spores.token_store import Credential, TokenStore


@pytest.fixture
def app_credentials() -> AppCredentials:
    """Application credentials with a loopback redirect URI."""
    return AppCredentials(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://127.0.0.1:8888/callback",
    )


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    """Token store backed by a temporary file."""
    return TokenStore(str(tmp_path / "spores" / "token_cache.json"))


@pytest.fixture
def fresh_credential() -> Credential:
    """Credential valid for another hour."""
    return Credential(
        access_token="fresh-access",
        refresh_token="refresh-1",
        expires_at=time.time() + 3600,
    )


@pytest.fixture
def expired_credential() -> Credential:
    """Credential that expired ten minutes ago."""
    return Credential(
        access_token="stale-access",
        refresh_token="refresh-1",
        expires_at=time.time() - 600,
    )


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for mock requests.Response objects."""

    def _make(
        status_code: int = 200,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        reason: str = "OK",
    ) -> MagicMock:
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.headers = headers or {}
        response.reason = reason
        if body is None:
            response.content = b""
            response.json.side_effect = ValueError("No JSON body")
        else:
            response.content = json.dumps(body).encode()
            response.json.return_value = body
        return response

    return _make


@pytest.fixture
def auth_session(fresh_credential) -> MagicMock:
    """Mock AuthSession that always hands out a fresh credential."""
    session = MagicMock()
    session.credential.return_value = fresh_credential
    return session


@pytest.fixture
def http() -> MagicMock:
    """Mock requests.Session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(auth_session, http) -> SpotifyAPI:
    """SpotifyAPI wired to the mock session and HTTP client."""
    return SpotifyAPI(auth_session, http=http)


def raw_track(index: int) -> Dict[str, Any]:
    """Build a Web API track object."""
    return {
        "type": "track",
        "id": f"track{index}",
        "name": f"Track {index}",
        "uri": f"spotify:track:track{index}",
        "duration_ms": 180000 + index,
        "album": {"type": "album", "name": f"Album {index}"},
        "artists": [{"type": "artist", "name": "Artist A"}, {"type": "artist", "name": "Artist B"}],
    }


@pytest.fixture
def track_factory() -> Callable[[int], Dict[str, Any]]:
    return raw_track

"""Tests for the token cache."""

import json
import os
import time
from unittest.mock import patch

import pytest

from spores.errors import TokenCacheError
from spores.token_store import Credential, TokenStore


def test_load_missing_file_returns_none(token_store):
    assert token_store.load() is None


def test_save_then_load(token_store, fresh_credential):
    token_store.save(fresh_credential)

    loaded = token_store.load()

    assert loaded == fresh_credential


def test_save_creates_directory_and_restricts_mode(token_store, fresh_credential):
    token_store.save(fresh_credential)

    assert os.path.exists(token_store.path)
    assert os.stat(token_store.path).st_mode & 0o777 == 0o600


def test_load_ignores_unknown_fields(tmp_path):
    path = tmp_path / "token_cache.json"
    path.write_text(
        json.dumps(
            {
                "access_token": "a",
                "refresh_token": "r",
                "expires_at": 1700000000,
                "added_in_a_later_version": {"nested": True},
            }
        )
    )

    credential = TokenStore(str(path)).load()

    assert credential == Credential("a", "r", 1700000000.0)


@pytest.mark.parametrize(
    "content",
    [
        "not json {{{",
        json.dumps(["a", "list"]),
        json.dumps({"access_token": "a", "expires_at": 1}),
        json.dumps({"access_token": "a", "refresh_token": "r", "expires_at": "soon"}),
        json.dumps({"access_token": None, "refresh_token": "r", "expires_at": 1}),
        json.dumps({"access_token": "a", "refresh_token": 42, "expires_at": 1}),
    ],
)
def test_unusable_cache_is_treated_as_missing(tmp_path, content):
    path = tmp_path / "token_cache.json"
    path.write_text(content)

    assert TokenStore(str(path)).load() is None


def test_cache_with_invalid_utf8_is_treated_as_missing(tmp_path):
    path = tmp_path / "token_cache.json"
    path.write_bytes(b'{"access_token": "\xff\xfe"}')

    assert TokenStore(str(path)).load() is None


def test_unreadable_cache_raises(tmp_path):
    path = tmp_path / "token_cache.json"
    path.write_text("{}")

    with patch("builtins.open", side_effect=PermissionError("denied")):
        with pytest.raises(TokenCacheError):
            TokenStore(str(path)).load()


def test_failed_save_keeps_previous_cache(token_store, fresh_credential):
    token_store.save(fresh_credential)
    replacement = Credential("new-access", "new-refresh", time.time() + 7200)

    with patch("spores.token_store.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(TokenCacheError):
            token_store.save(replacement)

    assert token_store.load() == fresh_credential
    leftovers = [
        name for name in os.listdir(os.path.dirname(token_store.path)) if name.endswith(".tmp")
    ]
    assert leftovers == []


def test_is_expired_with_margin():
    credential = Credential("a", "r", expires_at=1000.0)

    assert not credential.is_expired(now=900.0)
    assert credential.is_expired(margin=120, now=900.0)
    assert credential.is_expired(now=1000.0)

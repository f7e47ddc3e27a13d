"""Tests for configuration loading."""

import pytest

from spores import config
from spores.errors import ConfigInvalidError, ConfigMissingError


def test_missing_config_writes_template(tmp_path):
    path = tmp_path / "spores" / "config.toml"

    with pytest.raises(ConfigMissingError) as exc_info:
        config.load_app_credentials(str(path))

    assert exc_info.value.path == str(path)
    content = path.read_text()
    assert 'client_id = ""' in content
    assert 'client_secret = ""' in content
    assert "# redirect_uri" in content


def test_template_is_then_invalid(tmp_path):
    """A freshly written template has empty credentials, which is a hard error."""
    path = str(tmp_path / "config.toml")
    with pytest.raises(ConfigMissingError):
        config.load_app_credentials(path)

    with pytest.raises(ConfigInvalidError, match="must be set"):
        config.load_app_credentials(path)


def test_load_with_default_redirect(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('client_id = "cid"\nclient_secret = "secret"\n')

    app = config.load_app_credentials(str(path))

    assert app == config.AppCredentials("cid", "secret", config.DEFAULT_REDIRECT_URI)


def test_load_with_redirect(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'client_id = "cid"\nclient_secret = "secret"\nredirect_uri = "http://127.0.0.1:9000/cb"\n'
    )

    assert config.load_app_credentials(str(path)).redirect_uri == "http://127.0.0.1:9000/cb"


def test_unparsable_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("client_id = \n")

    with pytest.raises(ConfigInvalidError, match="Failed to parse"):
        config.load_app_credentials(str(path))


def test_render_config_round_trips_through_loader(tmp_path):
    path = config.write_config(
        config.render_config("cid", "secret", "http://127.0.0.1:8888/callback"),
        str(tmp_path / "config.toml"),
    )

    app = config.load_app_credentials(path)

    assert (app.client_id, app.client_secret) == ("cid", "secret")

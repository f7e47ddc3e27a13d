"""Test cases for CLI functionality."""

import json
from unittest.mock import MagicMock, patch

import pytest

from spores import cli
from spores.errors import AuthExpiredError, ConfigInvalidError, ConfigMissingError
from spores.paginator import Page


@pytest.fixture
def mock_build_api(api):
    with patch("spores.cli.build_api", return_value=api) as mock_build:
        yield mock_build


def read_json(capsys):
    return json.loads(capsys.readouterr().out)


def test_search_prints_json(mock_build_api, http, make_response, track_factory, capsys):
    http.request.return_value = make_response(
        body={"tracks": {"items": [track_factory(i) for i in range(5)], "total": 5}}
    )

    exit_code = cli.main(["search", "test", "--type", "track", "--limit", "5"])

    assert exit_code == 0
    output = read_json(capsys)
    assert output["type"] == "track"
    assert len(output["items"]) == 5


def test_playlist_add_partial_failure(mock_build_api, http, make_response, capsys):
    http.request.side_effect = [
        make_response(status_code=201, body={"snapshot_id": "snap1"}),
        make_response(status_code=500, body={"error": {"status": 500, "message": "Server error"}}),
    ]

    exit_code = cli.main(["playlist", "add", "pl1", "t1", "t2"])

    assert exit_code == 1
    output = read_json(capsys)
    assert list(output) == ["error"]
    assert "after 1 of 2" in output["error"]
    assert http.request.call_count == 2


def test_malformed_identifier(mock_build_api, http, capsys):
    exit_code = cli.main(["playlist", "info", "spotify:track:abc"])

    assert exit_code == 1
    assert "expected kind 'playlist', found 'track'" in read_json(capsys)["error"]
    http.request.assert_not_called()


def test_auth_expired(capsys):
    api = MagicMock()
    api.current_user_playlists.side_effect = AuthExpiredError("Token refresh was rejected")
    with patch("spores.cli.build_api", return_value=api):
        exit_code = cli.main(["playlist", "list"])

    assert exit_code == 1
    assert read_json(capsys) == {"error": "Token refresh was rejected"}


def test_playlist_list(capsys):
    api = MagicMock()
    api.current_user_playlists.return_value = Page(
        items=[{"type": "playlist", "id": "p1", "name": "P1", "public": True}], has_more=False
    )
    with patch("spores.cli.build_api", return_value=api):
        exit_code = cli.main(["playlist", "list"])

    assert exit_code == 0
    assert read_json(capsys)["total"] == 1


def test_save_artist_error(mock_build_api, capsys):
    exit_code = cli.main(["save", "--type", "artist", "a1"])

    assert exit_code == 1
    assert read_json(capsys) == {
        "error": "saving artists is not supported; use 'follow' instead"
    }


def test_config_missing_prints_no_json(capsys):
    with patch("spores.cli.build_api", side_effect=ConfigMissingError("/tmp/spores/config.toml")):
        exit_code = cli.main(["playlist", "list"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert "Created config file at /tmp/spores/config.toml" in captured.err


def test_config_invalid(capsys):
    with patch(
        "spores.cli.build_api",
        side_effect=ConfigInvalidError("client_id and client_secret must be set"),
    ):
        exit_code = cli.main(["search", "test"])

    assert exit_code == 1
    assert read_json(capsys) == {"error": "client_id and client_secret must be set"}


def test_unexpected_error_has_no_traceback(capsys):
    api = MagicMock()
    api.search.side_effect = RuntimeError("boom")
    with patch("spores.cli.build_api", return_value=api):
        exit_code = cli.main(["search", "test"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert json.loads(captured.out) == {"error": "boom"}
    assert "Traceback" not in captured.err


def test_configure_does_not_authenticate(capsys):
    command = MagicMock()
    command.run.return_value = {"config": "/tmp/config.toml"}
    with patch("spores.cli.build_api") as mock_build:
        with patch("spores.cli.commands.ConfigureCommand", return_value=command):
            exit_code = cli.main(["configure"])

    assert exit_code == 0
    mock_build.assert_not_called()
    assert read_json(capsys) == {"config": "/tmp/config.toml"}


def test_no_command_prints_help():
    assert cli.main([]) == 1


def test_invalid_arguments():
    assert cli.main(["search", "test", "--type", "podcast"]) == 1
    assert cli.main(["playlist"]) == 1


def test_help_exits_zero():
    assert cli.main(["--help"]) == 0


@pytest.mark.parametrize(
    "argv, expected_cls",
    [
        (["search", "q"], "SearchCommand"),
        (["save", "t1"], "SaveCommand"),
        (["playlist", "list"], "PlaylistListCommand"),
        (["playlist", "create", "Mix", "--public"], "PlaylistCreateCommand"),
        (["playlist", "info", "pl1"], "PlaylistInfoCommand"),
        (["playlist", "add", "pl1", "t1"], "PlaylistAddCommand"),
        (["configure"], "ConfigureCommand"),
    ],
)
def test_build_command(argv, expected_cls):
    args = cli.create_parser().parse_args(argv)

    command = cli.build_command(args, MagicMock())

    assert type(command).__name__ == expected_cls

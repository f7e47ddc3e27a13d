"""Command-line interface for Spotify search, playlist and library operations."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from . import commands, config
from .api import SEARCH_TYPES, SpotifyAPI
from .auth import AuthSession
from .commands.search import DEFAULT_LIMIT
from .errors import ConfigMissingError, SporesError, log_error
from .logging_config import configure_logging, get_logger
from .token_store import TokenStore

logger = get_logger(__name__)

ITEM_TYPES = list(SEARCH_TYPES)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(prog="spores", description="Spotify playlist manager")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search Spotify")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument(
        "-t", "--type", choices=ITEM_TYPES, default="track", help="Type of item to search for"
    )
    search_parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Maximum number of results",
    )

    # Playlist commands
    playlist_parser = subparsers.add_parser("playlist", help="Manage playlists")
    playlist_subparsers = playlist_parser.add_subparsers(
        dest="playlist_command", help="Playlist command"
    )
    playlist_subparsers.required = True

    playlist_subparsers.add_parser("list", help="List your playlists")

    create_parser_ = playlist_subparsers.add_parser("create", help="Create a new playlist")
    create_parser_.add_argument("name", help="Name of the playlist")
    create_parser_.add_argument("--public", action="store_true", help="Make the playlist public")
    create_parser_.add_argument("-d", "--description", help="Description for the playlist")

    info_parser = playlist_subparsers.add_parser("info", help="Show details of a playlist")
    info_parser.add_argument("playlist", help="Playlist ID or URI")

    add_parser = playlist_subparsers.add_parser("add", help="Add tracks to a playlist")
    add_parser.add_argument("playlist", help="Playlist ID or URI")
    add_parser.add_argument("tracks", nargs="+", help="Track IDs or URIs to add")

    # Configure command
    subparsers.add_parser("configure", help="Configure Spotify credentials interactively")

    # Save command
    save_parser = subparsers.add_parser(
        "save", help="Save a track, album, or playlist to your library"
    )
    save_parser.add_argument(
        "-t", "--type", choices=ITEM_TYPES, default="track", help="Type of item to save"
    )
    save_parser.add_argument("ids", nargs="+", help="IDs or URIs of items to save")

    return parser


def emit(document: Dict[str, Any]) -> None:
    """Print one pretty-printed JSON document to stdout."""
    print(json.dumps(document, indent=2, ensure_ascii=False))


def build_api() -> SpotifyAPI:
    """Create an API client from the config file and the token cache.

    Raises:
        ConfigMissingError: If the config file had to be created
        ConfigInvalidError: If the config file is unusable
    """
    app = config.load_app_credentials()
    session = AuthSession(app, TokenStore(config.TOKEN_CACHE_FILE))
    return SpotifyAPI(session)


def build_command(args: argparse.Namespace, api: Optional[SpotifyAPI]) -> commands.SporesCommand:
    """Map parsed arguments to a command instance."""
    if args.command == "search":
        return commands.SearchCommand(api, args.query, args.type, args.limit)
    if args.command == "save":
        return commands.SaveCommand(api, args.type, args.ids)
    if args.command == "configure":
        return commands.ConfigureCommand()

    if args.playlist_command == "list":
        return commands.PlaylistListCommand(api)
    if args.playlist_command == "create":
        return commands.PlaylistCreateCommand(api, args.name, args.public, args.description)
    if args.playlist_command == "info":
        return commands.PlaylistInfoCommand(api, args.playlist)
    return commands.PlaylistAddCommand(api, args.playlist, args.tracks)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        int: Exit code
    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 1 if e.code == 2 else e.code

    configure_logging(args.debug)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    try:
        api = None if args.command == "configure" else build_api()
        command = build_command(args, api)
        command.validate()
        result = command.run()
    except ConfigMissingError as e:
        # First run: the template has been written, nothing to report as JSON
        sys.stderr.write(f"{e}\n")
        return 1
    except (SporesError, ValueError) as e:
        logger.debug("Command failed: %s", str(e))
        emit({"error": str(e)})
        return 1
    except Exception as e:
        log_error(e, "Unexpected error")
        logger.debug("Traceback", exc_info=True)
        emit({"error": str(e) or type(e).__name__})
        return 1

    emit(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())

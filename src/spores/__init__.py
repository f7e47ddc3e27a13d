"""Spotify search and playlist management from the command line."""

__version__ = "0.1.0"

# Import all public components
from .api import SpotifyAPI
from .auth import AuthSession, AuthState
from .cli import main
from .commands import SporesCommand
from .errors import SporesError
from .ids import ResourceKind, ResourceRef, resolve
from .logging_config import configure_logging, get_logger
from .normalize import normalize
from .paginator import Page, drain
from .token_store import Credential, TokenStore

__all__ = [
    "AuthSession",
    "AuthState",
    "Credential",
    "Page",
    "ResourceKind",
    "ResourceRef",
    "SporesCommand",
    "SporesError",
    "SpotifyAPI",
    "TokenStore",
    "configure_logging",
    "drain",
    "get_logger",
    "main",
    "normalize",
    "resolve",
]

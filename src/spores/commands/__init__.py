"""Command module initialization."""

from .base import SporesCommand
from .configure import ConfigureCommand  # noqa: F401
from .playlist import (  # noqa: F401
    PlaylistAddCommand,
    PlaylistCreateCommand,
    PlaylistInfoCommand,
    PlaylistListCommand,
)
from .save import SaveCommand  # noqa: F401
from .search import SearchCommand  # noqa: F401

__all__ = [
    "SporesCommand",
    "ConfigureCommand",
    "PlaylistAddCommand",
    "PlaylistCreateCommand",
    "PlaylistInfoCommand",
    "PlaylistListCommand",
    "SaveCommand",
    "SearchCommand",
]

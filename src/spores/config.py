"""Configuration and environment settings."""

import os
import tomllib
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigInvalidError, ConfigMissingError
from .logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()


def _default_config_dir() -> str:
    base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "spores")


# Directory Settings
CONFIG_DIR = os.getenv("SPORES_CONFIG_DIR", _default_config_dir())
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.toml")
TOKEN_CACHE_FILE = os.path.join(CONFIG_DIR, "token_cache.json")

# Spotify API Settings
AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE_URL = "https://api.spotify.com/v1"
# Spotify rejects "localhost" as a redirect host
DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"
SCOPES = [
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-public",
    "playlist-modify-private",
    "user-library-modify",
]
REQUEST_TIMEOUT = float(os.getenv("SPORES_REQUEST_TIMEOUT", "30"))

CONFIG_TEMPLATE = """# Spotify application credentials
# Create an app at https://developer.spotify.com/dashboard
client_id = "{client_id}"
client_secret = "{client_secret}"

# Must match the redirect URI registered in your Spotify app.
# Use 127.0.0.1, Spotify rejects "localhost".
{redirect_line}
"""


@dataclass(frozen=True)
class AppCredentials:
    """Spotify application credentials read from config.toml."""

    client_id: str
    client_secret: str
    redirect_uri: str = DEFAULT_REDIRECT_URI


def render_config(
    client_id: str = "", client_secret: str = "", redirect_uri: Optional[str] = None
) -> str:
    """Render the contents of a config.toml file.

    Without a redirect URI the redirect line is left commented out.
    """
    if redirect_uri:
        redirect_line = f'redirect_uri = "{redirect_uri}"'
    else:
        redirect_line = f'# redirect_uri = "{DEFAULT_REDIRECT_URI}"'
    return CONFIG_TEMPLATE.format(
        client_id=client_id, client_secret=client_secret, redirect_line=redirect_line
    )


def write_config(content: str, path: Optional[str] = None) -> str:
    """Write config.toml, creating its directory.

    Args:
        content: File contents
        path: Target file, defaults to CONFIG_FILE

    Returns:
        Path that was written
    """
    path = path or CONFIG_FILE
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.debug("Wrote config file %s", path)
    return path


def read_config(path: Optional[str] = None) -> dict:
    """Parse config.toml.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigInvalidError: If the file is not valid TOML
    """
    path = path or CONFIG_FILE
    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigInvalidError(f"Failed to parse {path}: {e}") from e


def load_app_credentials(path: Optional[str] = None) -> AppCredentials:
    """Load application credentials, bootstrapping a template on first run.

    Args:
        path: Config file, defaults to CONFIG_FILE

    Returns:
        AppCredentials

    Raises:
        ConfigMissingError: If no config existed (a template has been written)
        ConfigInvalidError: If the config cannot be parsed or lacks credentials
    """
    path = path or CONFIG_FILE
    if not os.path.exists(path):
        write_config(render_config(), path)
        raise ConfigMissingError(path)

    data = read_config(path)
    client_id = str(data.get("client_id") or "").strip()
    client_secret = str(data.get("client_secret") or "").strip()
    if not client_id or not client_secret:
        raise ConfigInvalidError(f"client_id and client_secret must be set in {path}")

    redirect_uri = str(data.get("redirect_uri") or "").strip() or DEFAULT_REDIRECT_URI
    return AppCredentials(
        client_id=client_id, client_secret=client_secret, redirect_uri=redirect_uri
    )

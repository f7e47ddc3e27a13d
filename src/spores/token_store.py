"""On-disk cache for the OAuth grant."""

import json
import os
import tempfile
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .errors import TokenCacheError
from .logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("access_token", "refresh_token", "expires_at")


@dataclass
class Credential:
    """An access/refresh token pair and the time the access token expires."""

    access_token: str
    refresh_token: str
    expires_at: float
    token_type: str = "Bearer"
    scope: str = ""

    def is_expired(self, margin: float = 0.0, now: Optional[float] = None) -> bool:
        """Check whether the access token is expired or will be within `margin` seconds."""
        if now is None:
            now = time.time()
        return self.expires_at - margin <= now

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        """Build a Credential from a cache snapshot, ignoring unknown keys.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a token is not a string
            ValueError: If expires_at is not numeric
        """
        for field in ("access_token", "refresh_token"):
            if not isinstance(data[field], str):
                raise TypeError(f"{field} is not a string")
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=float(data["expires_at"]),
            token_type=str(data.get("token_type") or "Bearer"),
            scope=str(data.get("scope") or ""),
        )


class TokenStore:
    """Reads and writes a Credential snapshot at a fixed path."""

    def __init__(self, path: str) -> None:
        """Initialize token store.

        Args:
            path: Path of the JSON cache file
        """
        self.path = path

    def load(self) -> Optional[Credential]:
        """Load the cached credential.

        Returns:
            The Credential, or None when there is no usable cache

        Raises:
            TokenCacheError: If the file exists but cannot be read
        """
        if not os.path.exists(self.path):
            logger.debug("No token cache at %s", self.path)
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.warning("Ignoring corrupt token cache %s: %s", self.path, str(e))
            return None
        except OSError as e:
            raise TokenCacheError(f"Failed to read token cache {self.path}: {e}") from e

        if not isinstance(data, dict) or any(field not in data for field in REQUIRED_FIELDS):
            logger.warning("Ignoring incomplete token cache %s", self.path)
            return None

        try:
            return Credential.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid token cache %s: %s", self.path, str(e))
            return None

    def save(self, credential: Credential) -> None:
        """Atomically replace the cache file with `credential`.

        The snapshot is written to a temporary file in the same directory and
        renamed over the target, so an interrupted write leaves the old cache intact.

        Raises:
            TokenCacheError: If the file cannot be written
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".token_cache.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(credential.to_dict(), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
            tmp_path = None
            logger.debug("Saved token cache to %s", self.path)
        except OSError as e:
            raise TokenCacheError(f"Failed to write token cache {self.path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

"""Interactive configuration command."""

import os
import sys
from typing import Any, Callable, Dict, Optional

from .. import config
from ..errors import ConfigInvalidError
from .base import SporesCommand


def prompt(label: str, default: Optional[str] = None) -> str:
    """Read a value from stdin, falling back to `default` on empty input."""
    suffix = f" [{default}]" if default else ""
    # stdout is reserved for the JSON result
    sys.stderr.write(f"{label}{suffix}: ")
    sys.stderr.flush()
    try:
        value = input().strip()
    except EOFError as e:
        raise ConfigInvalidError(f"No value entered for {label}") from e
    return value or (default or "")


class ConfigureCommand(SporesCommand):
    """Write config.toml from interactively entered credentials."""

    name = "configure"
    requires_api = False

    def __init__(
        self,
        path: Optional[str] = None,
        ask: Callable[[str, Optional[str]], str] = prompt,
    ) -> None:
        super().__init__(None)
        self.path = path or config.CONFIG_FILE
        self.ask = ask

    def _existing(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            return config.read_config(self.path)
        except (ConfigInvalidError, OSError):
            self._logger.warning("Ignoring unreadable config %s", self.path)
            return {}

    def _run(self) -> Dict[str, Any]:
        existing = self._existing()
        client_id = self.ask("Client ID", existing.get("client_id") or None)
        client_secret = self.ask("Client secret", existing.get("client_secret") or None)
        redirect_uri = self.ask(
            "Redirect URI", existing.get("redirect_uri") or config.DEFAULT_REDIRECT_URI
        )

        if not client_id or not client_secret:
            raise ConfigInvalidError("client_id and client_secret are required")

        path = config.write_config(
            config.render_config(client_id, client_secret, redirect_uri), self.path
        )
        return {"config": path}

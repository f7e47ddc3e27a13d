"""Base command class for Spotify operations."""

from typing import Any, Dict, Optional

from ..api import SpotifyAPI
from ..logging_config import get_logger

# Get logger for this module
logger = get_logger(__name__)


class SporesCommand:
    """Base class for spores commands.

    A command validates its arguments, performs its requests and returns the
    JSON-serializable document that the CLI prints.
    """

    name = ""
    requires_api = True

    def __init__(self, api: Optional[SpotifyAPI]):
        """Initialize command.

        Args:
            api: Spotify API client
        """
        self.api = api
        self._logger = logger
        self._validated = False

    def validate(self) -> None:
        """Validate command parameters.

        Raises:
            ValueError: If parameters are invalid
            MalformedIdentifierError: If an ID argument is malformed
        """
        if self.requires_api and not self.api:
            raise ValueError("Spotify API client is required")
        self._validated = True

    def run(self) -> Dict[str, Any]:
        """Run the command.

        Returns:
            Result document

        Raises:
            SporesError: If the command fails
        """
        if not self._validated:
            self.validate()
        self._logger.debug("Running %s", self.name or type(self).__name__)
        return self._run()

    def _run(self) -> Dict[str, Any]:
        """Internal run implementation."""
        raise NotImplementedError

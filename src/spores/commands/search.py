"""Search command."""

from typing import Any, Dict

from ..api import SEARCH_TYPES, SpotifyAPI
from ..normalize import normalize_all
from .base import SporesCommand

DEFAULT_LIMIT = 20
MAX_LIMIT = 50


class SearchCommand(SporesCommand):
    """Search the catalog for tracks, albums, artists or playlists."""

    name = "search"

    def __init__(self, api: SpotifyAPI, query: str, kind: str = "track", limit: int = DEFAULT_LIMIT):
        super().__init__(api)
        self.query = query
        self.kind = kind
        self.limit = limit

    def validate(self) -> None:
        super().validate()
        if not self.query or not self.query.strip():
            raise ValueError("Search query is required")
        if self.kind not in SEARCH_TYPES:
            raise ValueError(f"Unsupported search type: {self.kind}")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValueError(f"Limit must be between 1 and {MAX_LIMIT}")

    def _run(self) -> Dict[str, Any]:
        page = self.api.search(self.query, self.kind, self.limit)
        return {
            "query": self.query,
            "type": self.kind,
            "total": page.get("total", 0),
            "items": normalize_all(page.get("items") or []),
        }

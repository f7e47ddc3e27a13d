"""Save command."""

from typing import Any, Dict, List

from ..api import SpotifyAPI
from ..errors import UnsupportedOperationError
from ..ids import ResourceKind, resolve_many
from .base import SporesCommand

SAVE_KINDS = {
    "track": ResourceKind.TRACK,
    "album": ResourceKind.ALBUM,
    "playlist": ResourceKind.PLAYLIST,
}


class SaveCommand(SporesCommand):
    """Save tracks or albums to the library, or follow playlists."""

    name = "save"

    def __init__(self, api: SpotifyAPI, kind: str, ids: List[str]) -> None:
        super().__init__(api)
        self.kind = kind
        self.ids = ids
        self.refs = []

    def validate(self) -> None:
        super().validate()
        if self.kind == "artist":
            raise UnsupportedOperationError("saving artists is not supported; use 'follow' instead")
        if self.kind not in SAVE_KINDS:
            raise ValueError(f"Unsupported item type: {self.kind}")
        if not self.ids:
            raise ValueError("At least one ID is required")
        self.refs = resolve_many(SAVE_KINDS[self.kind], self.ids)

    def _run(self) -> Dict[str, Any]:
        saved = self.api.save_each(self.refs)
        return {"type": self.kind, "saved": len(saved), "ids": saved}

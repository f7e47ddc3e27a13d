"""Playlist commands."""

from typing import Any, Dict, List, Optional

from ..api import SpotifyAPI
from ..ids import ResourceKind, resolve, resolve_many
from ..normalize import normalize, normalize_playlist_entry
from ..paginator import drain
from .base import SporesCommand


class PlaylistListCommand(SporesCommand):
    """List every playlist of the current user."""

    name = "playlist list"

    def _run(self) -> Dict[str, Any]:
        playlists = []
        for raw in drain(self.api.current_user_playlists):
            if raw is None:
                continue
            record = normalize(raw).to_dict()
            record["public"] = bool(raw.get("public"))
            playlists.append(record)
        return {"total": len(playlists), "playlists": playlists}


class PlaylistCreateCommand(SporesCommand):
    """Create a playlist for the current user."""

    name = "playlist create"

    def __init__(
        self,
        api: SpotifyAPI,
        playlist_name: str,
        public: bool = False,
        description: Optional[str] = None,
    ) -> None:
        super().__init__(api)
        self.playlist_name = playlist_name
        self.public = public
        self.description = description

    def validate(self) -> None:
        super().validate()
        if not self.playlist_name or not self.playlist_name.strip():
            raise ValueError("Playlist name is required")

    def _run(self) -> Dict[str, Any]:
        user = self.api.current_user()
        user_ref = resolve(ResourceKind.USER, user.get("id") or "")
        playlist = self.api.create_playlist(
            user_ref.id, self.playlist_name, self.public, self.description
        )
        self._logger.info("Created playlist %s", playlist.get("id"))
        return {
            "id": playlist.get("id"),
            "name": playlist.get("name"),
            "public": bool(playlist.get("public")),
            "description": playlist.get("description"),
            "url": (playlist.get("external_urls") or {}).get("spotify"),
        }


class PlaylistInfoCommand(SporesCommand):
    """Show a playlist and all of its entries."""

    name = "playlist info"

    def __init__(self, api: SpotifyAPI, playlist: str) -> None:
        super().__init__(api)
        self.playlist = playlist
        self.playlist_ref = None

    def validate(self) -> None:
        super().validate()
        self.playlist_ref = resolve(ResourceKind.PLAYLIST, self.playlist)

    def _run(self) -> Dict[str, Any]:
        playlist = self.api.get_playlist(self.playlist_ref)
        entries = drain(
            lambda offset, limit: self.api.playlist_items(self.playlist_ref, offset, limit)
        )

        tracks = []
        for entry in entries:
            item = normalize_playlist_entry(entry)
            if item is not None:
                tracks.append(item.to_dict())

        return {
            "id": playlist.get("id"),
            "name": playlist.get("name"),
            "owner": (playlist.get("owner") or {}).get("display_name") or "unknown",
            "public": bool(playlist.get("public")),
            "collaborative": bool(playlist.get("collaborative")),
            "followers": (playlist.get("followers") or {}).get("total"),
            "description": playlist.get("description"),
            "url": (playlist.get("external_urls") or {}).get("spotify"),
            "total_tracks": (playlist.get("tracks") or {}).get("total"),
            "tracks": tracks,
        }


class PlaylistAddCommand(SporesCommand):
    """Add tracks to a playlist, one request per track."""

    name = "playlist add"

    def __init__(self, api: SpotifyAPI, playlist: str, tracks: List[str]) -> None:
        super().__init__(api)
        self.playlist = playlist
        self.tracks = tracks
        self.playlist_ref = None
        self.track_refs = []

    def validate(self) -> None:
        super().validate()
        if not self.tracks:
            raise ValueError("At least one track is required")
        self.playlist_ref = resolve(ResourceKind.PLAYLIST, self.playlist)
        self.track_refs = resolve_many(ResourceKind.TRACK, self.tracks)

    def _run(self) -> Dict[str, Any]:
        snapshot_id = self.api.add_tracks(self.playlist_ref, self.track_refs)
        return {
            "playlist": self.playlist_ref.id,
            "added": len(self.track_refs),
            "snapshot_id": snapshot_id,
        }

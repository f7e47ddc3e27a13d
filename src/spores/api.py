"""Spotify Web API wrapper."""

from typing import Any, Dict, List, Optional

import requests

from . import config
from .auth import AuthSession
from .errors import PartialFailureError, RateLimitError, RemoteRequestError
from .ids import ResourceRef
from .logging_config import get_logger
from .paginator import Page, page_from_response

logger = get_logger(__name__)

SEARCH_TYPES = ("track", "album", "artist", "playlist")

PLAYLIST_FIELDS = (
    "id,name,public,collaborative,description,owner(display_name),"
    "followers(total),external_urls,tracks(total)"
)


def _error_message(response: requests.Response) -> str:
    """Extract the service's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return body.get("error_description") or error
    return response.reason or f"HTTP {response.status_code}"


class SpotifyAPI:
    """Wrapper for Spotify Web API operations."""

    def __init__(self, session: AuthSession, http: Optional[requests.Session] = None):
        """Initialize API wrapper.

        Args:
            session: Source of bearer tokens
            http: HTTP session to send requests with
        """
        self.session = session
        self.http = http or requests.Session()

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send an authenticated request.

        Args:
            method: HTTP method
            path: Path below the API base URL, e.g. "/me"
            params: Query parameters
            json: JSON body

        Returns:
            Decoded JSON body, or an empty dict when the response has none

        Raises:
            RateLimitError: If the service answers 429
            RemoteRequestError: If the request fails or returns a non-2xx status
        """
        credential = self.session.credential()
        headers = {"Authorization": f"Bearer {credential.access_token}"}
        url = f"{config.API_BASE_URL}{path}"

        logger.debug("%s %s %s", method, path, params or "")
        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=config.REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise RemoteRequestError(f"Request to {path} failed: {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(int(retry_after) if retry_after and retry_after.isdigit() else None)
        if response.status_code >= 400:
            raise RemoteRequestError(_error_message(response), response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteRequestError(f"Invalid JSON in response from {path}") from e

    def search(self, query: str, kind: str, limit: int = 20) -> Dict[str, Any]:
        """Search the catalog.

        Args:
            query: Search query
            kind: One of SEARCH_TYPES
            limit: Maximum number of results

        Returns:
            Paging object for `kind` (with `items` and `total`)
        """
        if kind not in SEARCH_TYPES:
            raise ValueError(f"Unsupported search type: {kind}")
        response = self.request("GET", "/search", params={"q": query, "type": kind, "limit": limit})
        return response.get(f"{kind}s") or {"items": [], "total": 0}

    def current_user(self) -> Dict[str, Any]:
        return self.request("GET", "/me")

    def current_user_playlists(self, offset: int, limit: int) -> Page:
        """Get one page of the current user's playlists."""
        response = self.request("GET", "/me/playlists", params={"offset": offset, "limit": limit})
        return page_from_response(response)

    def get_playlist(self, playlist: ResourceRef) -> Dict[str, Any]:
        """Get playlist metadata, without its items."""
        return self.request("GET", f"/playlists/{playlist.id}", params={"fields": PLAYLIST_FIELDS})

    def playlist_items(self, playlist: ResourceRef, offset: int, limit: int) -> Page:
        """Get one page of a playlist's entries (tracks and episodes)."""
        response = self.request(
            "GET",
            f"/playlists/{playlist.id}/tracks",
            params={"offset": offset, "limit": limit, "additional_types": "track,episode"},
        )
        return page_from_response(response)

    def create_playlist(
        self, user_id: str, name: str, public: bool = False, description: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a playlist owned by `user_id`."""
        body: Dict[str, Any] = {"name": name, "public": public}
        if description is not None:
            body["description"] = description
        return self.request("POST", f"/users/{user_id}/playlists", json=body)

    def add_tracks(self, playlist: ResourceRef, tracks: List[ResourceRef]) -> Optional[str]:
        """Add tracks to a playlist, one request per track.

        Args:
            playlist: Playlist to add to
            tracks: Tracks to add, in order

        Returns:
            Snapshot ID reported for the last addition

        Raises:
            PartialFailureError: If a request fails; carries the tracks already added
        """
        added: List[str] = []
        snapshot_id = None
        for track in tracks:
            try:
                response = self.request(
                    "POST", f"/playlists/{playlist.id}/tracks", json={"uris": [track.uri]}
                )
            except RemoteRequestError as e:
                raise PartialFailureError(added, track.id, len(tracks), e) from e
            snapshot_id = response.get("snapshot_id", snapshot_id)
            added.append(track.id)
            logger.info("Added %s to playlist %s", track.id, playlist.id)
        return snapshot_id

    def save_track(self, track: ResourceRef) -> None:
        self.request("PUT", "/me/tracks", params={"ids": track.id})

    def save_album(self, album: ResourceRef) -> None:
        self.request("PUT", "/me/albums", params={"ids": album.id})

    def follow_playlist(self, playlist: ResourceRef) -> None:
        self.request("PUT", f"/playlists/{playlist.id}/followers", json={"public": True})

    def save_each(self, refs: List[ResourceRef]) -> List[str]:
        """Save tracks, albums or playlists to the library, one request per item.

        Returns:
            IDs saved, in order

        Raises:
            PartialFailureError: If a request fails; carries the IDs already saved
        """
        savers = {
            "track": self.save_track,
            "album": self.save_album,
            "playlist": self.follow_playlist,
        }
        saved: List[str] = []
        for ref in refs:
            try:
                savers[ref.kind.value](ref)
            except RemoteRequestError as e:
                raise PartialFailureError(saved, ref.id, len(refs), e) from e
            saved.append(ref.id)
        return saved

"""Normalization of catalog objects into flat output records.

The Web API returns several object shapes (tracks, albums, artists,
playlists, episodes) and may add new ones at any time. `normalize` maps each
known shape to a small record with only the fields the CLI prints, and maps
anything it does not recognize to `UnknownItem` instead of failing.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from .logging_config import get_logger

logger = get_logger(__name__)


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


def _artist_names(artists: Any) -> Tuple[str, ...]:
    if artists is None:
        return ()
    if not isinstance(artists, list):
        raise TypeError("artists is not a list")
    return tuple(a["name"] for a in artists if isinstance(a, dict) and isinstance(a.get("name"), str))


def _section(item: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = item.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{key} is not an object")
    return value


@dataclass(frozen=True)
class TrackItem:
    kind: ClassVar[str] = "track"

    id: Optional[str]
    name: Optional[str]
    artists: Tuple[str, ...]
    album: Optional[str]
    duration_ms: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "id": self.id,
            "name": self.name,
            "artists": list(self.artists),
            "album": self.album,
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class AlbumItem:
    kind: ClassVar[str] = "album"

    id: Optional[str]
    name: Optional[str]
    artists: Tuple[str, ...]
    release_date: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "id": self.id,
            "name": self.name,
            "artists": list(self.artists),
            "release_date": self.release_date,
        }


@dataclass(frozen=True)
class ArtistItem:
    kind: ClassVar[str] = "artist"

    id: Optional[str]
    name: Optional[str]
    genres: Tuple[str, ...]
    followers: Optional[int]
    popularity: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "id": self.id,
            "name": self.name,
            "genres": list(self.genres),
            "followers": self.followers,
            "popularity": self.popularity,
        }


@dataclass(frozen=True)
class PlaylistItem:
    kind: ClassVar[str] = "playlist"

    id: Optional[str]
    name: Optional[str]
    tracks: Optional[int]
    owner: str
    url: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "id": self.id,
            "name": self.name,
            "tracks": self.tracks,
            "owner": self.owner,
            "url": self.url,
        }


@dataclass(frozen=True)
class EpisodeItem:
    kind: ClassVar[str] = "episode"

    id: Optional[str]
    name: Optional[str]
    show: Optional[str]
    duration_ms: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "id": self.id,
            "name": self.name,
            "show": self.show,
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class UnknownItem:
    """Fallback for object types this client does not know about."""

    kind: ClassVar[str] = "unknown"

    raw_type: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind}
        for key, value in (("kind", self.raw_type), ("id", self.id), ("name", self.name), ("uri", self.uri)):
            if value is not None:
                data[key] = value
        return data


NormalizedItem = Union[TrackItem, AlbumItem, ArtistItem, PlaylistItem, EpisodeItem, UnknownItem]


def _track(item: Dict[str, Any]) -> TrackItem:
    return TrackItem(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        artists=_artist_names(item.get("artists")),
        album=_text(_section(item, "album").get("name")),
        duration_ms=_int(item.get("duration_ms")),
    )


def _album(item: Dict[str, Any]) -> AlbumItem:
    return AlbumItem(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        artists=_artist_names(item.get("artists")),
        release_date=_text(item.get("release_date")),
    )


def _artist(item: Dict[str, Any]) -> ArtistItem:
    genres = item.get("genres") or []
    if not isinstance(genres, list):
        raise TypeError("genres is not a list")
    # distinct, first-seen order
    distinct = tuple(dict.fromkeys(g for g in genres if isinstance(g, str)))
    return ArtistItem(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        genres=distinct,
        followers=_int(_section(item, "followers").get("total")),
        popularity=_int(item.get("popularity")),
    )


def _playlist(item: Dict[str, Any]) -> PlaylistItem:
    owner = _text(_section(item, "owner").get("display_name"))
    return PlaylistItem(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        tracks=_int(_section(item, "tracks").get("total")),
        owner=owner or "unknown",
        url=_text(_section(item, "external_urls").get("spotify")),
    )


def _episode(item: Dict[str, Any]) -> EpisodeItem:
    return EpisodeItem(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        show=_text(_section(item, "show").get("name")),
        duration_ms=_int(item.get("duration_ms")),
    )


BUILDERS = {
    "track": _track,
    "album": _album,
    "artist": _artist,
    "playlist": _playlist,
    "episode": _episode,
}


def _unknown(item: Any) -> UnknownItem:
    if not isinstance(item, dict):
        return UnknownItem()
    return UnknownItem(
        raw_type=_text(item.get("type")),
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        uri=_text(item.get("uri")),
    )


def normalize(item: Any) -> NormalizedItem:
    """Normalize one catalog object. Never raises.

    Args:
        item: Decoded JSON object from the Web API

    Returns:
        The record for the object's `type`, or UnknownItem
    """
    if not isinstance(item, dict):
        return _unknown(item)

    builder = BUILDERS.get(_text(item.get("type")))
    if builder is None:
        logger.debug("Unrecognized item type %r", item.get("type"))
        return _unknown(item)

    try:
        return builder(item)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.debug("Malformed %s object: %s", item.get("type"), str(e))
        return _unknown(item)


def normalize_playlist_entry(entry: Any) -> Optional[NormalizedItem]:
    """Normalize a playlist entry wrapper ({"track": {...}, "added_at": ...}).

    Returns:
        The normalized item, or None when the entry holds no item (removed or unavailable)
    """
    if not isinstance(entry, dict):
        return _unknown(entry)
    inner = entry.get("track")
    if inner is None:
        inner = entry.get("item")
    if inner is None:
        return None
    return normalize(inner)


def normalize_all(items: List[Any]) -> List[Dict[str, Any]]:
    """Normalize a list of objects into output dicts, skipping null entries."""
    return [normalize(item).to_dict() for item in items if item is not None]

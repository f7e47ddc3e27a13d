"""Parsing of Spotify IDs and URIs."""

import enum
import re
from dataclasses import dataclass
from typing import Iterable, List

from .errors import MalformedIdentifierError

# <namespace>:<kind>:<id>, where the id may itself contain colons.
# Parts may be empty: "spotify:track:" is a truncated URI, not a raw ID.
URI_PATTERN = re.compile(r"^([^:\s]*):([^:\s]*):(\S*)$")


class ResourceKind(enum.Enum):
    """Kinds of catalog resource that can be addressed by ID."""

    TRACK = "track"
    ALBUM = "album"
    PLAYLIST = "playlist"
    ARTIST = "artist"
    USER = "user"


@dataclass(frozen=True)
class ResourceRef:
    """A resolved resource identifier. `id` is never in URI form."""

    kind: ResourceKind
    id: str

    @property
    def uri(self) -> str:
        return f"spotify:{self.kind.value}:{self.id}"

    def __str__(self) -> str:
        return self.id


def resolve(kind: ResourceKind, value: str) -> ResourceRef:
    """Resolve a raw ID or a namespaced URI into a ResourceRef.

    Args:
        kind: Kind of resource the caller expects
        value: Raw ID (e.g. "4uLU6hMCjMI75M1A2tKUQC") or URI
            (e.g. "spotify:track:4uLU6hMCjMI75M1A2tKUQC")

    Returns:
        ResourceRef with the bare ID

    Raises:
        MalformedIdentifierError: If the value is empty, the URI names another kind,
            or the URI has no ID
    """
    value = (value or "").strip()
    if not value:
        raise MalformedIdentifierError(f"Empty {kind.value} ID", expected=kind.value)

    match = URI_PATTERN.match(value)
    if not match:
        # Anything that is not a URI is passed through; the service decides if it exists
        return ResourceRef(kind, value)

    _, found, resource_id = match.groups()
    if found != kind.value:
        raise MalformedIdentifierError(
            f"Invalid {kind.value} URI {value}: expected kind '{kind.value}', found '{found}'",
            expected=kind.value,
            found=found,
        )
    if not resource_id:
        raise MalformedIdentifierError(
            f"Invalid {kind.value} URI {value}: missing ID", expected=kind.value, found=found
        )
    return ResourceRef(kind, resource_id)


def resolve_many(kind: ResourceKind, values: Iterable[str]) -> List[ResourceRef]:
    """Resolve several values in order, failing on the first malformed one."""
    return [resolve(kind, value) for value in values]

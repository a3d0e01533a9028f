"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class IdKind(StrEnum):
    """Identifier kinds as they appear under ``music_ids`` in a note."""

    SPOTIFY_URI = "spotify_uri"
    SPOTIFY_ID = "spotify_id"
    UPC = "upc"
    ISRC = "isrc"
    MBID = "mbid"


# Lookup order for identity matching: the streaming service's own ids first,
# then catalog codes, then the metadata-service id.
ID_PRIORITY: Final[tuple[IdKind, ...]] = (
    IdKind.SPOTIFY_URI,
    IdKind.SPOTIFY_ID,
    IdKind.UPC,
    IdKind.ISRC,
    IdKind.MBID,
)


class EntityKind(StrEnum):
    """Closed set of entity variants; also the sync tier order."""

    ARTIST = "artist"
    ALBUM = "album"
    TRACK = "track"


TIER_ORDER: Final[tuple[EntityKind, ...]] = (
    EntityKind.ARTIST,
    EntityKind.ALBUM,
    EntityKind.TRACK,
)

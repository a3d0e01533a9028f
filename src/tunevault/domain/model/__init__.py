"""Domain model package."""

from __future__ import annotations

from .enums import ID_PRIORITY, TIER_ORDER, EntityKind, IdKind
from .external_ids import MusicIds, shares_identifier
from .music import (
    Album,
    AnyEntity,
    Artist,
    MusicEntity,
    MusicFile,
    NoteHandle,
    Reference,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedTrack,
    Track,
)
from .provenance import MusicSources

__all__ = [
    "ID_PRIORITY",
    "TIER_ORDER",
    "Album",
    "AnyEntity",
    "Artist",
    "EntityKind",
    "IdKind",
    "MusicEntity",
    "MusicFile",
    "MusicIds",
    "MusicSources",
    "NoteHandle",
    "Reference",
    "SimplifiedAlbum",
    "SimplifiedArtist",
    "SimplifiedTrack",
    "Track",
    "shares_identifier",
]

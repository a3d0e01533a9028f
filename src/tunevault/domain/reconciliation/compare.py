"""Compare entities by what their note would store.

Volatile data (note handle, ``created``/``modified``, ``added_at``) is not
part of the stored projection. Album track listings are stored as titles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tunevault.domain.model import Album, Track

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tunevault.domain.model import MusicEntity, SimplifiedArtist


def _refs(refs: Sequence[SimplifiedArtist]) -> list[tuple[str, dict[str, str]]]:
    return [(ref.title, ref.ids.to_dict()) for ref in refs]


def stored_projection(entity: MusicEntity) -> dict[str, Any]:
    projection: dict[str, Any] = {
        "kind": entity.kind,
        "title": entity.title,
        "ids": entity.ids.to_dict(),
        "sources": {
            "spotify": entity.sources.spotify,
            "local": entity.sources.local,
            "online": sorted(entity.sources.online),
            "playlists": sorted(entity.sources.playlists),
        },
        "in_library": entity.in_library,
        "image": entity.image,
    }
    match entity:
        case Album():
            projection["artists"] = _refs(entity.artists)
            projection["tracks"] = [track.title for track in entity.tracks]
        case Track():
            projection["artists"] = _refs(entity.artists)
            projection["is_single"] = entity.is_single
            projection["album"] = (
                (entity.album.title, entity.album.ids.to_dict())
                if entity.album is not None
                else None
            )
        case _:
            pass
    return projection


def differs_in_storage(current: MusicEntity, candidate: MusicEntity) -> bool:
    return stored_projection(current) != stored_projection(candidate)

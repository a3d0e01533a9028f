"""Translate Spotify payloads into domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from tunevault.domain.model import (
    Album,
    Artist,
    MusicIds,
    MusicSources,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedTrack,
    Track,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from .schema import (
        SpotifyAlbum,
        SpotifyArtist,
        SpotifyImage,
        SpotifySimplifiedTrack,
        SpotifyTrack,
    )

PREFERRED_IMAGE_WIDTH: Final[int] = 300


def translate_artist(artist: SpotifyArtist, *, added_at: datetime | None = None) -> Artist:
    return Artist(
        title=artist.name,
        ids=_ids(artist.id, artist.uri),
        sources=_sources(artist.external_urls),
        image=best_image_url(artist.images),
        added_at=added_at,
    )


def translate_album(album: SpotifyAlbum, *, added_at: datetime | None = None) -> Album:
    tracks = album.tracks.items if album.tracks is not None else []
    return Album(
        title=album.name,
        ids=_ids(album.id, album.uri, upc=album.external_ids.get("upc")),
        sources=_sources(album.external_urls),
        image=best_image_url(album.images),
        added_at=added_at,
        artists=[_simplified_artist(artist) for artist in album.artists],
        tracks=[_simplified_track(track) for track in tracks],
    )


def translate_track(
    track: SpotifyTrack,
    *,
    added_at: datetime | None = None,
    playlists: Iterable[str] = (),
) -> Track:
    album = track.album
    single = is_single(album)
    return Track(
        title=track.name,
        ids=_ids(track.id, track.uri, isrc=track.external_ids.get("isrc")),
        sources=_sources(track.external_urls).with_playlists(playlists),
        image=best_image_url(album.images) if album is not None else None,
        added_at=added_at,
        artists=[_simplified_artist(artist) for artist in track.artists],
        album=_simplified_album(album) if album is not None and not single else None,
        is_single=single,
    )


def is_single(album: SpotifyAlbum | None) -> bool:
    """Single-track releases are not surfaced as albums."""

    return album is not None and album.total_tracks == 1


def best_image_url(images: Iterable[SpotifyImage]) -> str | None:
    """The image whose width is closest to the preferred cover size."""

    candidates = list(images)
    if not candidates:
        return None
    sized = [image for image in candidates if image.width is not None]
    if not sized:
        return candidates[0].url
    return min(sized, key=lambda image: abs((image.width or 0) - PREFERRED_IMAGE_WIDTH)).url


def _ids(
    spotify_id: str | None,
    uri: str | None,
    *,
    upc: str | None = None,
    isrc: str | None = None,
) -> MusicIds:
    return MusicIds(
        spotify_id=spotify_id or None,
        spotify_uri=uri or None,
        upc=upc or None,
        isrc=isrc or None,
    )


def _sources(external_urls: dict[str, str]) -> MusicSources:
    return MusicSources(spotify=external_urls.get("spotify") or None)


def _simplified_artist(artist: SpotifyArtist) -> SimplifiedArtist:
    return SimplifiedArtist(title=artist.name, ids=_ids(artist.id, artist.uri))


def _simplified_track(track: SpotifySimplifiedTrack) -> SimplifiedTrack:
    return SimplifiedTrack(title=track.name, ids=_ids(track.id, track.uri))


def _simplified_album(album: SpotifyAlbum) -> SimplifiedAlbum:
    return SimplifiedAlbum(
        title=album.name,
        ids=_ids(album.id, album.uri, upc=album.external_ids.get("upc")),
        artists=[_simplified_artist(artist) for artist in album.artists],
    )

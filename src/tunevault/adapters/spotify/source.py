"""Spotify implementation of the music library source port."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import requests
from pydantic import ValidationError
from spotipy.exceptions import SpotifyBaseException

from tunevault.domain.model import EntityKind, IdKind
from tunevault.domain.ports.library import (
    IncompleteFetchError,
    LibraryQueryOptions,
    LibrarySourceError,
)

from .translator import is_single, translate_album, translate_artist, translate_track

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence

    from tunevault.domain.model import Album, Artist, MusicIds, Track

    from .client import SpotifyClient
    from .schema import PlaylistTrackItem

log = getLogger(__name__)

LIKED_SONGS_LABEL: Final[str] = "Liked Songs"
API_PAGE_SIZE: Final[int] = 50
RECENT_SYNC_LIMIT: Final[int] = 20
ARTISTS_BATCH_SIZE: Final[int] = 50
ALBUMS_BATCH_SIZE: Final[int] = 20
TRACKS_BATCH_SIZE: Final[int] = 50

_ID_KINDS: Final[dict[EntityKind, frozenset[IdKind]]] = {
    EntityKind.ARTIST: frozenset({IdKind.SPOTIFY_ID, IdKind.SPOTIFY_URI}),
    EntityKind.ALBUM: frozenset({IdKind.SPOTIFY_ID, IdKind.SPOTIFY_URI, IdKind.UPC}),
    EntityKind.TRACK: frozenset({IdKind.SPOTIFY_ID, IdKind.SPOTIFY_URI, IdKind.ISRC}),
}


@contextmanager
def _translate_errors(what: str) -> Iterator[None]:
    try:
        yield
    except (SpotifyBaseException, requests.RequestException, ValidationError) as exc:
        raise LibrarySourceError(f"Spotify request for {what} failed: {exc}") from exc


def _chunks(ids: Sequence[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(ids), size):
        yield list(ids[start : start + size])


@dataclass(slots=True)
class SpotifyLibrarySource:
    """Saved artists, albums and tracks of the authenticated Spotify user.

    Saved tracks are the liked songs plus every configured playlist, merged by
    URI. A playlist that cannot be fetched is skipped; the result is then
    reported through ``IncompleteFetchError`` so it is not mistaken for the
    whole collection.
    """

    client: SpotifyClient
    playlist_ids: Sequence[str] = ()
    playlist_names: Mapping[str, str] = field(default_factory=dict[str, str])
    page_size: int = API_PAGE_SIZE
    recent_limit: int = RECENT_SYNC_LIMIT

    def get_saved_artists(self, options: LibraryQueryOptions) -> list[Artist]:
        batch_size, max_items = self._window(options)
        with _translate_errors("followed artists"):
            return [
                translate_artist(artist)
                for artist in self.client.iter_followed_artists(
                    batch_size=batch_size, max_items=max_items
                )
            ]

    def get_saved_albums(self, options: LibraryQueryOptions) -> list[Album]:
        batch_size, max_items = self._window(options)
        with _translate_errors("saved albums"):
            return [
                translate_album(item.album, added_at=item.added_at)
                for item in self.client.iter_saved_albums(
                    batch_size=batch_size, max_items=max_items
                )
                if not is_single(item.album)
            ]

    def get_saved_tracks(self, options: LibraryQueryOptions) -> list[Track]:
        batch_size, max_items = self._window(options)
        with _translate_errors("liked songs"):
            liked = [
                translate_track(item.track, added_at=item.added_at, playlists=(LIKED_SONGS_LABEL,))
                for item in self.client.iter_saved_tracks(
                    batch_size=batch_size, max_items=max_items
                )
            ]

        merged = _TrackMerger()
        merged.add_all(liked)
        failed: list[str] = []
        for playlist_id in self.playlist_ids:
            label = self.playlist_names.get(playlist_id) or playlist_id
            try:
                with _translate_errors(f"playlist {label!r}"):
                    merged.add_all(self._playlist_tracks(playlist_id, label, options))
            except LibrarySourceError:
                log.warning("Skipping playlist %r for this pass", label, exc_info=True)
                failed.append(label)

        tracks = merged.tracks()
        if failed:
            raise IncompleteFetchError(
                f"Could not fetch playlist(s): {', '.join(failed)}", entities=tracks
            )
        return tracks

    def get_artists_by_id(self, ids: Sequence[str]) -> list[Artist]:
        return self._batched(ids, ARTISTS_BATCH_SIZE, "artists", self._fetch_artists)

    def get_albums_by_id(self, ids: Sequence[str]) -> list[Album]:
        return self._batched(ids, ALBUMS_BATCH_SIZE, "albums", self._fetch_albums)

    def get_tracks_by_id(self, ids: Sequence[str]) -> list[Track]:
        return self._batched(ids, TRACKS_BATCH_SIZE, "tracks", self._fetch_tracks)

    def get_primary_id(self, ids: MusicIds) -> str | None:
        if ids.spotify_id:
            return ids.spotify_id
        uri = ids.spotify_uri
        if uri and uri.startswith("spotify:") and not uri.startswith("spotify:local:"):
            return uri.rsplit(":", 1)[-1] or None
        return None

    def available_id_kinds(self, kind: EntityKind) -> frozenset[IdKind]:
        return _ID_KINDS[kind]

    def _window(self, options: LibraryQueryOptions) -> tuple[int, int | None]:
        if options.recent_only:
            return self.recent_limit, self.recent_limit
        return self.page_size, None

    def _playlist_tracks(
        self, playlist_id: str, label: str, options: LibraryQueryOptions
    ) -> list[Track]:
        if options.recent_only:
            # playlists are ordered oldest first; the recent window is the tail
            total = self.client.playlist_total(playlist_id)
            items: Iterable[PlaylistTrackItem] = self.client.iter_playlist_items(
                playlist_id,
                batch_size=self.recent_limit,
                offset=max(0, total - self.recent_limit),
                max_items=self.recent_limit,
            )
        else:
            items = self.client.iter_playlist_items(playlist_id, batch_size=self.page_size)
        return [
            translate_track(item.track, added_at=item.added_at, playlists=(label,))
            for item in items
            if item.track is not None
        ]

    def _fetch_artists(self, chunk: list[str]) -> list[Artist]:
        return [translate_artist(artist) for artist in self.client.get_artists(chunk)]

    def _fetch_albums(self, chunk: list[str]) -> list[Album]:
        return [translate_album(album) for album in self.client.get_albums(chunk)]

    def _fetch_tracks(self, chunk: list[str]) -> list[Track]:
        return [translate_track(track) for track in self.client.get_tracks(chunk)]

    def _batched[E](
        self,
        ids: Sequence[str],
        size: int,
        what: str,
        fetch: Callable[[list[str]], list[E]],
    ) -> list[E]:
        unique = list(dict.fromkeys(ids))
        results: list[E] = []
        for chunk in _chunks(unique, size):
            with _translate_errors(what):
                results.extend(fetch(chunk))
        return results


class _TrackMerger:
    """Merge tracks seen in several collections by URI."""

    def __init__(self) -> None:
        self._by_key: dict[str, Track] = {}

    def add_all(self, tracks: Iterable[Track]) -> None:
        for track in tracks:
            self.add(track)

    def add(self, track: Track) -> None:
        key = track.ids.spotify_uri or track.ids.spotify_id
        if not key:
            key = f"{track.title}|{track.primary_artist}"
        known = self._by_key.get(key)
        if known is None:
            self._by_key[key] = track
            return
        known.sources = known.sources.with_playlists(track.sources.playlists)
        if track.added_at is None:
            return
        if known.added_at is None or track.added_at < known.added_at:
            known.added_at = track.added_at

    def tracks(self) -> list[Track]:
        return list(self._by_key.values())

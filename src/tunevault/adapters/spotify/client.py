"""Spotipy-based client wrapper for Spotify Web API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyOAuth

from .schema import (
    FollowedArtistsResponse,
    PlaylistTrackItem,
    PlaylistTracksPage,
    SavedAlbumItem,
    SavedAlbumsPage,
    SavedTrackItem,
    SavedTracksPage,
    SeveralAlbumsResponse,
    SeveralArtistsResponse,
    SeveralTracksResponse,
    SpotifyAlbum,
    SpotifyArtist,
    SpotifyTrack,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tunevault.config.spotify import SpotifyConfig


class SpotifyClient:
    """Small wrapper around spotipy.Spotify for paging helpers.

    Offset-paged collections stop on an empty or short page, or when no
    ``next`` page is announced. The followed-artists collection is cursor
    paged and stops when no ``after`` cursor is issued.
    """

    def __init__(self, *, config: SpotifyConfig, client: spotipy.Spotify | None = None) -> None:
        if client is None:
            auth_manager = SpotifyOAuth(
                client_id=config.client_id,
                client_secret=config.client_secret,
                redirect_uri=config.redirect_uri,
                scope=" ".join(config.scope),
                cache_handler=(
                    CacheFileHandler(cache_path=config.cache_path) if config.cache_path else None
                ),
            )
            client = spotipy.Spotify(auth_manager=auth_manager)
        self._client = client

    def iter_saved_tracks(
        self,
        *,
        batch_size: int = 50,
        max_items: int | None = None,
    ) -> Iterable[SavedTrackItem]:
        offset = 0
        yielded = 0
        while True:
            raw_payload = self._client.current_user_saved_tracks(limit=batch_size, offset=offset)  # pyright: ignore[reportUnknownMemberType]
            payload = SavedTracksPage.model_validate(raw_payload)
            items = payload.items
            if not items:
                return
            for item in items:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return
            if payload.next is None or len(items) < batch_size:
                return
            offset += len(items)

    def iter_saved_albums(
        self,
        *,
        batch_size: int = 50,
        max_items: int | None = None,
    ) -> Iterable[SavedAlbumItem]:
        offset = 0
        yielded = 0
        while True:
            raw_payload = self._client.current_user_saved_albums(limit=batch_size, offset=offset)  # pyright: ignore[reportUnknownMemberType]
            payload = SavedAlbumsPage.model_validate(raw_payload)
            items = payload.items
            if not items:
                return
            for item in items:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return
            if payload.next is None or len(items) < batch_size:
                return
            offset += len(items)

    def iter_followed_artists(
        self,
        *,
        batch_size: int = 50,
        max_items: int | None = None,
    ) -> Iterable[SpotifyArtist]:
        after: str | None = None
        yielded = 0
        while True:
            raw_payload = self._client.current_user_followed_artists(limit=batch_size, after=after)  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
            payload = FollowedArtistsResponse.model_validate(raw_payload)
            artists = payload.artists
            items = artists.items
            if not items:
                return
            for item in items:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return
            after = artists.cursors.after if artists.cursors is not None else None
            if not after:
                return

    def iter_playlist_items(
        self,
        playlist_id: str,
        *,
        batch_size: int = 50,
        offset: int = 0,
        max_items: int | None = None,
    ) -> Iterable[PlaylistTrackItem]:
        yielded = 0
        while True:
            raw_payload = self._client.playlist_items(  # pyright: ignore[reportUnknownMemberType]
                playlist_id,
                limit=batch_size,
                offset=offset,
                additional_types=("track",),
            )
            payload = PlaylistTracksPage.model_validate(raw_payload)
            items = payload.items
            if not items:
                return
            for item in items:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return
            if payload.next is None or len(items) < batch_size:
                return
            offset += len(items)

    def playlist_total(self, playlist_id: str) -> int:
        raw_payload = self._client.playlist_items(  # pyright: ignore[reportUnknownMemberType]
            playlist_id,
            limit=1,
            offset=0,
            additional_types=("track",),
        )
        return PlaylistTracksPage.model_validate(raw_payload).total or 0

    def get_artists(self, ids: Sequence[str]) -> list[SpotifyArtist]:
        raw_payload = self._client.artists(list(ids))  # pyright: ignore[reportUnknownMemberType]
        payload = SeveralArtistsResponse.model_validate(raw_payload)
        return [artist for artist in payload.artists if artist is not None]

    def get_albums(self, ids: Sequence[str]) -> list[SpotifyAlbum]:
        raw_payload = self._client.albums(list(ids))  # pyright: ignore[reportUnknownMemberType]
        payload = SeveralAlbumsResponse.model_validate(raw_payload)
        return [album for album in payload.albums if album is not None]

    def get_tracks(self, ids: Sequence[str]) -> list[SpotifyTrack]:
        raw_payload = self._client.tracks(list(ids))  # pyright: ignore[reportUnknownMemberType]
        payload = SeveralTracksResponse.model_validate(raw_payload)
        return [track for track in payload.tracks if track is not None]

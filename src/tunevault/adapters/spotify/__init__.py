"""Spotify adapter package."""

from __future__ import annotations

from .client import SpotifyClient
from .schema import (
    SavedAlbumItem,
    SavedTrackItem,
    SpotifyAlbum,
    SpotifyArtist,
    SpotifyTrack,
)
from .source import SpotifyLibrarySource
from .translator import translate_album, translate_artist, translate_track

__all__ = [
    "SavedAlbumItem",
    "SavedTrackItem",
    "SpotifyAlbum",
    "SpotifyArtist",
    "SpotifyClient",
    "SpotifyLibrarySource",
    "SpotifyTrack",
    "translate_album",
    "translate_artist",
    "translate_track",
]

from __future__ import annotations

from datetime import UTC, datetime

from tunevault.adapters.spotify.schema import SpotifyAlbum, SpotifyArtist, SpotifyTrack
from tunevault.adapters.spotify.translator import (
    best_image_url,
    is_single,
    translate_album,
    translate_artist,
    translate_track,
)
from tunevault.domain.model import MusicIds

from tests.helpers.spotify import ADA, DAWN, FIRST_LIGHT, SOLO, local_track_payload

ADDED = datetime(2024, 2, 3, 10, tzinfo=UTC)


def test_translate_artist_picks_medium_image() -> None:
    artist = translate_artist(SpotifyArtist.model_validate(ADA))

    assert artist.title == "Ada"
    assert artist.ids == MusicIds(spotify_id="ar1", spotify_uri="spotify:artist:ar1")
    assert artist.sources.spotify == "https://open.spotify.com/artist/ar1"
    assert artist.image == "https://i.scdn.co/ar1-320"


def test_translate_album_includes_upc_and_track_listing() -> None:
    album = translate_album(SpotifyAlbum.model_validate(FIRST_LIGHT), added_at=ADDED)

    assert album.ids.upc == "upc-al1"
    assert album.added_at == ADDED
    assert [ref.title for ref in album.artists] == ["Ada"]
    assert [ref.title for ref in album.tracks] == ["Song 1", "Song 2"]
    assert album.tracks[0].ids.spotify_id == "al1-1"


def test_translate_track_references_its_album() -> None:
    track = translate_track(
        SpotifyTrack.model_validate(DAWN), added_at=ADDED, playlists=("Liked Songs",)
    )

    assert track.ids.isrc == "ISRCtr1"
    assert track.sources.playlists == ("Liked Songs",)
    assert track.image == "https://i.scdn.co/al1"
    assert not track.is_single
    assert track.album is not None
    assert track.album.title == "First Light"
    assert track.album.ids.spotify_id == "al1"
    assert track.artists[0].ids.spotify_id == "ar1"


def test_single_track_has_no_album_reference() -> None:
    payload = SpotifyTrack.model_validate(SOLO)

    track = translate_track(payload)

    assert is_single(payload.album)
    assert track.is_single
    assert track.album is None


def test_local_track_keeps_its_local_uri_only() -> None:
    payload = SpotifyTrack.model_validate(local_track_payload("Ada", "Tapes", "Demo"))

    track = translate_track(payload)

    assert track.ids == MusicIds(spotify_uri="spotify:local:Ada:Tapes:Demo:215")
    assert track.artists[0].ids.is_empty()
    assert track.album is not None
    assert track.album.ids.is_empty()
    assert track.image is None


def test_best_image_url_falls_back_to_unsized_images() -> None:
    artist = SpotifyArtist.model_validate(
        {"name": "X", "images": [{"url": "https://a"}, {"url": "https://b"}]}
    )

    assert best_image_url(artist.images) == "https://a"
    assert best_image_url([]) is None

"""Client iterator behavior with in-memory payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tests.helpers.spotify import DAWN, track_payload

if TYPE_CHECKING:
    from tunevault.adapters.spotify.client import SpotifyClient

    from tests.helpers.spotify import FakeSpotipyClient


def test_client_iterators_yield_items(spotipy_client: SpotifyClient) -> None:
    tracks = list(spotipy_client.iter_saved_tracks(max_items=1))
    albums = list(spotipy_client.iter_saved_albums(max_items=1))
    artists = list(spotipy_client.iter_followed_artists(max_items=1))

    assert len(tracks) == 1
    assert len(albums) == 1
    assert len(artists) == 1


def test_offset_paging_follows_next_pages(
    spotipy_client: SpotifyClient, fake_spotify_client: FakeSpotipyClient
) -> None:
    tracks = list(spotipy_client.iter_saved_tracks(batch_size=1))

    assert [item.track.name for item in tracks] == ["Dawn", "Solo"]
    assert fake_spotify_client.calls == [("saved_tracks", (1, 0)), ("saved_tracks", (1, 1))]


def test_short_page_ends_iteration(
    spotipy_client: SpotifyClient, fake_spotify_client: FakeSpotipyClient
) -> None:
    albums = list(spotipy_client.iter_saved_albums(batch_size=50))

    assert len(albums) == 2
    assert fake_spotify_client.calls == [("saved_albums", (50, 0))]


def test_followed_artists_use_cursor_paging(
    spotipy_client: SpotifyClient, fake_spotify_client: FakeSpotipyClient
) -> None:
    artists = list(spotipy_client.iter_followed_artists(batch_size=1))

    assert [artist.name for artist in artists] == ["Ada", "Bix"]
    assert fake_spotify_client.calls == [("followed", (1, None)), ("followed", (1, "1"))]


def test_playlist_items_start_at_offset_and_keep_removed_tracks_as_none(
    spotipy_client: SpotifyClient, fake_spotify_client: FakeSpotipyClient
) -> None:
    extra = track_payload("tr9", "Encore", artist=DAWN["artists"][0], album=None)
    fake_spotify_client.playlists["pl1"] = [
        {"added_at": "2024-01-01T00:00:00Z", "track": DAWN},
        {"added_at": "2024-01-02T00:00:00Z", "track": None},
        {"added_at": "2024-01-03T00:00:00Z", "track": extra},
    ]

    items = list(spotipy_client.iter_playlist_items("pl1", batch_size=2, offset=1))

    assert [item.track.name if item.track else None for item in items] == [None, "Encore"]
    assert spotipy_client.playlist_total("pl1") == 3


def test_several_items_lookup_drops_unknown_ids(spotipy_client: SpotifyClient) -> None:
    artists = spotipy_client.get_artists(["ar1", "unknown"])
    albums = spotipy_client.get_albums(["al1"])
    tracks = spotipy_client.get_tracks(["tr2"])

    assert [artist.name for artist in artists] == ["Ada"]
    assert albums[0].tracks is not None
    assert [track.name for track in tracks] == ["Solo"]

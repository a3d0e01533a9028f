from __future__ import annotations

from tunevault.domain.model import MusicSources


def test_merge_overlays_urls_and_unions_lists() -> None:
    stored = MusicSources(spotify="https://old", online=("https://a",), playlists=("Liked Songs",))
    fetched = MusicSources(spotify="https://new", playlists=("Road Trip", "Liked Songs"))

    merged = stored.merged_with(fetched)

    assert merged.spotify == "https://new"
    assert merged.online == ("https://a",)
    assert merged.playlists == ("Liked Songs", "Road Trip")


def test_merge_never_clears_present_values() -> None:
    stored = MusicSources(spotify="https://open.spotify.com/x", local="/music/x.flac")

    assert stored.merged_with(MusicSources()) == stored


def test_mapping_round_trip_accepts_scalar_lists() -> None:
    sources = MusicSources.from_mapping({"spotify": "https://x", "playlists": "Road Trip"})

    assert sources.playlists == ("Road Trip",)
    assert sources.to_dict() == {"spotify": "https://x", "playlists": ["Road Trip"]}
    assert MusicSources.from_mapping({}).to_dict() == {}

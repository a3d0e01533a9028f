from __future__ import annotations

from datetime import UTC, date, datetime

from tunevault.adapters.vault.frontmatter import (
    FrontmatterReader,
    FrontmatterWriter,
    as_date,
    parse_link,
    render_link,
)
from tunevault.domain.model import (
    Album,
    EntityKind,
    MusicIds,
    SimplifiedAlbum,
    SimplifiedArtist,
    Track,
)

from tests.helpers.library import make_album, make_artist, make_track

ADA = make_artist("Ada", "ar1")
FIRST_LIGHT = make_album("First Light", "al1", artists=[ADA])
TODAY = date(2024, 3, 1)


class StaticLinks:
    """Link table keyed by Spotify id."""

    def __init__(self, *entries: tuple[EntityKind, str, MusicIds]) -> None:
        self.entries = entries

    def ids_for_link(self, kind: EntityKind, link_path: str) -> MusicIds | None:
        for entry_kind, path, ids in self.entries:
            if entry_kind is kind and path == link_path:
                return ids
        return None

    def link_path_for(self, kind: EntityKind, ids: MusicIds) -> str | None:
        for entry_kind, path, known in self.entries:
            if entry_kind is kind and known.spotify_id == ids.spotify_id:
                return path
        return None


LINKS = StaticLinks(
    (EntityKind.ARTIST, "Music/Artists/Ada", ADA.ids),
    (EntityKind.ALBUM, "Music/Albums/First Light - Ada", FIRST_LIGHT.ids),
)


def _writer(**defaults: object) -> FrontmatterWriter:
    return FrontmatterWriter(
        links=LINKS,
        default_frontmatter={EntityKind.TRACK: defaults} if defaults else {},
        today=lambda: TODAY,
    )


def test_links_render_and_parse() -> None:
    assert render_link("Music/Artists/Ada", "Ada") == "[[Music/Artists/Ada|Ada]]"
    assert parse_link("[[Music/Artists/Ada.md|Ada]]") == ("Music/Artists/Ada", "Ada")
    assert parse_link("[[Music/Artists/Ada]]") == ("Music/Artists/Ada", None)
    assert parse_link("Ada") is None


def test_as_date_accepts_dates_datetimes_and_strings() -> None:
    assert as_date(datetime(2024, 1, 2, 3, 4, tzinfo=UTC)) == date(2024, 1, 2)
    assert as_date("2024-01-02T10:00:00Z") == date(2024, 1, 2)
    assert as_date("yesterday") is None
    assert as_date(None) is None


def test_new_track_note_frontmatter() -> None:
    track = make_track("Dawn", "tr1", artists=[ADA], album=FIRST_LIGHT)
    track.in_library = True

    frontmatter = _writer(rating=None, tags=["music"]).render(track, None)

    assert list(frontmatter) == [
        "title",
        "created",
        "modified",
        "aliases",
        "in_library",
        "music_ids",
        "music_sources",
        "artists",
        "album",
        "rating",
        "tags",
    ]
    assert frontmatter["created"] == date(2024, 2, 3)
    assert frontmatter["modified"] == TODAY
    assert frontmatter["aliases"] == ["Dawn"]
    assert frontmatter["artists"] == ["[[Music/Artists/Ada|Ada]]"]
    assert frontmatter["album"] == "[[Music/Albums/First Light - Ada|First Light]]"
    assert frontmatter["music_sources"] == {
        "spotify": "https://open.spotify.com/track/tr1",
        "playlists": ["Liked Songs"],
    }


def test_unresolved_references_render_as_plain_titles() -> None:
    other = make_artist("Cleo", "ar3")
    track = make_track("Dawn", "tr1", artists=[other], album=None)
    track.album = SimplifiedAlbum(title="Unknown Tapes", ids=MusicIds(spotify_id="al9"))

    frontmatter = _writer().render(track, None)

    assert frontmatter["artists"] == ["Cleo"]
    assert frontmatter["album"] == "Unknown Tapes"
    assert frontmatter["in_library"] is False


def test_defaults_apply_to_new_notes_only() -> None:
    writer = _writer(rating=3)
    track = make_track("Dawn", "tr1", artists=[ADA], album=FIRST_LIGHT)

    existing = writer.render(track, None)
    del existing["rating"]

    assert "rating" not in writer.render(track, existing)


def test_unchanged_content_is_not_rewritten() -> None:
    writer = _writer()
    track = make_track("Dawn", "tr1", artists=[ADA], album=FIRST_LIGHT)
    existing = writer.render(track, None)
    existing["modified"] = date(2020, 1, 1)

    assert writer.apply(track, existing) is None


def test_changed_content_bumps_modified_and_keeps_user_fields() -> None:
    writer = _writer()
    track = make_track("Dawn", "tr1", artists=[ADA], album=FIRST_LIGHT)
    existing = {
        "title": "Dawn (radio edit)",
        "created": date(2020, 5, 5),
        "modified": date(2020, 5, 5),
        "aliases": [],
        "rating": 4,
        "music_ids": {"spotify_id": "tr1", "isrc": "STORED"},
        "music_sources": {"online": ["https://blog"]},
    }

    updated = writer.apply(track, existing)

    assert updated is not None
    assert updated["title"] == "Dawn (radio edit)"
    assert updated["aliases"] == []
    assert updated["rating"] == 4
    assert updated["created"] == date(2020, 5, 5)
    assert updated["modified"] == TODAY
    assert updated["music_ids"] == {
        "spotify_id": "tr1",
        "isrc": "STORED",
        "spotify_uri": "spotify:track:tr1",
    }
    assert updated["music_sources"]["online"] == ["https://blog"]
    assert updated["music_sources"]["playlists"] == ["Liked Songs"]


def test_single_drops_album_and_unknown_album_keeps_it() -> None:
    writer = _writer()
    existing = {"title": "Solo", "album": "Old Album"}
    single = Track(title="Solo", is_single=True)
    unknown = Track(title="Solo")

    assert "album" not in writer.render(single, existing)
    assert writer.render(unknown, existing)["album"] == "Old Album"


def test_album_tracks_are_not_replaced_once_present() -> None:
    writer = _writer()
    existing = {"title": "First Light", "tracks": ["Custom order"]}

    frontmatter = writer.render(FIRST_LIGHT, existing)

    assert frontmatter["tracks"] == ["Custom order"]
    assert frontmatter["artists"] == ["[[Music/Artists/Ada|Ada]]"]


def test_library_flag_update() -> None:
    writer = _writer()
    existing = {"title": "Dawn", "in_library": True, "modified": date(2020, 1, 1)}

    assert writer.with_in_library(existing, True) is None
    flagged = writer.with_in_library(existing, False)
    assert flagged == {"title": "Dawn", "in_library": False, "modified": TODAY}


def test_reader_resolves_links_to_identifiers() -> None:
    reader = FrontmatterReader(links=LINKS)
    frontmatter = {
        "title": "Dawn",
        "in_library": True,
        "cover": "https://cover",
        "music_ids": {"spotify_id": "tr1"},
        "artists": ["[[Music/Artists/Ada|Ada]]", "Guest Star"],
        "album": "[[Music/Albums/First Light - Ada|First Light]]",
    }

    track = reader.read(EntityKind.TRACK, frontmatter, fallback_title="file name")

    assert isinstance(track, Track)
    assert track.ids == MusicIds(spotify_id="tr1")
    assert track.in_library is True
    assert track.image == "https://cover"
    assert track.artists == [
        SimplifiedArtist(title="Ada", ids=ADA.ids),
        SimplifiedArtist(title="Guest Star"),
    ]
    assert track.album == SimplifiedAlbum(title="First Light", ids=FIRST_LIGHT.ids)
    assert not track.is_single


def test_reader_fills_gaps_from_fallbacks() -> None:
    reader = FrontmatterReader(links=LINKS)

    album = reader.read(EntityKind.ALBUM, {"tracks": ["One", "", "Two"]}, fallback_title="Tapes")
    track = reader.read(EntityKind.TRACK, {"in_library": "yes"}, fallback_title="Solo")

    assert isinstance(album, Album)
    assert album.title == "Tapes"
    assert [ref.title for ref in album.tracks] == ["One", "Two"]
    assert isinstance(track, Track)
    assert track.is_single
    assert track.in_library is None

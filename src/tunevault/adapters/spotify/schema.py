"""Minimal Pydantic models for the Spotify Web API."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field


class SpotifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SpotifyImage(SpotifyBaseModel):
    url: str
    width: int | None = None
    height: int | None = None


class SpotifyArtist(SpotifyBaseModel):
    # local files carry artists without ids
    id: str | None = None
    uri: str | None = None
    name: str
    external_urls: dict[str, str] = Field(default_factory=dict)
    images: list[SpotifyImage] = Field(default_factory=list["SpotifyImage"])


class SpotifySimplifiedTrack(SpotifyBaseModel):
    id: str | None = None
    uri: str | None = None
    name: str
    track_number: int | None = None
    disc_number: int | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])


class SpotifyPage(SpotifyBaseModel):
    href: str | None = None
    limit: int | None = None
    next: str | None = None
    offset: int | None = None
    previous: str | None = None
    total: int | None = None


class AlbumTracksPage(SpotifyPage):
    items: list[SpotifySimplifiedTrack] = Field(default_factory=list["SpotifySimplifiedTrack"])


class SpotifyAlbum(SpotifyBaseModel):
    id: str | None = None
    uri: str | None = None
    name: str
    album_type: str | None = None
    total_tracks: int | None = None
    release_date: str | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])
    images: list[SpotifyImage] = Field(default_factory=list["SpotifyImage"])
    external_ids: dict[str, str] = Field(default_factory=dict)
    external_urls: dict[str, str] = Field(default_factory=dict)
    tracks: AlbumTracksPage | None = None


class SpotifyTrack(SpotifyBaseModel):
    id: str | None = None
    uri: str | None = None
    name: str
    duration_ms: int | None = None
    is_local: bool = False
    album: SpotifyAlbum | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])
    external_ids: dict[str, str] = Field(default_factory=dict)
    external_urls: dict[str, str] = Field(default_factory=dict)


class SavedTrackItem(SpotifyBaseModel):
    added_at: datetime | None = None
    track: SpotifyTrack


class SavedAlbumItem(SpotifyBaseModel):
    added_at: datetime | None = None
    album: SpotifyAlbum


class PlaylistTrackItem(SpotifyBaseModel):
    added_at: datetime | None = None
    # removed tracks come back as null
    track: SpotifyTrack | None = None


class SpotifyCursor(SpotifyBaseModel):
    after: str | None = None
    before: str | None = None


class SavedTracksPage(SpotifyPage):
    items: list[SavedTrackItem] = Field(default_factory=list["SavedTrackItem"])


class SavedAlbumsPage(SpotifyPage):
    items: list[SavedAlbumItem] = Field(default_factory=list["SavedAlbumItem"])


class PlaylistTracksPage(SpotifyPage):
    items: list[PlaylistTrackItem] = Field(default_factory=list["PlaylistTrackItem"])


class FollowedArtistsPage(SpotifyBaseModel):
    href: str | None = None
    limit: int | None = None
    next: str | None = None
    total: int | None = None
    cursors: SpotifyCursor | None = None
    items: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])


class FollowedArtistsResponse(SpotifyBaseModel):
    artists: FollowedArtistsPage


class SeveralArtistsResponse(SpotifyBaseModel):
    artists: list[SpotifyArtist | None] = Field(default_factory=list["SpotifyArtist | None"])


class SeveralAlbumsResponse(SpotifyBaseModel):
    albums: list[SpotifyAlbum | None] = Field(default_factory=list["SpotifyAlbum | None"])


class SeveralTracksResponse(SpotifyBaseModel):
    tracks: list[SpotifyTrack | None] = Field(default_factory=list["SpotifyTrack | None"])

"""Normalized music entities.

Entities are rebuilt from a library source on every fetch, or from a note
when the vault is read. ``Simplified*`` references express relationships
without nesting full objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from tunevault.domain.model.enums import EntityKind
from tunevault.domain.model.external_ids import MusicIds
from tunevault.domain.model.provenance import MusicSources

if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import Path


@dataclass(slots=True, kw_only=True)
class SimplifiedArtist:
    title: str
    ids: MusicIds = field(default_factory=MusicIds)


@dataclass(slots=True, kw_only=True)
class SimplifiedTrack:
    title: str
    ids: MusicIds = field(default_factory=MusicIds)


@dataclass(slots=True, kw_only=True)
class SimplifiedAlbum:
    title: str
    ids: MusicIds = field(default_factory=MusicIds)
    artists: list[SimplifiedArtist] = field(default_factory=list["SimplifiedArtist"])


type Reference = SimplifiedArtist | SimplifiedAlbum | SimplifiedTrack


@dataclass(slots=True, kw_only=True)
class MusicEntity:
    ENTITY_KIND: ClassVar[EntityKind]

    title: str
    ids: MusicIds = field(default_factory=MusicIds)
    sources: MusicSources = field(default_factory=MusicSources)
    in_library: bool | None = None
    image: str | None = None
    added_at: datetime | None = None

    @property
    def kind(self) -> EntityKind:
        return self.ENTITY_KIND

    @property
    def primary_artist(self) -> str | None:
        return None


@dataclass(slots=True, kw_only=True)
class Artist(MusicEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.ARTIST


@dataclass(slots=True, kw_only=True)
class Album(MusicEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.ALBUM

    artists: list[SimplifiedArtist] = field(default_factory=list["SimplifiedArtist"])
    tracks: list[SimplifiedTrack] = field(default_factory=list["SimplifiedTrack"])

    @property
    def primary_artist(self) -> str | None:
        return self.artists[0].title if self.artists else None


@dataclass(slots=True, kw_only=True)
class Track(MusicEntity):
    """A track; ``album`` is ``None`` with ``is_single`` for singles, or when unknown."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.TRACK

    artists: list[SimplifiedArtist] = field(default_factory=list["SimplifiedArtist"])
    album: SimplifiedAlbum | None = None
    is_single: bool = False

    @property
    def primary_artist(self) -> str | None:
        return self.artists[0].title if self.artists else None


type AnyEntity = Artist | Album | Track


@dataclass(frozen=True, slots=True)
class NoteHandle:
    """Location of a backing note.

    ``link_path`` is vault-relative, uses forward slashes and has no ``.md``
    suffix, which is the form wiki links use.
    """

    path: Path
    link_path: str

    @property
    def basename(self) -> str:
        return self.path.stem


@dataclass
class MusicFile[T: MusicEntity]:
    entity: T
    note: NoteHandle

    @property
    def ids(self) -> MusicIds:
        return self.entity.ids

    @property
    def kind(self) -> EntityKind:
        return self.entity.kind

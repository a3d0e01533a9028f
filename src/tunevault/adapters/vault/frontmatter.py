"""Mapping between entities and note frontmatter.

``FrontmatterReader`` turns a note back into an entity; ``FrontmatterWriter``
merges an entity into existing frontmatter. Keys this module does not own are
left untouched, in their original order.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from logging import getLogger
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any, Final, Protocol, assert_never

from tunevault.domain.model import (
    Album,
    Artist,
    EntityKind,
    MusicIds,
    MusicSources,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedTrack,
    Track,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from tunevault.domain.model import AnyEntity, MusicEntity, Reference

log = getLogger(__name__)

_LINK_RE = re.compile(r"^\[\[(?P<target>[^\]|]+)(?:\|(?P<alias>[^\]]*))?\]\]$")

VOLATILE_KEYS: Final[frozenset[str]] = frozenset({"modified"})


class LinkTargets(Protocol):
    """Resolves references against the notes that currently exist."""

    def ids_for_link(self, kind: EntityKind, link_path: str) -> MusicIds | None: ...

    def link_path_for(self, kind: EntityKind, ids: MusicIds) -> str | None: ...


def render_link(link_path: str, title: str) -> str:
    return f"[[{link_path}|{title}]]"


def parse_link(value: str) -> tuple[str, str | None] | None:
    match = _LINK_RE.match(value.strip())
    if match is None:
        return None
    target = match.group("target").strip()
    target = target.removesuffix(".md")
    alias = match.group("alias")
    return target, alias.strip() if alias else None


def as_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _as_list(value: object) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def _as_mapping(value: object) -> dict[str, Any]:
    if isinstance(value, dict):
        return {str(key): item for key, item in value.items()}
    return {}


@dataclass(slots=True)
class FrontmatterReader:
    links: LinkTargets

    def read(
        self, kind: EntityKind, frontmatter: Mapping[str, Any], *, fallback_title: str
    ) -> AnyEntity:
        raw_title = frontmatter.get("title")
        title = str(raw_title).strip() if raw_title else fallback_title
        in_library = frontmatter.get("in_library")
        cover = frontmatter.get("cover")
        ids = MusicIds.from_mapping(_as_mapping(frontmatter.get("music_ids")))
        sources = MusicSources.from_mapping(_as_mapping(frontmatter.get("music_sources")))
        common = {
            "title": title,
            "ids": ids,
            "sources": sources,
            "in_library": in_library if isinstance(in_library, bool) else None,
            "image": str(cover) if cover else None,
        }
        match kind:
            case EntityKind.ARTIST:
                return Artist(**common)
            case EntityKind.ALBUM:
                return Album(
                    **common,
                    artists=self._artists(frontmatter),
                    tracks=[
                        SimplifiedTrack(title=str(item))
                        for item in _as_list(frontmatter.get("tracks"))
                        if item
                    ],
                )
            case EntityKind.TRACK:
                album_raw = frontmatter.get("album")
                album: SimplifiedAlbum | None = None
                if album_raw:
                    album_title, album_ids = self._reference(EntityKind.ALBUM, album_raw)
                    album = SimplifiedAlbum(title=album_title, ids=album_ids)
                # an album-less track note was written for a single
                return Track(
                    **common,
                    artists=self._artists(frontmatter),
                    album=album,
                    is_single=album is None,
                )
            case _:
                assert_never(kind)

    def _artists(self, frontmatter: Mapping[str, Any]) -> list[SimplifiedArtist]:
        artists: list[SimplifiedArtist] = []
        for item in _as_list(frontmatter.get("artists")):
            if not item:
                continue
            title, ids = self._reference(EntityKind.ARTIST, item)
            artists.append(SimplifiedArtist(title=title, ids=ids))
        return artists

    def _reference(self, kind: EntityKind, value: object) -> tuple[str, MusicIds]:
        text = str(value)
        parsed = parse_link(text)
        if parsed is None:
            return text.strip(), MusicIds()
        target, alias = parsed
        ids = self.links.ids_for_link(kind, target)
        return alias or PurePosixPath(target).name, ids or MusicIds()


@dataclass(slots=True)
class FrontmatterWriter:
    links: LinkTargets
    default_frontmatter: Mapping[EntityKind, Mapping[str, Any]] = field(
        default_factory=dict[EntityKind, "Mapping[str, Any]"]
    )
    today: Callable[[], date] = date.today

    def apply(
        self, entity: MusicEntity, existing: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Frontmatter to write for ``entity``, or ``None`` when nothing changes."""

        rendered = self.render(entity, existing)
        if existing is None:
            return rendered
        if _content(rendered) == _content(existing):
            return None
        rendered["modified"] = self.today()
        return rendered

    def with_in_library(
        self, existing: Mapping[str, Any], in_library: bool
    ) -> dict[str, Any] | None:
        if existing.get("in_library") is in_library:
            return None
        updated = dict(existing)
        updated["in_library"] = in_library
        updated["modified"] = self.today()
        return updated

    def render(self, entity: MusicEntity, existing: Mapping[str, Any] | None) -> dict[str, Any]:
        today = self.today()
        frontmatter: dict[str, Any] = {} if existing is None else dict(existing)

        if not frontmatter.get("title"):
            frontmatter["title"] = entity.title
        frontmatter["created"] = _created(frontmatter.get("created"), entity.added_at, today)
        if existing is None:
            frontmatter["modified"] = today
        if entity.image and not frontmatter.get("cover"):
            frontmatter["cover"] = entity.image
        if "aliases" not in frontmatter:
            frontmatter["aliases"] = [entity.title]
        if entity.in_library is not None:
            frontmatter["in_library"] = entity.in_library
        elif "in_library" not in frontmatter:
            frontmatter["in_library"] = False
        frontmatter["music_ids"] = _merge_ids(frontmatter.get("music_ids"), entity)
        sources = _merge_sources(frontmatter.get("music_sources"), entity.sources)
        if sources or "music_sources" in frontmatter:
            frontmatter["music_sources"] = sources

        match entity:
            case Album():
                if entity.artists:
                    frontmatter["artists"] = self._links(EntityKind.ARTIST, entity.artists)
                if entity.tracks and not frontmatter.get("tracks"):
                    frontmatter["tracks"] = [track.title for track in entity.tracks]
            case Track():
                if entity.artists:
                    frontmatter["artists"] = self._links(EntityKind.ARTIST, entity.artists)
                if entity.is_single:
                    frontmatter.pop("album", None)
                elif entity.album is not None:
                    frontmatter["album"] = self._link(EntityKind.ALBUM, entity.album)
            case _:
                pass

        if existing is None:
            for key, value in self.default_frontmatter.get(entity.kind, {}).items():
                frontmatter.setdefault(key, copy.deepcopy(value))
        return frontmatter

    def _links(self, kind: EntityKind, refs: list[SimplifiedArtist]) -> list[str]:
        return [self._link(kind, ref) for ref in refs]

    def _link(self, kind: EntityKind, ref: Reference) -> str:
        if ref.ids.is_empty():
            return ref.title
        link_path = self.links.link_path_for(kind, ref.ids)
        if link_path is None:
            return ref.title
        return render_link(link_path, ref.title)


def _content(frontmatter: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in frontmatter.items() if key not in VOLATILE_KEYS}


def _created(existing: object, added_at: datetime | None, today: date) -> date:
    candidates = [
        value for value in (as_date(existing), added_at.date() if added_at else None) if value
    ]
    return min(candidates) if candidates else today


def _merge_ids(existing: object, entity: MusicEntity) -> dict[str, Any]:
    merged = _as_mapping(existing)
    for kind, value in entity.ids.items():
        current = merged.get(kind.value)
        if current is None or not str(current).strip():
            merged[kind.value] = value
        elif str(current) != value:
            log.warning(
                "Keeping stored %s %r for %s %r; source reports %r",
                kind.value,
                current,
                entity.kind,
                entity.title,
                value,
            )
    return merged


def _merge_sources(existing: object, sources: MusicSources) -> dict[str, Any]:
    merged = _as_mapping(existing)
    if sources.spotify:
        merged["spotify"] = sources.spotify
    if sources.local:
        merged["local"] = sources.local
    for key, values in (("online", sources.online), ("playlists", sources.playlists)):
        if not values:
            continue
        combined = [str(item) for item in _as_list(merged.get(key))]
        combined.extend(value for value in values if value not in combined)
        merged[key] = combined
    return merged

"""Metadata enrichment stages.

A stage takes a batch of entities of one kind and returns a batch of the same
length, in the same order, with gaps filled. ``MetadataEnricher`` runs its
stages in sequence; further sources plug in as additional stages.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol, assert_never, cast

from tunevault.domain.identity import MusicIdIndex
from tunevault.domain.model import (
    Album,
    Artist,
    EntityKind,
    MusicSources,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedTrack,
    Track,
    shares_identifier,
)
from tunevault.domain.ports.library import LibrarySourceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tunevault.domain.model import IdKind, MusicEntity
    from tunevault.domain.ports import LocalTrackLookup, MusicLibrarySource

log = getLogger(__name__)

LOCAL_URI_PREFIX: Final[str] = "spotify:local:"


class EnrichmentStage(Protocol):
    def __call__(
        self, kind: EntityKind, entities: Sequence[MusicEntity]
    ) -> list[MusicEntity]: ...


@dataclass(slots=True)
class MetadataEnricher:
    stages: Sequence[EnrichmentStage] = ()

    def enrich(self, kind: EntityKind, entities: Sequence[MusicEntity]) -> list[MusicEntity]:
        result = list(entities)
        for stage in self.stages:
            result = stage(kind, result)
            if len(result) != len(entities):
                raise RuntimeError(
                    f"Enrichment stage {stage!r} returned {len(result)} {kind}s "
                    f"for {len(entities)} inputs"
                )
        return result

    def enrich_artists(self, artists: Sequence[Artist]) -> list[Artist]:
        return cast("list[Artist]", self.enrich(EntityKind.ARTIST, artists))

    def enrich_albums(self, albums: Sequence[Album]) -> list[Album]:
        return cast("list[Album]", self.enrich(EntityKind.ALBUM, albums))

    def enrich_tracks(self, tracks: Sequence[Track]) -> list[Track]:
        return cast("list[Track]", self.enrich(EntityKind.TRACK, tracks))


@dataclass(slots=True)
class LibrarySourceEnrichment:
    """Re-fetch entities by id from a library source and merge the result."""

    source: MusicLibrarySource

    def __call__(self, kind: EntityKind, entities: Sequence[MusicEntity]) -> list[MusicEntity]:
        available = self.source.available_id_kinds(kind)
        pending: list[int] = []
        primary_ids: list[str] = []
        for position, entity in enumerate(entities):
            primary_id = self.source.get_primary_id(entity.ids)
            if primary_id is None or not needs_refetch(entity, available):
                continue
            pending.append(position)
            if primary_id not in primary_ids:
                primary_ids.append(primary_id)

        result = list(entities)
        if not pending:
            return result

        try:
            fetched = self._fetch(kind, primary_ids)
        except LibrarySourceError:
            log.warning(
                "Could not enrich %s %s(s); keeping them unchanged",
                len(primary_ids),
                kind,
                exc_info=True,
            )
            return result

        # correlate by identifier; the source does not promise to keep request order
        index = MusicIdIndex.from_entities(fetched)
        matched = 0
        for position in pending:
            found = index.get(result[position].ids)
            if found is None:
                continue
            result[position] = merge_entity(result[position], found)
            matched += 1
        log.debug("Enriched %s of %s %s(s) from library source", matched, len(pending), kind)
        return result

    def _fetch(self, kind: EntityKind, ids: Sequence[str]) -> Sequence[MusicEntity]:
        match kind:
            case EntityKind.ARTIST:
                return self.source.get_artists_by_id(ids)
            case EntityKind.ALBUM:
                return self.source.get_albums_by_id(ids)
            case EntityKind.TRACK:
                return self.source.get_tracks_by_id(ids)
            case _:
                assert_never(kind)


@dataclass(slots=True)
class LocalFileEnrichment:
    """Attach the matching audio file to tracks that reference local files."""

    lookup: LocalTrackLookup

    def __call__(self, kind: EntityKind, entities: Sequence[MusicEntity]) -> list[MusicEntity]:
        if kind is not EntityKind.TRACK:
            return list(entities)
        result: list[MusicEntity] = []
        for entity in entities:
            uri = entity.ids.spotify_uri
            if uri and uri.startswith(LOCAL_URI_PREFIX) and not entity.sources.local:
                path = self.lookup.find_track_file(uri)
                if path is not None:
                    local = MusicSources(local=path.as_posix())
                    result.append(replace(entity, sources=entity.sources.merged_with(local)))
                    continue
            result.append(entity)
        return result


def needs_refetch(entity: MusicEntity, available: frozenset[IdKind]) -> bool:
    """Whether a by-id fetch could add anything to ``entity``.

    True when an identifier kind the source supplies is missing, or when a
    relationship still lacks identifiers (e.g. a link stored as plain text).
    Album track listings are stored as titles only and do not count.
    """

    if not available <= entity.ids.kinds():
        return True
    match entity:
        case Artist():
            return False
        case Album():
            return any(ref.ids.is_empty() for ref in entity.artists)
        case Track():
            if any(ref.ids.is_empty() for ref in entity.artists):
                return True
            if entity.album is None:
                return not entity.is_single
            return entity.album.ids.is_empty()
        case _:
            raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


def merge_entity[E: MusicEntity](original: E, enriched: MusicEntity) -> E:
    """Overlay ``enriched`` onto ``original`` without losing anything ``original`` has.

    Fields present in ``enriched`` win; absent ones never clear ``original``.
    Identifiers are merged additively and keep the values already set.
    """

    context = f"{original.kind} {original.title!r}"
    merged = replace(
        original,
        title=enriched.title or original.title,
        ids=original.ids.merged_with(enriched.ids, context=context),
        sources=original.sources.merged_with(enriched.sources),
        in_library=enriched.in_library if enriched.in_library is not None else original.in_library,
        image=enriched.image or original.image,
        added_at=enriched.added_at or original.added_at,
    )
    match merged, enriched:
        case Album(), Album():
            merged.artists = merge_references(merged.artists, enriched.artists)
            merged.tracks = merge_references(merged.tracks, enriched.tracks)
        case Track(), Track():
            merged.artists = merge_references(merged.artists, enriched.artists)
            if enriched.is_single:
                merged.album = None
                merged.is_single = True
            elif enriched.album is not None:
                merged.album = _merge_album_reference(merged.album, enriched.album)
                merged.is_single = False
        case _:
            pass
    return merged


def merge_references[R: (SimplifiedArtist, SimplifiedTrack)](
    originals: Sequence[R], enriched: Sequence[R]
) -> list[R]:
    """Take the enriched listing, carrying over identifiers the originals knew.

    References are paired by shared identifier, falling back to a
    case-insensitive title match for references stored without identifiers.
    """

    if not enriched:
        return list(originals)
    by_ids = MusicIdIndex(originals, get_ids=lambda ref: ref.ids)
    by_title: dict[str, R] = {}
    for ref in originals:
        if ref.ids.is_empty():
            by_title.setdefault(ref.title.casefold(), ref)

    merged: list[R] = []
    for ref in enriched:
        paired = by_ids.get(ref.ids) or by_title.get(ref.title.casefold())
        if paired is None:
            merged.append(ref)
            continue
        merged.append(replace(ref, ids=paired.ids.merged_with(ref.ids, context=repr(ref.title))))
    return merged


def _merge_album_reference(
    original: SimplifiedAlbum | None, enriched: SimplifiedAlbum
) -> SimplifiedAlbum:
    if original is None:
        return enriched
    same_album = shares_identifier(original.ids, enriched.ids) or (
        original.ids.is_empty() and original.title.casefold() == enriched.title.casefold()
    )
    if not same_album:
        return enriched
    return SimplifiedAlbum(
        title=enriched.title,
        ids=original.ids.merged_with(enriched.ids, context=f"album {enriched.title!r}"),
        artists=merge_references(original.artists, enriched.artists),
    )


__all__ = [
    "EnrichmentStage",
    "LibrarySourceEnrichment",
    "LocalFileEnrichment",
    "MetadataEnricher",
    "merge_entity",
    "merge_references",
    "needs_refetch",
]

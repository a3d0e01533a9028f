"""Port for remote music catalogs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tunevault.domain.errors import TunevaultError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tunevault.domain.model import (
        Album,
        Artist,
        EntityKind,
        IdKind,
        MusicEntity,
        MusicIds,
        Track,
    )


class LibrarySourceError(TunevaultError):
    """A library source call failed (network, auth, unexpected payload)."""


class IncompleteFetchError(LibrarySourceError):
    """Part of a collection could not be fetched.

    ``entities`` holds what was fetched; callers may ingest it but must not
    treat it as the complete collection.
    """

    def __init__(self, message: str, *, entities: Sequence[MusicEntity]) -> None:
        super().__init__(message)
        self.entities = list(entities)


@dataclass(frozen=True, slots=True)
class LibraryQueryOptions:
    """``recent_only`` asks for a small window of the latest saves instead of everything."""

    recent_only: bool = False


@runtime_checkable
class MusicLibrarySource(Protocol):
    def get_saved_artists(self, options: LibraryQueryOptions) -> list[Artist]: ...

    def get_saved_albums(self, options: LibraryQueryOptions) -> list[Album]: ...

    def get_saved_tracks(self, options: LibraryQueryOptions) -> list[Track]: ...

    def get_artists_by_id(self, ids: Sequence[str]) -> list[Artist]: ...

    def get_albums_by_id(self, ids: Sequence[str]) -> list[Album]: ...

    def get_tracks_by_id(self, ids: Sequence[str]) -> list[Track]: ...

    def get_primary_id(self, ids: MusicIds) -> str | None: ...

    def available_id_kinds(self, kind: EntityKind) -> frozenset[IdKind]:
        """Identifier kinds a by-id fetch can supply for ``kind``."""
        ...


__all__ = [
    "IncompleteFetchError",
    "LibraryQueryOptions",
    "LibrarySourceError",
    "MusicLibrarySource",
]

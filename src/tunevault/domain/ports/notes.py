"""Port for persisted notes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tunevault.domain.errors import TunevaultError

if TYPE_CHECKING:
    from tunevault.domain.identity import MusicIdIndex
    from tunevault.domain.model import EntityKind, MusicEntity, MusicFile


class NoteStorageError(TunevaultError):
    """Base class for note persistence failures."""


class NoteWriteError(NoteStorageError):
    """The storage layer rejected a read-modify-write of one note."""


class NoteNameCollisionError(NoteStorageError):
    """No free file name was found for a new note."""


@runtime_checkable
class NoteRepository(Protocol):
    """Reads and writes one note per entity.

    The repository owns the identifier-to-note mapping. Indices are scoped to
    a pass: ``begin_pass`` drops them and ``load_index`` rebuilds one kind
    from storage. Each write is atomic per note.
    """

    def begin_pass(self) -> None: ...

    def ensure_directories(self) -> None: ...

    def read_all(self, kind: EntityKind) -> list[MusicFile[MusicEntity]]: ...

    def load_index(self, kind: EntityKind) -> MusicIdIndex[MusicFile[MusicEntity]]: ...

    def index(self, kind: EntityKind) -> MusicIdIndex[MusicFile[MusicEntity]]: ...

    def create(self, entity: MusicEntity) -> tuple[MusicFile[MusicEntity], bool]: ...

    def update(self, file: MusicFile[MusicEntity], entity: MusicEntity) -> bool: ...

    def set_in_library(self, file: MusicFile[MusicEntity], in_library: bool) -> bool: ...


__all__ = [
    "NoteNameCollisionError",
    "NoteRepository",
    "NoteStorageError",
    "NoteWriteError",
]

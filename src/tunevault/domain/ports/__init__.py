"""Domain port definitions for adapters."""

from __future__ import annotations

from .library import (
    IncompleteFetchError,
    LibraryQueryOptions,
    LibrarySourceError,
    MusicLibrarySource,
)
from .local_files import LocalTrackLookup
from .notes import NoteNameCollisionError, NoteRepository, NoteStorageError, NoteWriteError

__all__ = [
    "IncompleteFetchError",
    "LibraryQueryOptions",
    "LibrarySourceError",
    "LocalTrackLookup",
    "MusicLibrarySource",
    "NoteNameCollisionError",
    "NoteRepository",
    "NoteStorageError",
    "NoteWriteError",
]

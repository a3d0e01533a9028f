"""Markdown vault implementation of the note repository port."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

from tunevault.domain.identity import MusicIdIndex
from tunevault.domain.model import EntityKind, MusicFile, NoteHandle
from tunevault.domain.ports.notes import NoteNameCollisionError, NoteStorageError, NoteWriteError

from .document import FrontmatterError, NoteDocument, read_document, reserve_path, write_document
from .filenames import MAX_NAME_ATTEMPTS, candidate_names, note_basename
from .frontmatter import FrontmatterReader, FrontmatterWriter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from tunevault.config.vault import VaultConfig
    from tunevault.domain.model import MusicEntity, MusicIds

log = getLogger(__name__)

type NoteFile = MusicFile[MusicEntity]


class MarkdownNoteRepository:
    """One markdown note per entity, grouped into a folder per kind.

    Indices are cached per kind until ``begin_pass`` or ``load_index``.
    Creation is serialised per kind (index check, file name reservation and
    index registration happen under one lock); each note's read-modify-write
    is serialised per path.
    """

    def __init__(
        self,
        *,
        config: VaultConfig,
        default_frontmatter: Mapping[str, Mapping[str, Any]] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._root = config.resolve_vault_dir()
        self._folders: dict[EntityKind, PurePosixPath] = {
            EntityKind.ARTIST: config.folder(config.artists_path),
            EntityKind.ALBUM: config.folder(config.albums_path),
            EntityKind.TRACK: config.folder(config.tracks_path),
        }
        defaults = {
            EntityKind(kind): dict(values) for kind, values in (default_frontmatter or {}).items()
        }
        self._reader = FrontmatterReader(links=self)
        self._writer = FrontmatterWriter(links=self, default_frontmatter=defaults, today=today)

        self._cache_lock = threading.RLock()
        self._create_locks = {kind: threading.Lock() for kind in EntityKind}
        self._path_locks: dict[Path, threading.Lock] = {}
        self._path_locks_guard = threading.Lock()

        self._files: dict[EntityKind, list[NoteFile]] = {}
        self._indices: dict[EntityKind, MusicIdIndex[NoteFile]] = {}
        self._by_link: dict[EntityKind, dict[str, NoteFile]] = {}

    def folder_path(self, kind: EntityKind) -> Path:
        return self._root.joinpath(*self._folders[kind].parts)

    # -- pass lifecycle -----------------------------------------------------

    def begin_pass(self) -> None:
        with self._cache_lock:
            self._files.clear()
            self._indices.clear()
            self._by_link.clear()

    def ensure_directories(self) -> None:
        for kind in EntityKind:
            folder = self.folder_path(kind)
            try:
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise NoteStorageError(f"Could not create note folder {folder}") from exc

    def read_all(self, kind: EntityKind) -> list[NoteFile]:
        with self._cache_lock:
            if kind not in self._files:
                self._load(kind)
            return list(self._files[kind])

    def load_index(self, kind: EntityKind) -> MusicIdIndex[NoteFile]:
        with self._cache_lock:
            self._load(kind)
            return self._indices[kind]

    def index(self, kind: EntityKind) -> MusicIdIndex[NoteFile]:
        with self._cache_lock:
            if kind not in self._indices:
                self._load(kind)
            return self._indices[kind]

    # -- writes -------------------------------------------------------------

    def create(self, entity: MusicEntity) -> tuple[NoteFile, bool]:
        """Create a note for ``entity``; returns the note and whether it is new.

        An entity that is already indexed gets its existing note back.
        """

        kind = entity.kind
        frontmatter = self._writer.render(entity, None)
        with self._create_locks[kind]:
            existing = self.index(kind).get(entity.ids)
            if existing is not None:
                log.debug("%s %r already has note %s", kind, entity.title, existing.note.path)
                return existing, False
            path = self._reserve(kind, note_basename(entity))
            file = MusicFile(entity=entity, note=self._handle(kind, path))
            self._register(kind, file)

        with self._path_lock(path):
            try:
                write_document(path, NoteDocument(frontmatter=frontmatter))
            except (OSError, ValueError) as exc:
                path.unlink(missing_ok=True)
                self._forget(kind, file)
                raise NoteWriteError(f"Could not write note {path}") from exc
        log.debug("Created %s note %s", kind, path)
        return file, True

    def update(self, file: NoteFile, entity: MusicEntity) -> bool:
        """Merge ``entity`` into the note; ``False`` when the note already matched."""

        path = file.note.path
        with self._path_lock(path):
            document = self._read(path)
            frontmatter = self._writer.apply(entity, document.frontmatter)
            if frontmatter is None:
                return False
            self._write(path, NoteDocument(frontmatter=frontmatter, body=document.body))
        with self._cache_lock:
            if file.kind in self._indices:
                self._indices[file.kind].set(entity.ids, file)
        return True

    def set_in_library(self, file: NoteFile, in_library: bool) -> bool:
        path = file.note.path
        with self._path_lock(path):
            document = self._read(path)
            frontmatter = self._writer.with_in_library(document.frontmatter, in_library)
            if frontmatter is None:
                return False
            self._write(path, NoteDocument(frontmatter=frontmatter, body=document.body))
        return True

    # -- link resolution ----------------------------------------------------

    def ids_for_link(self, kind: EntityKind, link_path: str) -> MusicIds | None:
        with self._cache_lock:
            if kind not in self._by_link:
                self._load(kind)
            file = self._by_link[kind].get(link_path)
        return file.entity.ids if file is not None else None

    def link_path_for(self, kind: EntityKind, ids: MusicIds) -> str | None:
        file = self.index(kind).get(ids)
        return file.note.link_path if file is not None else None

    # -- internals ----------------------------------------------------------

    def _load(self, kind: EntityKind) -> None:
        folder = self.folder_path(kind)
        files: list[NoteFile] = []
        if folder.is_dir():
            for path in sorted(folder.glob("*.md")):
                file = self._read_file(kind, path)
                if file is not None:
                    files.append(file)
        self._files[kind] = files
        self._indices[kind] = MusicIdIndex.from_files(files)
        self._by_link[kind] = {file.note.link_path: file for file in files}
        log.debug("Loaded %s %s note(s) from %s", len(files), kind, folder)

    def _read_file(self, kind: EntityKind, path: Path) -> NoteFile | None:
        try:
            document = read_document(path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            log.warning("Skipping unreadable note %s: %s", path, exc)
            return None
        entity = self._reader.read(kind, document.frontmatter, fallback_title=path.stem)
        return MusicFile(entity=entity, note=self._handle(kind, path))

    def _register(self, kind: EntityKind, file: NoteFile) -> None:
        with self._cache_lock:
            self.index(kind).set(file.entity.ids, file)
            self._files[kind].append(file)
            self._by_link[kind][file.note.link_path] = file

    def _forget(self, kind: EntityKind, file: NoteFile) -> None:
        with self._cache_lock:
            files = [known for known in self._files.get(kind, []) if known is not file]
            self._files[kind] = files
            self._indices[kind] = MusicIdIndex.from_files(files)
            self._by_link.get(kind, {}).pop(file.note.link_path, None)

    def _handle(self, kind: EntityKind, path: Path) -> NoteHandle:
        return NoteHandle(path=path, link_path=str(self._folders[kind] / path.stem))

    def _reserve(self, kind: EntityKind, basename: str) -> Path:
        folder = self.folder_path(kind)
        for name in candidate_names(basename):
            path = folder / f"{name}.md"
            try:
                if reserve_path(path):
                    return path
            except (OSError, ValueError) as exc:
                raise NoteWriteError(f"Could not create note {path}") from exc
        raise NoteNameCollisionError(
            f"No free file name for {basename!r} in {folder} after {MAX_NAME_ATTEMPTS} attempts"
        )

    def _read(self, path: Path) -> NoteDocument:
        try:
            return read_document(path)
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            raise NoteWriteError(f"Could not read note {path}") from exc

    def _write(self, path: Path, document: NoteDocument) -> None:
        try:
            write_document(path, document)
        except (OSError, ValueError) as exc:
            raise NoteWriteError(f"Could not write note {path}") from exc

    @contextmanager
    def _path_lock(self, path: Path) -> Iterator[None]:
        with self._path_locks_guard:
            lock = self._path_locks.setdefault(path, threading.Lock())
        with lock:
            yield

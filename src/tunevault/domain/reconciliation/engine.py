"""Orchestrator for full and incremental sync passes.

A pass walks the tiers in dependency order (artists, albums, tracks). Each
tier ends with a barrier: its writes are complete and its index is rebuilt
from storage before the next tier resolves links into it.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, assert_never

from tunevault.domain.errors import TunevaultError
from tunevault.domain.identity import MusicIdIndex
from tunevault.domain.model import TIER_ORDER, EntityKind
from tunevault.domain.ports.library import (
    IncompleteFetchError,
    LibraryQueryOptions,
    LibrarySourceError,
)
from tunevault.domain.ports.notes import NoteStorageError

from .compare import differs_in_storage
from .results import SyncMode, SyncReport, TierReport

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tunevault.domain.enrichment import MetadataEnricher
    from tunevault.domain.model import MusicEntity, MusicFile
    from tunevault.domain.ports import MusicLibrarySource, NoteRepository

log = getLogger(__name__)

type Notifier = Callable[[str], None]

DEFAULT_MAX_WORKERS = 8


class SyncState(StrEnum):
    IDLE = "idle"
    DIRECTORY_ENSURED = "directory_ensured"
    FRESHENING = "freshening"
    FETCHING = "fetching"
    INGESTING = "ingesting"
    LIBRARY_STATUS_UPDATE = "library_status_update"


class SyncAlreadyRunningError(TunevaultError):
    """A pass was requested while another one is still running."""


@dataclass(slots=True, eq=False)
class ReconciliationEngine:
    """Reconcile a library source into a note repository.

    The engine never touches storage directly; every create and update goes
    through the repository. Only one pass runs at a time.
    """

    source: MusicLibrarySource
    repository: NoteRepository
    enricher: MetadataEnricher
    notify: Notifier | None = None
    max_workers: int = DEFAULT_MAX_WORKERS
    _state: SyncState = field(default=SyncState.IDLE, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def state(self) -> SyncState:
        return self._state

    def full_sync(self) -> SyncReport:
        """Freshen, fetch everything, ingest, then recompute library status."""

        return self._run(SyncMode.FULL, silent=False)

    def incremental_sync(self, *, silent: bool = False) -> SyncReport:
        """Ingest the recent window only; never revokes ``in_library``."""

        return self._run(SyncMode.INCREMENTAL, silent=silent)

    def _run(self, mode: SyncMode, *, silent: bool) -> SyncReport:
        if not self._lock.acquire(blocking=False):
            raise SyncAlreadyRunningError(f"Cannot start {mode} sync: a pass is already running")
        report = SyncReport(mode=mode)
        try:
            log.info("Starting %s sync", mode)
            self.repository.begin_pass()
            self.repository.ensure_directories()
            self._state = SyncState.DIRECTORY_ENSURED
            match mode:
                case SyncMode.FULL:
                    self._full_pass(report)
                case SyncMode.INCREMENTAL:
                    self._incremental_pass(report)
                case _:
                    assert_never(mode)
        except Exception as exc:
            log.exception("%s sync aborted", mode.capitalize())
            report.failed = True
            report.error = str(exc) or type(exc).__name__
            self._notify(report.summary())
        else:
            log.info(report.summary())
            if not silent:
                self._notify(report.summary())
        finally:
            self.repository.begin_pass()
            self._state = SyncState.IDLE
            self._lock.release()
        return report

    def _full_pass(self, report: SyncReport) -> None:
        saved_sets: dict[EntityKind, list[MusicEntity]] = {}
        for kind in TIER_ORDER:
            tier = report.tier(kind)
            self._state = SyncState.FRESHENING
            self._freshen(kind, tier)
            self._state = SyncState.FETCHING
            fetched, complete = self._fetch(kind, LibraryQueryOptions(recent_only=False), tier)
            if complete:
                saved_sets[kind] = fetched
            self._state = SyncState.INGESTING
            self._ingest(kind, fetched, tier)
            self._barrier(kind, tier)

        self._state = SyncState.LIBRARY_STATUS_UPDATE
        for kind in TIER_ORDER:
            saved = saved_sets.get(kind)
            if saved is None:
                log.warning("Leaving library status of %ss unchanged: fetch was not complete", kind)
                continue
            self._update_library_status(kind, saved, report.tier(kind))

    def _incremental_pass(self, report: SyncReport) -> None:
        for kind in TIER_ORDER:
            tier = report.tier(kind)
            self._state = SyncState.FETCHING
            fetched, _complete = self._fetch(kind, LibraryQueryOptions(recent_only=True), tier)
            self._state = SyncState.INGESTING
            self._ingest(kind, fetched, tier)
            self._barrier(kind, tier)

    def _freshen(self, kind: EntityKind, tier: TierReport) -> None:
        files = self.repository.read_all(kind)
        if not files:
            return
        enriched = self.enricher.enrich(kind, [file.entity for file in files])
        changed = [
            (file, entity)
            for file, entity in zip(files, enriched, strict=True)
            if differs_in_storage(file.entity, entity)
        ]
        log.info("Freshening %s: %s of %s note(s) differ", kind, len(changed), len(files))
        written, failed = self._write_all(kind, "update", changed, self._update)
        tier.freshened += written
        tier.failed_writes += failed

    def _fetch(
        self, kind: EntityKind, options: LibraryQueryOptions, tier: TierReport
    ) -> tuple[list[MusicEntity], bool]:
        """Saved entities of ``kind`` and whether they are the complete collection."""

        complete = not options.recent_only
        try:
            entities: list[MusicEntity] = list(self._fetch_saved(kind, options))
        except IncompleteFetchError as exc:
            log.warning("Fetched only part of the saved %ss: %s", kind, exc)
            tier.fetch_incomplete = True
            entities = list(exc.entities)
            complete = False
        except LibrarySourceError:
            log.exception("Could not fetch saved %ss; skipping them this pass", kind)
            tier.fetch_failed = True
            return [], False
        tier.fetched = len(entities)
        log.info("Fetched %s saved %s(s)", len(entities), kind)
        return entities, complete

    def _fetch_saved(self, kind: EntityKind, options: LibraryQueryOptions) -> Sequence[MusicEntity]:
        match kind:
            case EntityKind.ARTIST:
                return self.source.get_saved_artists(options)
            case EntityKind.ALBUM:
                return self.source.get_saved_albums(options)
            case EntityKind.TRACK:
                return self.source.get_saved_tracks(options)
            case _:
                assert_never(kind)

    def _ingest(self, kind: EntityKind, fetched: Sequence[MusicEntity], tier: TierReport) -> None:
        if not fetched:
            return
        index = self.repository.index(kind)
        batch: MusicIdIndex[MusicEntity] = MusicIdIndex()
        unrepresented: list[MusicEntity] = []
        for entity in fetched:
            if entity.ids.is_empty():
                log.warning("Ignoring %s %r without identifiers", kind, entity.title)
                continue
            if index.has(entity.ids) or batch.has(entity.ids):
                continue
            batch.set(entity.ids, entity)
            unrepresented.append(entity)
        if not unrepresented:
            log.info("No new %ss to ingest", kind)
            return

        enriched = self.enricher.enrich(kind, unrepresented)
        to_create = [replace(entity, in_library=True) for entity in enriched]
        log.info("Creating %s new %s note(s)", len(to_create), kind)
        written, failed = self._write_all(kind, "create", to_create, self._create)
        tier.created += written
        tier.failed_writes += failed

    def _barrier(self, kind: EntityKind, tier: TierReport) -> None:
        if tier.written:
            self.repository.load_index(kind)

    def _update_library_status(
        self, kind: EntityKind, saved: Sequence[MusicEntity], tier: TierReport
    ) -> None:
        saved_index = MusicIdIndex.from_entities(saved)
        changes: list[tuple[MusicFile[MusicEntity], bool]] = []
        for file in self.repository.read_all(kind):
            if file.ids.is_empty():
                continue
            in_library = saved_index.has(file.ids)
            if file.entity.in_library is not in_library:
                changes.append((file, in_library))
        if not changes:
            return
        log.info("Updating library status of %s %s note(s)", len(changes), kind)
        written, failed = self._write_all(kind, "flag", changes, self._set_in_library)
        tier.library_status_changed += written
        tier.failed_writes += failed

    def _create(self, entity: MusicEntity) -> bool:
        _file, created = self.repository.create(entity)
        return created

    def _update(self, change: tuple[MusicFile[MusicEntity], MusicEntity]) -> bool:
        file, entity = change
        return self.repository.update(file, entity)

    def _set_in_library(self, change: tuple[MusicFile[MusicEntity], bool]) -> bool:
        file, in_library = change
        return self.repository.set_in_library(file, in_library)

    def _write_all[T](
        self,
        kind: EntityKind,
        action: str,
        items: Sequence[T],
        write: Callable[[T], bool],
    ) -> tuple[int, int]:
        """Run ``write`` for every item in parallel; returns ``(written, failed)``.

        A storage failure is logged for its item only; sibling writes go on.
        """

        if not items:
            return 0, 0
        written = failed = 0
        workers = max(1, min(self.max_workers, len(items)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"sync-{kind}") as pool:
            futures = {pool.submit(write, item): item for item in items}
            for future in as_completed(futures):
                try:
                    if future.result():
                        written += 1
                except NoteStorageError as exc:
                    failed += 1
                    log.warning(
                        "Could not %s %s note for %s: %s",
                        action,
                        kind,
                        _describe(futures[future]),
                        exc,
                    )
        return written, failed

    def _notify(self, message: str) -> None:
        if self.notify is None:
            return
        try:
            self.notify(message)
        except Exception:
            log.exception("Sync notification failed")


def _describe(item: object) -> str:
    if isinstance(item, tuple):
        item = item[0]
    title = getattr(item, "title", None)
    if title is None:
        entity = getattr(item, "entity", None)
        title = getattr(entity, "title", None)
    return repr(title) if title is not None else repr(item)

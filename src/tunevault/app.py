"""Application orchestration entry points."""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING

from tunevault.adapters.local_files import LocalTrackMatcher
from tunevault.adapters.spotify import SpotifyClient, SpotifyLibrarySource
from tunevault.adapters.vault import MarkdownNoteRepository
from tunevault.config import get_spotify_config, get_sync_config, get_vault_config
from tunevault.domain.enrichment import (
    EnrichmentStage,
    LibrarySourceEnrichment,
    LocalFileEnrichment,
    MetadataEnricher,
)
from tunevault.domain.reconciliation import DebouncedSync, ReconciliationEngine

if TYPE_CHECKING:
    from tunevault.config import SpotifyConfig, SyncConfig, VaultConfig
    from tunevault.domain.reconciliation import SyncReport
    from tunevault.domain.reconciliation.engine import Notifier


log = getLogger(__name__)


def build_engine(
    *,
    spotify_config: SpotifyConfig | None = None,
    vault_config: VaultConfig | None = None,
    sync_config: SyncConfig | None = None,
    client: SpotifyClient | None = None,
    notify: Notifier | None = None,
) -> ReconciliationEngine:
    """Wire the Spotify source, the markdown vault and enrichment into an engine."""

    vault = vault_config or get_vault_config()
    sync = sync_config or get_sync_config()
    spotify_client = client or SpotifyClient(config=spotify_config or get_spotify_config())

    source = SpotifyLibrarySource(
        client=spotify_client,
        playlist_ids=sync.playlist_ids,
        playlist_names=sync.playlist_names,
        page_size=sync.page_size,
        recent_limit=sync.recent_limit,
    )
    repository = MarkdownNoteRepository(config=vault, default_frontmatter=sync.default_frontmatter)

    stages: list[EnrichmentStage] = [LibrarySourceEnrichment(source)]
    if vault.local_music_dir is not None:
        stages.append(LocalFileEnrichment(LocalTrackMatcher(vault.local_music_dir)))

    log.info(
        "Syncing into %s (playlists=%s, local music=%s)",
        vault.resolve_vault_dir(),
        len(sync.playlist_ids),
        vault.local_music_dir,
    )
    return ReconciliationEngine(
        source=source,
        repository=repository,
        enricher=MetadataEnricher(stages),
        notify=notify,
        max_workers=sync.max_workers,
    )


def run_full_sync(*, engine: ReconciliationEngine | None = None) -> SyncReport:
    active_engine = engine or build_engine()
    return active_engine.full_sync()


def run_incremental_sync(
    *,
    engine: ReconciliationEngine | None = None,
    silent: bool = False,
) -> SyncReport:
    active_engine = engine or build_engine()
    return active_engine.incremental_sync(silent=silent)


def watch(
    *,
    interval_minutes: float,
    engine: ReconciliationEngine | None = None,
    quiet_seconds: float | None = None,
    sync_on_start: bool = False,
    stop: threading.Event | None = None,
) -> None:
    """Run silent incremental passes every ``interval_minutes`` until ``stop`` is set."""

    if interval_minutes <= 0:
        raise ValueError("Interval must be positive")
    active_engine = engine or build_engine()
    if quiet_seconds is None:
        quiet_seconds = get_sync_config().debounce_seconds
    debounced = DebouncedSync(
        lambda: active_engine.incremental_sync(silent=True),
        quiet_seconds=quiet_seconds,
    )
    stop_event = stop or threading.Event()
    log.info("Watching library every %.1f minute(s)", interval_minutes)
    try:
        if sync_on_start:
            debounced.trigger()
        while not stop_event.wait(interval_minutes * 60):
            debounced.trigger()
    finally:
        debounced.cancel()

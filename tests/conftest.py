from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from tunevault.adapters.vault import MarkdownNoteRepository
from tunevault.config.vault import VaultConfig
from tunevault.domain.enrichment import LibrarySourceEnrichment, MetadataEnricher
from tunevault.domain.reconciliation import ReconciliationEngine

from tests.helpers.library import FakeLibrarySource

if TYPE_CHECKING:
    from pathlib import Path


class Clock:
    """Settable stand-in for ``date.today``."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> Clock:
    return Clock(date(2024, 3, 1))


@pytest.fixture
def vault_config(tmp_path: Path) -> VaultConfig:
    return VaultConfig(vault_dir=tmp_path / "vault")


@pytest.fixture
def repository(vault_config: VaultConfig, clock: Clock) -> MarkdownNoteRepository:
    return MarkdownNoteRepository(config=vault_config, today=clock)


@pytest.fixture
def source() -> FakeLibrarySource:
    return FakeLibrarySource()


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def engine(
    source: FakeLibrarySource,
    repository: MarkdownNoteRepository,
    notices: list[str],
) -> ReconciliationEngine:
    return ReconciliationEngine(
        source=source,
        repository=repository,
        enricher=MetadataEnricher([LibrarySourceEnrichment(source)]),
        notify=notices.append,
        max_workers=4,
    )

"""Outcome of a sync pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from tunevault.domain.model import TIER_ORDER, EntityKind


class SyncMode(StrEnum):
    FULL = "full"
    INCREMENTAL = "incremental"


@dataclass(slots=True)
class TierReport:
    kind: EntityKind
    fetched: int = 0
    created: int = 0
    freshened: int = 0
    library_status_changed: int = 0
    failed_writes: int = 0
    fetch_failed: bool = False
    fetch_incomplete: bool = False

    @property
    def written(self) -> int:
        return self.created + self.freshened + self.library_status_changed


@dataclass(slots=True)
class SyncReport:
    mode: SyncMode
    tiers: dict[EntityKind, TierReport] = field(
        default_factory=lambda: {kind: TierReport(kind=kind) for kind in TIER_ORDER}
    )
    failed: bool = False
    error: str | None = None

    def tier(self, kind: EntityKind) -> TierReport:
        return self.tiers[kind]

    @property
    def created(self) -> int:
        return sum(tier.created for tier in self.tiers.values())

    @property
    def written(self) -> int:
        return sum(tier.written for tier in self.tiers.values())

    @property
    def failed_writes(self) -> int:
        return sum(tier.failed_writes for tier in self.tiers.values())

    def summary(self) -> str:
        if self.failed:
            return f"Music {self.mode} sync failed: {self.error}"
        parts: list[str] = []
        for tier in self.tiers.values():
            part = f"{tier.kind}s +{tier.created}"
            if self.mode is SyncMode.FULL:
                part += f" ~{tier.freshened} library:{tier.library_status_changed}"
            if tier.fetch_failed:
                part += " (fetch failed)"
            elif tier.fetch_incomplete:
                part += " (fetch incomplete)"
            parts.append(part)
        message = f"Music {self.mode} sync finished: " + ", ".join(parts)
        if self.failed_writes:
            message += f"; {self.failed_writes} note(s) could not be written"
        return message

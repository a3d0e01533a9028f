"""Sparse identifier records.

A ``MusicIds`` value only ever grows: merging keeps every value already set
and adds kinds that were missing. Disagreements are reported, never applied.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from logging import getLogger
from typing import TYPE_CHECKING

from tunevault.domain.model.enums import ID_PRIORITY, IdKind

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class MusicIds:
    spotify_uri: str | None = None
    spotify_id: str | None = None
    upc: str | None = None
    isrc: str | None = None
    mbid: str | None = None

    def get(self, kind: IdKind) -> str | None:
        return getattr(self, kind.value)

    def items(self) -> Iterator[tuple[IdKind, str]]:
        """Yield present identifiers in priority order."""

        for kind in ID_PRIORITY:
            value = self.get(kind)
            if value:
                yield kind, value

    def kinds(self) -> frozenset[IdKind]:
        return frozenset(kind for kind, _ in self.items())

    def is_empty(self) -> bool:
        return not any(True for _ in self.items())

    def conflicts(self, other: MusicIds) -> dict[IdKind, tuple[str, str]]:
        """Kinds set on both sides with different values, as ``(ours, theirs)``."""

        found: dict[IdKind, tuple[str, str]] = {}
        for kind, value in other.items():
            current = self.get(kind)
            if current and current != value:
                found[kind] = (current, value)
        return found

    def merged_with(self, other: MusicIds, *, context: str | None = None) -> MusicIds:
        """Return ``self`` plus any kinds only ``other`` knows about."""

        for kind, (ours, theirs) in self.conflicts(other).items():
            log.warning(
                "Identifier disagreement for %s on %s: keeping %r, ignoring %r",
                context or "entity",
                kind.value,
                ours,
                theirs,
            )
        values = {kind.value: value for kind, value in other.items()}
        values.update({kind.value: value for kind, value in self.items()})
        return MusicIds(**values)

    def to_dict(self) -> dict[str, str]:
        return {kind.value: value for kind, value in self.items()}

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> MusicIds:
        if not raw:
            return cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, str] = {}
        for key, value in raw.items():
            if key in known and value is not None and str(value).strip():
                values[key] = str(value).strip()
        return cls(**values)


def shares_identifier(left: MusicIds, right: MusicIds) -> bool:
    return any(right.get(kind) == value for kind, value in left.items())

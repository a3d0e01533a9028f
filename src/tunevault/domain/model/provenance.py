"""Where an entity was seen: service urls, local files and playlist labels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def _union(left: Iterable[str], right: Iterable[str]) -> tuple[str, ...]:
    merged: list[str] = []
    for value in (*left, *right):
        if value and value not in merged:
            merged.append(value)
    return tuple(merged)


def _string_list(raw: object) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,) if raw.strip() else ()
    if isinstance(raw, list | tuple):
        return tuple(str(item) for item in raw if item is not None and str(item).strip())
    return ()


@dataclass(frozen=True, slots=True, kw_only=True)
class MusicSources:
    spotify: str | None = None
    local: str | None = None
    online: tuple[str, ...] = ()
    playlists: tuple[str, ...] = ()

    def merged_with(self, other: MusicSources) -> MusicSources:
        """Overlay fields ``other`` sets; list fields are unioned."""

        return MusicSources(
            spotify=other.spotify or self.spotify,
            local=other.local or self.local,
            online=_union(self.online, other.online),
            playlists=_union(self.playlists, other.playlists),
        )

    def with_playlists(self, labels: Iterable[str]) -> MusicSources:
        return MusicSources(
            spotify=self.spotify,
            local=self.local,
            online=self.online,
            playlists=_union(self.playlists, labels),
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {}
        if self.spotify:
            data["spotify"] = self.spotify
        if self.local:
            data["local"] = self.local
        if self.online:
            data["online"] = list(self.online)
        if self.playlists:
            data["playlists"] = list(self.playlists)
        return data

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> MusicSources:
        if not raw:
            return cls()
        spotify = raw.get("spotify")
        local = raw.get("local")
        return cls(
            spotify=str(spotify) if spotify else None,
            local=str(local) if local else None,
            online=_string_list(raw.get("online")),
            playlists=_string_list(raw.get("playlists")),
        )

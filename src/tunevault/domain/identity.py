"""Multi-key identity lookup.

One exact-match dict per identifier kind; lookups walk the kinds in priority
order. An index is built for a single pass (or a single enrichment batch) and
then discarded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tunevault.domain.model import ID_PRIORITY, IdKind, MusicIds

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tunevault.domain.model import MusicEntity, MusicFile


class MusicIdIndex[T]:
    def __init__(
        self,
        items: Iterable[T] = (),
        *,
        get_ids: Callable[[T], MusicIds] | None = None,
    ) -> None:
        self._by_kind: dict[IdKind, dict[str, T]] = {kind: {} for kind in ID_PRIORITY}
        # keyed by id() so unhashable dataclasses can be tracked; insertion ordered
        self._items: dict[int, T] = {}
        for item in items:
            if get_ids is None:
                raise ValueError("get_ids is required when seeding an index with items")
            self.set(get_ids(item), item)

    @classmethod
    def from_entities[E: MusicEntity](cls, entities: Iterable[E]) -> MusicIdIndex[E]:
        return MusicIdIndex(entities, get_ids=lambda entity: entity.ids)

    @classmethod
    def from_files[E: MusicEntity](
        cls, files: Iterable[MusicFile[E]]
    ) -> MusicIdIndex[MusicFile[E]]:
        return MusicIdIndex(files, get_ids=lambda file: file.entity.ids)

    def set(self, ids: MusicIds, item: T) -> None:
        """Register ``item`` under every identifier present in ``ids``."""

        for kind, value in ids.items():
            self._by_kind[kind][value] = item
        self._items[id(item)] = item

    def has(self, ids: MusicIds) -> bool:
        return any(value in self._by_kind[kind] for kind, value in ids.items())

    def get(self, ids: MusicIds) -> T | None:
        """Return the item matched by the highest-priority shared identifier."""

        for kind, value in ids.items():
            item = self._by_kind[kind].get(value)
            if item is not None:
                return item
        return None

    def values(self) -> list[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, ids: object) -> bool:
        return isinstance(ids, MusicIds) and self.has(ids)

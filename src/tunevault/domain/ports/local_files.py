"""Port for matching streaming-service local-file references to audio files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@runtime_checkable
class LocalTrackLookup(Protocol):
    def find_track_file(self, local_uri: str) -> Path | None: ...


__all__ = ["LocalTrackLookup"]

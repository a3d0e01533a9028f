"""Match ``spotify:local:`` references to audio files on disk."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import unquote_plus

from mutagen import File as MutagenFile
from mutagen import MutagenError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

LOCAL_URI_PREFIX: Final[str] = "spotify:local:"
AUDIO_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".mp3", ".flac", ".m4a", ".wav", ".ogg", ".opus", ".aac", ".wma"}
)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class LocalTrackReference:
    artist: str
    album: str
    title: str
    duration_seconds: int | None = None


def normalize_tag(value: str) -> str:
    lowered = _PUNCTUATION_RE.sub("", value.lower())
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def track_key(artist: str, album: str, title: str) -> str:
    return "|".join(normalize_tag(part) for part in (artist, album, title))


def parse_local_uri(uri: str) -> LocalTrackReference | None:
    """Split ``spotify:local:<artist>:<album>:<title>:<seconds>``; ``None`` if malformed."""

    if not uri.startswith(LOCAL_URI_PREFIX):
        return None
    parts = uri.removeprefix(LOCAL_URI_PREFIX).split(":")
    if len(parts) != 4:
        return None
    artist, album, title, duration = (unquote_plus(part) for part in parts)
    if not title:
        return None
    return LocalTrackReference(
        artist=artist,
        album=album,
        title=title,
        duration_seconds=int(duration) if duration.isdigit() else None,
    )


def _first_tag(tags: object, name: str) -> str:
    try:
        values = tags[name]  # type: ignore[index]
    except (KeyError, TypeError, ValueError):
        return ""
    if isinstance(values, list) and values:
        return str(values[0])
    return str(values) if values else ""


class LocalTrackMatcher:
    """Index a music folder by normalized ``artist|album|title`` tags.

    The folder is scanned once, on first lookup.
    """

    def __init__(self, music_dir: Path) -> None:
        self._music_dir = music_dir
        self._lock = threading.Lock()
        self._index: dict[str, Path] | None = None

    def find_track_file(self, local_uri: str) -> Path | None:
        reference = parse_local_uri(local_uri)
        if reference is None:
            return None
        index = self._ensure_index()
        found = index.get(track_key(reference.artist, reference.album, reference.title))
        if found is None:
            found = index.get(track_key(reference.artist, "", reference.title))
        return found

    def _ensure_index(self) -> dict[str, Path]:
        with self._lock:
            if self._index is None:
                self._index = self._scan()
            return self._index

    def _scan(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        indexed = 0
        if not self._music_dir.is_dir():
            log.warning("Local music folder %s does not exist", self._music_dir)
            return index
        for path in sorted(self._music_dir.rglob("*")):
            if path.suffix.lower() not in AUDIO_EXTENSIONS or not path.is_file():
                continue
            try:
                audio = MutagenFile(path, easy=True)
            except (MutagenError, OSError) as exc:
                log.warning("Skipping unreadable audio file %s: %s", path, exc)
                continue
            if audio is None or audio.tags is None:
                continue
            artist = _first_tag(audio.tags, "artist")
            album = _first_tag(audio.tags, "album")
            title = _first_tag(audio.tags, "title") or path.stem
            index.setdefault(track_key(artist, album, title), path)
            index.setdefault(track_key(artist, "", title), path)
            indexed += 1
        log.info("Indexed %s local audio file(s) in %s", indexed, self._music_dir)
        return index

"""Note file naming."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from tunevault.domain.model import Album, Artist, Track

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tunevault.domain.model import MusicEntity

MAX_NAME_ATTEMPTS: Final[int] = 1000

_FORBIDDEN_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_filename(name: str) -> str:
    cleaned = _FORBIDDEN_CHARS_RE.sub("", _WHITESPACE_RE.sub(" ", name))
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned or "Untitled"


def note_basename(entity: MusicEntity) -> str:
    """File name (without extension) for a new note."""

    match entity:
        case Artist():
            parts = [entity.title]
        case Album():
            parts = [entity.title, entity.primary_artist]
        case Track():
            album = None if entity.album is None or entity.is_single else entity.album.title
            parts = [entity.title, album, entity.primary_artist]
        case _:
            raise TypeError(f"Unsupported entity type: {type(entity).__name__}")
    return sanitize_filename(" - ".join(part for part in parts if part))


def candidate_names(basename: str, *, attempts: int = MAX_NAME_ATTEMPTS) -> Iterator[str]:
    """``basename``, then ``basename (1)``, ``basename (2)`` and so on."""

    yield basename
    for suffix in range(1, attempts):
        yield f"{basename} ({suffix})"

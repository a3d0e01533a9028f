"""Synchronization defaults and user-supplied note templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import yaml

from .env import float_env_var, int_env_var, optional_env_var

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

DEFAULT_RECENT_LIMIT: Final[int] = 20
DEFAULT_PAGE_SIZE: Final[int] = 50
DEFAULT_MAX_WORKERS: Final[int] = 8
DEFAULT_DEBOUNCE_SECONDS: Final[float] = 10.0

FRONTMATTER_KINDS: Final[tuple[str, ...]] = ("artist", "album", "track")


@dataclass(frozen=True, slots=True)
class SyncConfig:
    recent_limit: int = DEFAULT_RECENT_LIMIT
    page_size: int = DEFAULT_PAGE_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    playlist_ids: tuple[str, ...] = ()
    playlist_names: Mapping[str, str] = field(default_factory=dict[str, str])
    default_frontmatter: Mapping[str, Mapping[str, object]] = field(
        default_factory=dict[str, "Mapping[str, object]"]
    )


def parse_default_frontmatter(text: str | None, *, kind: str = "note") -> dict[str, object]:
    """Parse user-supplied YAML; anything unusable yields ``{}`` and a warning."""

    if text is None or not text.strip():
        return {}
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        log.warning("Ignoring default %s frontmatter, it is not valid YAML: %s", kind, exc)
        return {}
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        log.warning(
            "Ignoring default %s frontmatter, expected a mapping but got %s",
            kind,
            type(parsed).__name__,
        )
        return {}
    return {str(key): value for key, value in parsed.items()}


def parse_playlist_ids(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    ids: list[str] = []
    for part in raw.split(","):
        playlist_id = part.strip()
        if playlist_id and playlist_id not in ids:
            ids.append(playlist_id)
    return tuple(ids)


def parse_playlist_names(raw: str | None) -> dict[str, str]:
    """Parse ``id=Name`` pairs separated by commas."""

    if not raw:
        return {}
    names: dict[str, str] = {}
    for part in raw.split(","):
        playlist_id, sep, name = part.partition("=")
        if not sep:
            log.warning("Ignoring playlist name entry without '=': %r", part)
            continue
        if playlist_id.strip() and name.strip():
            names[playlist_id.strip()] = name.strip()
    return names


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        recent_limit=int_env_var("TUNEVAULT_RECENT_LIMIT", DEFAULT_RECENT_LIMIT),
        page_size=int_env_var("TUNEVAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        max_workers=int_env_var("TUNEVAULT_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        debounce_seconds=float_env_var("TUNEVAULT_DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS),
        playlist_ids=parse_playlist_ids(optional_env_var("TUNEVAULT_PLAYLIST_IDS")),
        playlist_names=parse_playlist_names(optional_env_var("TUNEVAULT_PLAYLIST_NAMES")),
        default_frontmatter={
            kind: parse_default_frontmatter(
                optional_env_var(f"TUNEVAULT_DEFAULT_{kind.upper()}_FRONTMATTER"), kind=kind
            )
            for kind in FRONTMATTER_KINDS
        },
    )

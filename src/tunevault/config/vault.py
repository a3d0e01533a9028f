"""Vault layout configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_CATALOG_PATH: Final[str] = "Catalogs/Music"
DEFAULT_ARTISTS_PATH: Final[str] = "Artists"
DEFAULT_ALBUMS_PATH: Final[str] = "Albums"
DEFAULT_TRACKS_PATH: Final[str] = "Tracks"


@dataclass(frozen=True, slots=True)
class VaultConfig:
    """Where notes live. Sub-paths are vault-relative and use forward slashes."""

    vault_dir: Path
    catalog_path: str = DEFAULT_CATALOG_PATH
    artists_path: str = DEFAULT_ARTISTS_PATH
    albums_path: str = DEFAULT_ALBUMS_PATH
    tracks_path: str = DEFAULT_TRACKS_PATH
    local_music_dir: Path | None = None

    def resolve_vault_dir(self) -> Path:
        return self.vault_dir.expanduser().resolve()

    def folder(self, sub_path: str) -> PurePosixPath:
        """Vault-relative folder for ``sub_path`` below the catalog base."""

        return PurePosixPath(self.catalog_path) / sub_path


def _relative_path(name: str, default: str) -> str:
    value = optional_env_var(name) or default
    cleaned = value.replace("\\", "/").strip("/")
    if not cleaned or ".." in PurePosixPath(cleaned).parts:
        raise ConfigurationError(f"{name} must be a path inside the vault, got {value!r}")
    return cleaned


def get_vault_config() -> VaultConfig:
    values = require_env_vars(("TUNEVAULT_VAULT_DIR",))
    local_music = optional_env_var("TUNEVAULT_LOCAL_MUSIC_PATH")
    return VaultConfig(
        vault_dir=Path(values["TUNEVAULT_VAULT_DIR"]),
        catalog_path=_relative_path("TUNEVAULT_CATALOG_PATH", DEFAULT_CATALOG_PATH),
        artists_path=_relative_path("TUNEVAULT_ARTISTS_PATH", DEFAULT_ARTISTS_PATH),
        albums_path=_relative_path("TUNEVAULT_ALBUMS_PATH", DEFAULT_ALBUMS_PATH),
        tracks_path=_relative_path("TUNEVAULT_TRACKS_PATH", DEFAULT_TRACKS_PATH),
        local_music_dir=Path(local_music).expanduser() if local_music else None,
    )

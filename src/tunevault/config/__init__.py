"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .spotify import (
    DEFAULT_SPOTIFY_SCOPES,
    SPOTIFY_PLAYLIST_SCOPES,
    SpotifyConfig,
    get_spotify_config,
    merge_spotify_scopes,
)
from .sync import SyncConfig, get_sync_config, parse_default_frontmatter
from .vault import VaultConfig, get_vault_config

__all__ = [
    "DEFAULT_SPOTIFY_SCOPES",
    "SPOTIFY_PLAYLIST_SCOPES",
    "ConfigurationError",
    "MissingConfigurationError",
    "SpotifyConfig",
    "SyncConfig",
    "VaultConfig",
    "configure_logging",
    "get_spotify_config",
    "get_sync_config",
    "get_vault_config",
    "merge_spotify_scopes",
    "parse_default_frontmatter",
    "require_env_vars",
]

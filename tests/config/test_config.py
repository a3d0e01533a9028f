from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

import pytest

from tunevault.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_spotify_config,
    get_sync_config,
    get_vault_config,
    parse_default_frontmatter,
    require_env_vars,
)
from tunevault.config.sync import parse_playlist_ids, parse_playlist_names

ENV_VARS = (
    "TUNEVAULT_VAULT_DIR",
    "TUNEVAULT_CATALOG_PATH",
    "TUNEVAULT_ARTISTS_PATH",
    "TUNEVAULT_ALBUMS_PATH",
    "TUNEVAULT_TRACKS_PATH",
    "TUNEVAULT_LOCAL_MUSIC_PATH",
    "TUNEVAULT_PLAYLIST_IDS",
    "TUNEVAULT_PLAYLIST_NAMES",
    "TUNEVAULT_RECENT_LIMIT",
    "TUNEVAULT_PAGE_SIZE",
    "TUNEVAULT_MAX_WORKERS",
    "TUNEVAULT_DEBOUNCE_SECONDS",
    "TUNEVAULT_DEFAULT_ARTIST_FRONTMATTER",
    "TUNEVAULT_DEFAULT_ALBUM_FRONTMATTER",
    "TUNEVAULT_DEFAULT_TRACK_FRONTMATTER",
    "SPOTIFY_CACHE_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_for_missing_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)


def test_vault_config_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TUNEVAULT_VAULT_DIR", str(tmp_path))

    config = get_vault_config()

    assert config.vault_dir == tmp_path
    assert config.folder(config.tracks_path) == PurePosixPath("Catalogs/Music/Tracks")
    assert config.local_music_dir is None


def test_vault_config_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TUNEVAULT_VAULT_DIR", str(tmp_path))
    monkeypatch.setenv("TUNEVAULT_CATALOG_PATH", "/Library\\Music/")
    monkeypatch.setenv("TUNEVAULT_ALBUMS_PATH", "Records")
    monkeypatch.setenv("TUNEVAULT_LOCAL_MUSIC_PATH", str(tmp_path / "audio"))

    config = get_vault_config()

    assert config.folder(config.albums_path) == PurePosixPath("Library/Music/Records")
    assert config.local_music_dir == tmp_path / "audio"


def test_vault_paths_must_stay_inside_the_vault(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TUNEVAULT_VAULT_DIR", str(tmp_path))
    monkeypatch.setenv("TUNEVAULT_TRACKS_PATH", "../outside")

    with pytest.raises(ConfigurationError, match="TUNEVAULT_TRACKS_PATH"):
        get_vault_config()


def test_vault_dir_is_required() -> None:
    with pytest.raises(MissingConfigurationError, match="TUNEVAULT_VAULT_DIR"):
        get_vault_config()


def test_spotify_config_includes_playlist_scopes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "id")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "secret")
    monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://localhost:8888/callback")
    monkeypatch.setenv("SPOTIFY_CACHE_PATH", ".cache-tunevault")

    config = get_spotify_config()

    assert config.scope == (
        "user-library-read",
        "user-follow-read",
        "playlist-read-private",
        "playlist-read-collaborative",
    )
    assert config.cache_path == ".cache-tunevault"


def test_sync_config_reads_playlists_and_templates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TUNEVAULT_PLAYLIST_IDS", "pl1, pl2,pl1")
    monkeypatch.setenv("TUNEVAULT_PLAYLIST_NAMES", "pl1=Road Trip")
    monkeypatch.setenv("TUNEVAULT_RECENT_LIMIT", "5")
    monkeypatch.setenv("TUNEVAULT_DEFAULT_TRACK_FRONTMATTER", "tags:\n  - music/track\n")

    config = get_sync_config()

    assert config.playlist_ids == ("pl1", "pl2")
    assert config.playlist_names == {"pl1": "Road Trip"}
    assert config.recent_limit == 5
    assert config.page_size == 50
    assert config.default_frontmatter["track"] == {"tags": ["music/track"]}
    assert config.default_frontmatter["artist"] == {}


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TUNEVAULT_MAX_WORKERS", "many"),
        ("TUNEVAULT_MAX_WORKERS", "0"),
        ("TUNEVAULT_DEBOUNCE_SECONDS", "-1"),
    ],
)
def test_sync_config_rejects_bad_numbers(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_sync_config()


@pytest.mark.parametrize("text", ["title: [oops", "- just\n- a list\n"])
def test_unusable_default_frontmatter_is_ignored(
    text: str, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        assert parse_default_frontmatter(text, kind="album") == {}

    assert "Ignoring default album frontmatter" in caplog.text


def test_playlist_parsers() -> None:
    assert parse_playlist_ids(None) == ()
    assert parse_playlist_names("a=One, b = Two ,broken") == {"a": "One", "b": "Two"}

"""Shared fixtures for Spotify adapter tests."""

from __future__ import annotations

import pytest

from tunevault.adapters.spotify.client import SpotifyClient
from tunevault.config.spotify import SpotifyConfig

from tests.helpers.spotify import FakeSpotipyClient


@pytest.fixture
def fake_spotify_client() -> FakeSpotipyClient:
    return FakeSpotipyClient()


@pytest.fixture
def spotify_config() -> SpotifyConfig:
    return SpotifyConfig(
        client_id="x",
        client_secret="y",  # noqa: S106
        redirect_uri="http://localhost",
    )


@pytest.fixture
def spotipy_client(
    spotify_config: SpotifyConfig, fake_spotify_client: FakeSpotipyClient
) -> SpotifyClient:
    return SpotifyClient(config=spotify_config, client=fake_spotify_client)  # type: ignore[arg-type]

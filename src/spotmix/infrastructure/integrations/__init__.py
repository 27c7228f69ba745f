"""External service integrations."""

from spotmix.infrastructure.integrations.spotify_client import SpotifyClient

__all__ = ["SpotifyClient"]

"""Catalog plugins wrapping integration clients."""

from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

__all__ = ["SpotifyPlugin"]

"""Configuration module for spotmix."""

from .settings import (
    AutoUpdateSettings,
    CacheSettings,
    ObservabilitySettings,
    Settings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "AutoUpdateSettings",
    "CacheSettings",
    "ObservabilitySettings",
    "Settings",
    "SpotifySettings",
    "get_settings",
]

"""Application settings loaded from environment variables and .env files."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Hey future me - every settings group reads its own env prefix (SPOTIFY_CLIENT_ID, CACHE_DIRECTORY,
# ...). Settings() is resolved ONCE at startup and handed to the objects that need it - nothing in
# the core reads os.environ lazily on first use.
class SpotifySettings(BaseSettings):
    """Spotify API credentials and client options."""

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_",
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    client_id: str = Field(default="", description="Spotify app client ID")
    client_secret: str = Field(
        default="",
        description="Spotify app client secret (only needed by the scheduled job)",
    )
    redirect_uri: str = Field(
        default="http://localhost:8000/auth/callback",
        description="OAuth callback URL registered in the Spotify dashboard",
    )
    refresh_token: str = Field(
        default="",
        description="Long-lived refresh token used by the scheduled job",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for every Spotify request",
    )


class CacheSettings(BaseSettings):
    """Disk cache for catalog listings."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Use the disk cache")
    directory: Path = Field(
        default=Path(".cache"), description="Directory holding cache entry files"
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Root log level")
    json_format: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level


class AutoUpdateSettings(BaseSettings):
    """Scheduled refresh of auto-update playlists."""

    model_config = SettingsConfigDict(
        env_prefix="AUTO_UPDATE_",
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    config_path: Path = Field(
        default=Path("playlists-config.json"),
        description='JSON file of the form {"playlistIds": [...]}',
    )
    interval_hours: float = Field(
        default=168.0,
        ge=0,
        description="Hours between refresh cycles (0 disables the worker)",
    )


class Settings(BaseSettings):
    """Top-level settings object."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    app_name: str = Field(default="spotmix")
    host: str = Field(default="127.0.0.1", description="API server bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="API server port")
    session_timeout_seconds: int = Field(default=3600 * 24 * 7, gt=0)

    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    auto_update: AutoUpdateSettings = Field(default_factory=AutoUpdateSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

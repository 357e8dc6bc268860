"""Application configuration management."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WEATHER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Upstream API settings
    api_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="OpenWeatherMap API base URL",
    )
    api_key: str | None = Field(
        default=None,
        description="API key, overrides the one stored in the config file",
    )
    units: str = Field(default="metric", description="Measurement units")
    language: str = Field(default="en", description="Language of weather descriptions")
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Upstream request timeout in seconds",
        ge=0.1,
        le=120.0,
    )
    forecast_count: int = Field(
        default=4,
        description="Number of 3-hour forecast steps to request",
        ge=1,
        le=40,
    )

    # Cache settings
    cache_ttl_seconds: int = Field(
        default=1800,
        description="Cache TTL in seconds",
        ge=1,
        le=86400,
    )

    # File locations, relative paths resolve against data_dir
    data_dir: Path = Field(default=Path("."), description="Base directory for local files")
    config_file: Path = Field(default=Path("appsettings.json"), description="API key file")
    cache_file: Path = Field(default=Path("weather_cache.json"), description="Cache snapshot")
    usage_file: Path = Field(default=Path("api_key_log.txt"), description="Usage ledger")
    log_dir: Path = Field(default=Path("WeatherLogs"), description="Daily log directory")

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Console logging level",
    )
    log_format: str = Field(
        default="text",
        description="Console log format (json or text)",
    )

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the data directory."""
        return path if path.is_absolute() else self.data_dir / path


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

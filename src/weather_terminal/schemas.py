"""Schemas for upstream payloads and local records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class MainData(BaseModel):
    """Main meteorological readings."""

    temp: float = Field(..., description="Temperature in Celsius")
    feels_like: float = Field(default=0.0, description="Perceived temperature in Celsius")
    humidity: int = Field(default=0, ge=0, le=100, description="Humidity percentage")


class WindData(BaseModel):
    """Wind readings."""

    speed: float = Field(default=0.0, description="Wind speed in m/s")


class Condition(BaseModel):
    """Weather condition descriptor."""

    description: str = ""
    icon: str = ""


class WeatherData(BaseModel):
    """Current weather payload for a location."""

    city: str = Field(default="", alias="name", description="Location name")
    main: MainData
    weather: list[Condition] = Field(default_factory=list)
    wind: WindData = Field(default_factory=WindData)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def description(self) -> str:
        """Primary condition description."""
        return self.weather[0].description if self.weather else "N/A"

    @property
    def icon(self) -> str:
        """Primary condition icon code."""
        return self.weather[0].icon if self.weather else ""


class ForecastItem(BaseModel):
    """Single forecast step."""

    dt_txt: datetime
    main: MainData
    weather: list[Condition] = Field(default_factory=list)
    wind: WindData = Field(default_factory=WindData)

    @property
    def description(self) -> str:
        return self.weather[0].description if self.weather else "N/A"


class ForecastData(BaseModel):
    """Forecast payload for a location."""

    items: list[ForecastItem] = Field(default_factory=list, alias="list")

    model_config = ConfigDict(populate_by_name=True)


class CacheEntry(BaseModel):
    """Cached raw response body."""

    data: str = Field(..., description="Raw response body")
    timestamp: datetime = Field(..., description="Time the body was stored")

    @field_validator("timestamp")
    @classmethod
    def to_local_time(cls, value: datetime) -> datetime:
        """Store times are naive local time; convert offset-aware ones."""
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


CacheSnapshot = TypeAdapter(dict[str, CacheEntry])


class UsageSummary(BaseModel):
    """Summary of the usage ledger."""

    total: int = Field(..., ge=0, description="Number of recorded requests")
    last_location: str | None = Field(default=None, description="Most recent location")
    last_timestamp: str | None = Field(default=None, description="Most recent request time")


class Recommendations(BaseModel):
    """Advice derived from current conditions."""

    clothes: str
    umbrella: str
    sun: str


class CredentialRecord(BaseModel):
    """Persisted API credential, other keys in the file are kept as is."""

    api_key: str | None = Field(default=None, alias="ApiKey")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

"""Weather service orchestrating the store and upstream client."""

from weather_terminal.logging import Severity
from weather_terminal.services.openweather import (
    OpenWeatherAPIError,
    OpenWeatherClient,
    OpenWeatherError,
    OpenWeatherTimeoutError,
)
from weather_terminal.services.store import WeatherStore


class WeatherService:
    """Service for fetching weather data with caching."""

    def __init__(self, store: WeatherStore, client: OpenWeatherClient) -> None:
        """Initialize service with store and client."""
        self._store = store
        self._client = client

    async def fetch_current(self, location: str) -> str | None:
        """Get the current weather document for a location.

        Every request is recorded in the usage ledger. The cache is checked
        first and the upstream body is cached on success.

        Args:
            location: City name as typed by the user

        Returns:
            Raw JSON body, or None if the upstream call failed
        """
        self._store.log_usage(location)

        cached = self._store.get_cached(location)
        if cached is not None:
            return cached

        self._store.log_event(f"Requesting weather for {location}")
        try:
            body = await self._client.get_current_weather(location)
        except OpenWeatherError as e:
            self._log_upstream_error("weather", location, e)
            return None

        self._store.put_cached(location, body)
        return body

    async def fetch_forecast(self, location: str) -> str | None:
        """Get the forecast document for a location. Never cached."""
        self._store.log_event(f"Requesting forecast for {location}")
        try:
            return await self._client.get_forecast(location)
        except OpenWeatherError as e:
            self._log_upstream_error("forecast", location, e)
            return None

    def _log_upstream_error(self, what: str, location: str, error: OpenWeatherError) -> None:
        if isinstance(error, OpenWeatherTimeoutError):
            message = f"Upstream timeout fetching {what} for {location}: {error}"
        elif isinstance(error, OpenWeatherAPIError):
            message = f"Upstream API error {error.status_code} fetching {what} for {location}: {error}"
        else:
            message = f"Failed to fetch {what} for {location}: {error}"
        self._store.log_event(message, Severity.ERROR)

    async def aclose(self) -> None:
        await self._client.aclose()

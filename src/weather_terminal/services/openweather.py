"""OpenWeatherMap API client."""

import httpx
from prometheus_client import Counter

from weather_terminal.config import Settings
from weather_terminal.services.credentials import CredentialStore


class OpenWeatherError(Exception):
    """Base exception for OpenWeatherMap client errors."""


class OpenWeatherTimeoutError(OpenWeatherError):
    """Raised when upstream request times out."""


class MissingApiKeyError(OpenWeatherError):
    """Raised when no API key is configured."""


class OpenWeatherAPIError(OpenWeatherError):
    """Raised when upstream returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


# Metrics
upstream_requests = Counter(
    "weather_upstream_requests_total",
    "Total upstream API requests",
    ["endpoint", "status"],
)


class OpenWeatherClient:
    """HTTP client for the OpenWeatherMap current weather and forecast APIs.

    The underlying connection pool lives as long as the client; call
    ``aclose`` on shutdown.
    """

    def __init__(self, settings: Settings, credentials: CredentialStore) -> None:
        """Initialize client with settings and the credential store."""
        self._base_url = settings.api_base_url.rstrip("/")
        self._timeout = settings.request_timeout_seconds
        self._units = settings.units
        self._language = settings.language
        self._forecast_count = settings.forecast_count
        self._credentials = credentials
        self._http = httpx.AsyncClient(timeout=self._timeout)

    @property
    def current_url(self) -> str:
        return f"{self._base_url}/weather"

    @property
    def forecast_url(self) -> str:
        return f"{self._base_url}/forecast"

    async def get_current_weather(self, location: str) -> str:
        """Fetch the raw current weather document for a location.

        Args:
            location: City name, optionally followed by ",<country code>"

        Returns:
            Response body as text

        Raises:
            MissingApiKeyError: If no API key is configured
            OpenWeatherTimeoutError: If request times out
            OpenWeatherAPIError: If upstream returns an error
        """
        return await self._get("weather", self.current_url, self._params(location))

    async def get_forecast(self, location: str) -> str:
        """Fetch the raw short-range forecast document for a location.

        Raises the same errors as ``get_current_weather``.
        """
        params = self._params(location)
        params["cnt"] = self._forecast_count
        return await self._get("forecast", self.forecast_url, params)

    def _params(self, location: str) -> dict[str, str | int]:
        api_key = self._credentials.api_key
        if not api_key:
            raise MissingApiKeyError("API key is not configured")
        return {
            "q": location,
            "appid": api_key,
            "units": self._units,
            "lang": self._language,
        }

    async def _get(self, endpoint: str, url: str, params: dict[str, str | int]) -> str:
        try:
            response = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            upstream_requests.labels(endpoint=endpoint, status="timeout").inc()
            raise OpenWeatherTimeoutError(
                f"OpenWeatherMap request timed out after {self._timeout}s"
            ) from e
        except httpx.RequestError as e:
            upstream_requests.labels(endpoint=endpoint, status="error").inc()
            raise OpenWeatherError(f"OpenWeatherMap request failed: {e}") from e

        if response.status_code != 200:
            upstream_requests.labels(endpoint=endpoint, status="error").inc()
            raise OpenWeatherAPIError(
                f"OpenWeatherMap API returned {response.status_code}: {response.text}",
                response.status_code,
            )

        upstream_requests.labels(endpoint=endpoint, status="success").inc()
        return response.text

    async def aclose(self) -> None:
        """Release the HTTP connection pool."""
        await self._http.aclose()

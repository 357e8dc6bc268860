"""Interactive menu loop."""

from collections.abc import Callable

from prometheus_client import REGISTRY
from pydantic import ValidationError

from weather_terminal.config import Settings
from weather_terminal.console import render
from weather_terminal.logging import Severity
from weather_terminal.schemas import ForecastData, WeatherData
from weather_terminal.services.credentials import CredentialStore
from weather_terminal.services.recommendations import recommend, should_show_forecast
from weather_terminal.services.store import WeatherStore
from weather_terminal.services.weather import WeatherService


class ConsoleApp:
    """Menu-driven weather terminal.

    ``read`` and ``write`` default to ``input`` and ``print`` and can be
    replaced to drive the loop from tests.
    """

    def __init__(
        self,
        settings: Settings,
        store: WeatherStore,
        credentials: CredentialStore,
        service: WeatherService,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self._settings = settings
        self._store = store
        self._credentials = credentials
        self._service = service
        self._read = read
        self._write = write

    @property
    def store(self) -> WeatherStore:
        return self._store

    async def run(self) -> None:
        """Run the menu loop until the user exits."""
        self._store.log_event("=== Application started ===")
        while True:
            self._write(render.main_menu())
            try:
                choice = self._read("\nChoose an option: ").strip()
            except EOFError:
                choice = "0"

            if choice == "1":
                await self.handle_weather_request()
            elif choice == "2":
                self.show_help()
            elif choice == "3":
                self.show_statistics()
            elif choice == "4":
                self.set_api_key()
            elif choice == "0":
                self._store.log_event("=== Application closed ===")
                return
            else:
                self._write("Invalid choice! Please choose 1-4 or 0 to exit.")
                self._store.log_event(f"Invalid menu choice: {choice}", Severity.WARNING)
                self._pause()

    def _pause(self) -> None:
        try:
            self._read("\nPress Enter to continue...")
        except EOFError:
            pass

    async def handle_weather_request(self) -> None:
        try:
            city = self._read("\nEnter city: ").strip()
        except EOFError:
            city = ""
        if not city:
            self._write("City name cannot be empty!")
            self._pause()
            return
        await self.show_weather(city)

    async def show_weather(self, city: str) -> None:
        """Fetch, render and advise on the current weather for a city."""
        self._write(render.header(f"Weather in {city.upper()}"))

        body = await self._service.fetch_current(city)
        if body is None:
            self._write("Failed to get weather data")
            self._pause()
            return

        try:
            data = WeatherData.model_validate_json(body)
        except ValidationError as e:
            self._store.log_event(f"Failed to parse weather data: {e}", Severity.ERROR)
            self._write("Error processing weather data")
            self._pause()
            return

        self._write(render.weather_card(data))
        self._write(render.recommendations(recommend(data, self._settings.language)))

        if should_show_forecast(data, self._settings.language):
            await self.show_forecast(city)

        self._pause()

    async def show_forecast(self, city: str) -> None:
        self._write("\nFetching extended forecast...")
        body = await self._service.fetch_forecast(city)
        if body is None:
            return

        try:
            forecast = ForecastData.model_validate_json(body)
        except ValidationError as e:
            self._store.log_event(f"Failed to parse forecast: {e}", Severity.ERROR)
            self._write("Error processing weather forecast")
            return

        self._write(render.forecast_table(forecast))

    def show_help(self) -> None:
        self._write(render.help_screen(self._settings.cache_ttl_seconds // 60))
        self._pause()

    def show_statistics(self) -> None:
        summary = self._store.usage_summary()
        if summary is None:
            self._write("Statistics unavailable")
        else:
            self._write(render.usage_statistics(summary))
            hits = REGISTRY.get_sample_value("weather_cache_hits_total") or 0
            misses = REGISTRY.get_sample_value("weather_cache_misses_total") or 0
            self._write(f"Cache this session: {hits:.0f} hits, {misses:.0f} misses")
        self._pause()

    def set_api_key(self) -> None:
        try:
            key = self._read("\nEnter API key: ").strip()
        except EOFError:
            key = ""
        if not key:
            self._write("API key cannot be empty!")
            self._pause()
            return
        self._credentials.set_api_key(key)
        self._store.log_event("API key updated")
        self._write("API key saved")
        self._pause()

    async def aclose(self) -> None:
        """Release the network client."""
        await self._service.aclose()

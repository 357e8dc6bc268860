"""Application entry point."""

import asyncio
from collections.abc import Callable

from weather_terminal.config import Settings, get_settings
from weather_terminal.console.app import ConsoleApp
from weather_terminal.logging import Severity, configure_logging
from weather_terminal.services.credentials import CredentialStore
from weather_terminal.services.openweather import OpenWeatherClient
from weather_terminal.services.store import WeatherStore
from weather_terminal.services.weather import WeatherService


def create_app(
    settings: Settings | None = None,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> ConsoleApp:
    """Create and wire the terminal components."""
    settings = settings or get_settings()

    store = WeatherStore(settings)
    store.purge_expired()

    credentials = CredentialStore(settings)
    client = OpenWeatherClient(settings, credentials)
    service = WeatherService(store, client)

    return ConsoleApp(settings, store, credentials, service, read=read, write=write)


async def serve(app: ConsoleApp) -> None:
    """Run the menu loop, reporting any unexpected error before shutdown."""
    try:
        await app.run()
    except Exception as e:
        app.store.log_event(f"Critical error: {e!r}", Severity.ERROR)
        print("A critical error occurred. See the log for details.")
    finally:
        await app.aclose()


def run() -> None:
    """Run the weather terminal."""
    settings = get_settings()

    # Configure logging
    configure_logging(settings)

    app = create_app(settings)
    try:
        asyncio.run(serve(app))
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    run()

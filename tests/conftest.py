"""Test fixtures."""

import json
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from weather_terminal.config import Settings
from weather_terminal.services.credentials import CredentialStore
from weather_terminal.services.openweather import OpenWeatherClient
from weather_terminal.services.store import WeatherStore


class FakeClock:
    """Settable time source."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def scripted(*answers: str) -> Callable[[str], str]:
    """Build a ``read`` callable that replays answers, then signals EOF."""
    remaining = iter(answers)

    def read(prompt: str = "") -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return read


def current_payload(
    city: str = "London",
    temp: float = 15.5,
    description: str = "broken clouds",
    icon: str = "04d",
) -> str:
    return json.dumps(
        {
            "name": city,
            "main": {"temp": temp, "feels_like": temp - 1.5, "humidity": 72},
            "weather": [{"description": description, "icon": icon}],
            "wind": {"speed": 4.1},
        }
    )


def forecast_payload() -> str:
    return json.dumps(
        {
            "list": [
                {
                    "dt_txt": "2026-10-17 12:00:00",
                    "main": {"temp": 27.0, "feels_like": 28.0, "humidity": 40},
                    "weather": [{"description": "clear sky", "icon": "01d"}],
                    "wind": {"speed": 2.5},
                },
                {
                    "dt_txt": "2026-10-17 15:00:00",
                    "main": {"temp": 29.5, "feels_like": 30.0, "humidity": 35},
                    "weather": [{"description": "few clouds", "icon": "02d"}],
                    "wind": {"speed": 3.0},
                },
            ]
        }
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings rooted in a temporary directory."""
    return Settings(
        data_dir=tmp_path,
        api_key="test-key",
        language="en",
        request_timeout_seconds=1.0,
        cache_ttl_seconds=1800,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 17, 12, 0, 0))


@pytest.fixture
def store(settings: Settings, clock: FakeClock) -> WeatherStore:
    """Create test store driven by the fake clock."""
    return WeatherStore(settings, clock=clock)


@pytest.fixture
def credentials(settings: Settings) -> CredentialStore:
    return CredentialStore(settings)


@pytest.fixture
def client(settings: Settings, credentials: CredentialStore) -> OpenWeatherClient:
    """Create test OpenWeatherMap client."""
    return OpenWeatherClient(settings, credentials)

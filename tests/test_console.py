"""Tests for the interactive console."""

import pytest
import respx
from httpx import Response

from conftest import current_payload, forecast_payload, scripted
from weather_terminal.config import Settings
from weather_terminal.console.app import ConsoleApp
from weather_terminal.main import create_app, serve


def _app(settings: Settings, *answers: str) -> tuple[ConsoleApp, list[str]]:
    output: list[str] = []
    app = create_app(settings, read=scripted(*answers), write=output.append)
    return app, output


def _weather_url(settings: Settings) -> str:
    return f"{settings.api_base_url}/weather"


def _forecast_url(settings: Settings) -> str:
    return f"{settings.api_base_url}/forecast"


class TestWeatherRequest:
    """Tests for the weather menu option."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_renders_city_and_records_usage(self, settings: Settings) -> None:
        respx.get(_weather_url(settings)).mock(return_value=Response(200, text=current_payload()))
        app, output = _app(settings, "1", "London", "", "0")

        await serve(app)

        screen = "\n".join(output)
        assert "Weather in LONDON" in screen
        assert "London" in screen
        assert "15.5°C" in screen
        assert "Light jacket" in screen
        assert "No umbrella needed" in screen
        assert "Fetching extended forecast..." not in screen
        assert "Request for: London" in app.store.usage_file.read_text(encoding="utf-8")

    @respx.mock
    @pytest.mark.asyncio
    async def test_repeat_request_served_from_cache(self, settings: Settings) -> None:
        """Test current weather is fetched once while the forecast always goes upstream."""
        current = respx.get(_weather_url(settings)).mock(
            return_value=Response(200, text=current_payload(temp=28.0, description="clear sky"))
        )
        forecast = respx.get(_forecast_url(settings)).mock(
            return_value=Response(200, text=forecast_payload())
        )
        app, output = _app(settings, "1", "London", "", "1", "london", "", "0")

        await serve(app)

        assert current.call_count == 1
        assert forecast.call_count == 2
        screen = "\n".join(output)
        assert "Forecast" in screen
        assert "17.10 15:00" in screen
        assert "Use sunscreen" in screen

    @respx.mock
    @pytest.mark.asyncio
    async def test_rain_triggers_forecast(self, settings: Settings) -> None:
        respx.get(_weather_url(settings)).mock(
            return_value=Response(200, text=current_payload(temp=12.0, description="light rain"))
        )
        forecast = respx.get(_forecast_url(settings)).mock(
            return_value=Response(200, text=forecast_payload())
        )
        app, output = _app(settings, "1", "London", "", "0")

        await serve(app)

        assert forecast.call_count == 1
        assert "Take an umbrella!" in "\n".join(output)

    @respx.mock
    @pytest.mark.asyncio
    async def test_upstream_failure(self, settings: Settings) -> None:
        respx.get(_weather_url(settings)).mock(
            return_value=Response(404, json={"cod": "404", "message": "city not found"})
        )
        app, output = _app(settings, "1", "Atlantis", "", "0")

        await serve(app)

        assert "Failed to get weather data" in output
        log = app.store.log_file_path().read_text(encoding="utf-8")
        assert "[ERROR] Upstream API error 404" in log

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_payload(self, settings: Settings) -> None:
        respx.get(_weather_url(settings)).mock(return_value=Response(200, text='{"name": "X"}'))
        app, output = _app(settings, "1", "X", "", "0")

        await serve(app)

        assert "Error processing weather data" in output
        assert "[ERROR] Failed to parse weather data" in app.store.log_file_path().read_text(
            encoding="utf-8"
        )

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_forecast(self, settings: Settings) -> None:
        respx.get(_weather_url(settings)).mock(
            return_value=Response(200, text=current_payload(temp=30.0))
        )
        respx.get(_forecast_url(settings)).mock(return_value=Response(200, text="not json"))
        app, output = _app(settings, "1", "London", "", "0")

        await serve(app)

        assert "Error processing weather forecast" in output

    @pytest.mark.asyncio
    async def test_blank_city(self, settings: Settings) -> None:
        app, output = _app(settings, "1", "   ", "", "0")

        await serve(app)

        assert "City name cannot be empty!" in output
        assert "Request for" not in app.store.usage_file.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_end_of_input_at_city_prompt(self, settings: Settings) -> None:
        app, output = _app(settings, "1")

        await serve(app)

        assert "City name cannot be empty!" in output
        log = app.store.log_file_path().read_text(encoding="utf-8")
        assert "Critical error" not in log
        assert "=== Application closed ===" in log


class TestMenu:
    """Tests for the other menu options."""

    @pytest.mark.asyncio
    async def test_invalid_choice_logged(self, settings: Settings) -> None:
        app, output = _app(settings, "7", "", "0")

        await serve(app)

        assert "Invalid choice! Please choose 1-4 or 0 to exit." in output
        log = app.store.log_file_path().read_text(encoding="utf-8")
        assert "[WARNING] Invalid menu choice: 7" in log
        assert "=== Application closed ===" in log

    @pytest.mark.asyncio
    async def test_help(self, settings: Settings) -> None:
        app, output = _app(settings, "2", "", "0")

        await serve(app)

        assert "cached for 30 minutes" in "\n".join(output)

    @pytest.mark.asyncio
    async def test_statistics(self, settings: Settings) -> None:
        app, output = _app(settings, "3", "", "0")
        app.store.log_usage("London")
        app.store.log_usage("Paris,FR")

        await serve(app)

        screen = "\n".join(output)
        assert "Total requests: 2" in screen
        assert "Last request:   Paris,FR" in screen

    @pytest.mark.asyncio
    async def test_statistics_unavailable(self, settings: Settings) -> None:
        app, output = _app(settings, "3", "", "0")
        app.store.usage_file.unlink()

        await serve(app)

        assert "Statistics unavailable" in output

    @pytest.mark.asyncio
    async def test_set_api_key(self, tmp_path) -> None:
        settings = Settings(data_dir=tmp_path)
        app, output = _app(settings, "4", "secret-key", "", "0")

        await serve(app)

        assert "API key saved" in output
        assert "secret-key" in (tmp_path / "appsettings.json").read_text(encoding="utf-8")
        assert "secret-key" not in app.store.log_file_path().read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_end_of_input_exits(self, settings: Settings) -> None:
        app, _ = _app(settings)

        await serve(app)

        assert "=== Application closed ===" in app.store.log_file_path().read_text(
            encoding="utf-8"
        )


class TestTopLevelHandler:
    """Tests for the top-level error handler."""

    @pytest.mark.asyncio
    async def test_unexpected_error_logged(self, settings: Settings, capsys) -> None:
        def broken_read(prompt: str = "") -> str:
            raise RuntimeError("terminal gone")

        app = create_app(settings, read=broken_read, write=lambda text: None)

        await serve(app)

        assert "A critical error occurred" in capsys.readouterr().out
        log = app.store.log_file_path().read_text(encoding="utf-8")
        assert "[ERROR] Critical error: RuntimeError('terminal gone')" in log

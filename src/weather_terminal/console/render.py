"""Text rendering for the console screens."""

from weather_terminal.schemas import (
    ForecastData,
    Recommendations,
    UsageSummary,
    WeatherData,
)
from weather_terminal.services.recommendations import weather_icon

WIDTH = 46


def _boxed(title: str, lines: list[str], width: int = WIDTH) -> str:
    top = f"╔{f' {title} ':═^{width}}╗" if title else f"╔{'═' * width}╗"
    body = [f"║ {line:<{width - 2}} ║" for line in lines]
    bottom = f"╚{'═' * width}╝"
    return "\n".join([top, *body, bottom])


def main_menu() -> str:
    return _boxed(
        "Weather Terminal",
        [
            "",
            "1. Get weather",
            "2. Help",
            "3. Request statistics",
            "4. Set API key",
            "",
            "0. Exit",
            "",
        ],
    )


def help_screen(cache_minutes: int) -> str:
    return _boxed(
        "Help",
        [
            "",
            "1. Enter a city name in any language",
            "   (for example: London or Москва)",
            "",
            "2. For cities sharing a name, add the",
            "   country code after a comma (Paris,FR)",
            "",
            f"3. Requests are cached for {cache_minutes} minutes",
            "",
        ],
    )


def header(title: str) -> str:
    return _boxed("", [title[: WIDTH - 2]])


def weather_card(data: WeatherData) -> str:
    """Render the current conditions card."""
    rule = "─" * WIDTH
    icon = weather_icon(data.icon)
    lines = [
        f"{data.city:<39} {icon}",
        f"Temperature: {data.main.temp:.1f}°C (feels like {data.main.feels_like:.1f}°C)",
        f"Humidity:    {data.main.humidity}%",
        f"Wind:        {data.wind.speed:.1f} m/s",
        f"Conditions:  {data.description}",
    ]
    body = [f"│ {line:<{WIDTH - 2}} │" for line in lines]
    return "\n".join([f"┌{rule}┐", body[0], f"├{rule}┤", *body[1:], f"└{rule}┘"])


def recommendations(recs: Recommendations) -> str:
    return _boxed("Recommendations", [recs.clothes, recs.umbrella, recs.sun])


def forecast_table(forecast: ForecastData) -> str:
    """Render forecast steps as a table."""
    width = 63
    rule = "─" * width
    rows = [
        f"│ {item.dt_txt:%d.%m %H:%M}  {item.main.temp:>10.1f}°C  "
        f"{item.description:<25.25} {item.wind.speed:>4.1f} m/s │"
        for item in forecast.items
    ]
    return "\n".join(
        [
            f"┌{' Forecast ':─^{width}}┐",
            f"│ {'Date/Time':<13} {'Temperature':>12}  {'Conditions':<25} {'Wind':>8} │",
            f"├{rule}┤",
            *rows,
            f"└{rule}┘",
        ]
    )


def usage_statistics(summary: UsageSummary) -> str:
    lines = [f"Total requests: {summary.total}"]
    if summary.last_location is not None:
        lines.append(f"Last request:   {summary.last_location}")
        lines.append(f"At:             {summary.last_timestamp}")
    return _boxed("Request statistics", lines)

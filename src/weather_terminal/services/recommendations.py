"""Clothing, umbrella and sun protection advice."""

from weather_terminal.schemas import Recommendations, WeatherData

HOT_THRESHOLD_C = 25.0

# Word for rain in the language descriptions are requested in
RAIN_WORDS = {
    "en": ("rain",),
    "ru": ("дождь",),
    "de": ("regen",),
    "fr": ("pluie",),
    "es": ("lluvia",),
}

WEATHER_ICONS = {
    "01d": "☀️",
    "01n": "🌙",
    "02": "⛅",
    "03": "☁️",
    "04": "🌫️",
    "09": "🌧️",
    "10": "🌦️",
    "11": "⛈️",
    "13": "❄️",
    "50": "🌫️",
}


def clothes_recommendation(temp: float) -> str:
    """Pick a clothing tier for a temperature in Celsius."""
    if temp < -10:
        return "❄️ Dress very warmly: down jacket, hat, scarf"
    if temp < 0:
        return "⛄ Warm winter clothing is a must"
    if temp < 10:
        return "🍂 Coat or jacket and a hat"
    if temp < 18:
        return "🌧️ Light jacket or sweater"
    if temp < HOT_THRESHOLD_C:
        return "🌤️ T-shirt plus a light layer for the evening"
    return "☀️ Light clothing and a sun hat"


def needs_umbrella(description: str, language: str = "en") -> bool:
    text = description.casefold()
    return any(word in text for word in RAIN_WORDS.get(language, RAIN_WORDS["en"]))


def needs_sun_protection(temp: float) -> bool:
    return temp > HOT_THRESHOLD_C


def should_show_forecast(data: WeatherData, language: str = "en") -> bool:
    """Extended forecast is worth showing when it is hot or raining."""
    return needs_sun_protection(data.main.temp) or needs_umbrella(data.description, language)


def recommend(data: WeatherData, language: str = "en") -> Recommendations:
    """Build all recommendations for the current conditions."""
    umbrella = (
        "☔ Take an umbrella!"
        if needs_umbrella(data.description, language)
        else "🌂 No umbrella needed"
    )
    sun = (
        "🧴 Use sunscreen"
        if needs_sun_protection(data.main.temp)
        else "⛅ No sun protection needed"
    )
    return Recommendations(
        clothes=clothes_recommendation(data.main.temp),
        umbrella=umbrella,
        sun=sun,
    )


def weather_icon(code: str) -> str:
    """Map an OpenWeatherMap icon code to an emoji."""
    return WEATHER_ICONS.get(code) or WEATHER_ICONS.get(code[:2], "🌈")

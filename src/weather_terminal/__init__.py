"""Console weather terminal backed by the OpenWeatherMap API."""

__version__ = "1.0.0"

"""Lambda handlers for the WeatherQuest API."""

from .api_handler import api_handler, app

__all__ = ["api_handler", "app"]

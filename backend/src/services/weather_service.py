"""Weather resolution chain.

Providers are tried strictly in order until one returns an observation.
Failures are logged and never reach the caller; when nothing live is
available a static placeholder observation is returned instead.
"""

import logging
from datetime import UTC, datetime

from models.observation import ConditionCode, Observation
from services.accuweather_provider import AccuWeatherProvider
from services.errors import UpstreamError
from services.openweather_provider import OpenWeatherProvider
from services.weather_gov_provider import WeatherGovProvider
from services.weather_provider import WeatherProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_SOURCE = "placeholder"


def placeholder_observation(api_error: bool = False) -> Observation:
    """Static observation shown when no live provider is reachable or configured."""
    return Observation(
        temperature=72,
        temperature_f=72,
        temperature_c=22,
        condition=ConditionCode.PARTLY_CLOUDY,
        condition_text="Partly Cloudy",
        humidity=65,
        wind_speed=8,
        wind_direction="NW",
        pressure=30.15,
        real_feel=74,
        cloud_cover=40,
        location="Your Location",
        timestamp=datetime.now(UTC).isoformat(),
        source=PLACEHOLDER_SOURCE,
        is_mock_data=True,
        api_error=api_error,
    )


def default_providers() -> list[WeatherProvider]:
    """Government source first, then the commercial providers."""
    return [WeatherGovProvider(), AccuWeatherProvider(), OpenWeatherProvider()]


class WeatherService:
    """Resolve current conditions for a coordinate through the provider chain."""

    def __init__(self, providers: list[WeatherProvider] | None = None):
        self.providers = providers if providers is not None else default_providers()

    def get_current_observation(self, latitude: float, longitude: float) -> Observation:
        """Return one normalized observation. Never raises for provider problems."""
        failed: set[str] = set()

        for provider in self.providers:
            if not provider.is_configured():
                logger.info("Skipping %s: not configured", provider.name)
                continue
            if provider.fallback_for and provider.fallback_for not in failed:
                continue

            try:
                observation = provider.fetch(latitude, longitude)
                logger.info(
                    "Resolved weather for %s,%s from %s",
                    latitude,
                    longitude,
                    provider.name,
                )
                return observation
            except UpstreamError as e:
                logger.warning("Weather provider failed: %s", e)
            except Exception as e:
                logger.error(
                    "Unexpected error from weather provider %s: %s",
                    provider.name,
                    e,
                    exc_info=True,
                )
            failed.add(provider.name)

        logger.warning(
            "No live weather for %s,%s; returning placeholder", latitude, longitude
        )
        return placeholder_observation(api_error=bool(failed))

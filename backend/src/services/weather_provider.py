"""Common contract for live weather providers."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any

import requests

from models.observation import Observation
from services.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def provider_timeout() -> float:
    """Per-request timeout for outbound provider calls."""
    return float(os.environ.get("WEATHER_PROVIDER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))


class WeatherProvider(ABC):
    """A source of current conditions.

    ``fetch`` either returns a normalized Observation or raises UpstreamError.
    Providers never retry; the resolution chain moves on instead.
    """

    name: str = "provider"
    # Name of the provider this one backs up. When set, this provider is only
    # attempted after that provider was attempted and failed.
    fallback_for: str | None = None

    def __init__(self, timeout: float | None = None, session=None):
        self.timeout = timeout if timeout is not None else provider_timeout()
        self.session = session or requests

    def is_configured(self) -> bool:
        """Providers that need credentials override this."""
        return True

    @abstractmethod
    def fetch(self, latitude: float, longitude: float) -> Observation:
        """Current conditions at a coordinate."""

    def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET a URL and decode JSON; any failure becomes UpstreamError."""
        try:
            response = self.session.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise UpstreamError(self.name, f"timed out after {self.timeout}s")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise UpstreamError(self.name, f"HTTP {status}")
        except requests.exceptions.RequestException as e:
            raise UpstreamError(self.name, f"request failed: {e}")
        except ValueError as e:
            raise UpstreamError(self.name, f"invalid JSON: {e}")

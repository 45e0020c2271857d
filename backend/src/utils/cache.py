"""Process-wide caches.

Observations are never cached; only slow-changing lookups such as provider
location keys live here.
"""

from cachetools import TTLCache

CACHE_TTL_LONG_SECONDS = 3600  # 1 hour

# AccuWeather location keys by rounded coordinate
_location_key_cache: TTLCache = TTLCache(maxsize=2000, ttl=CACHE_TTL_LONG_SECONDS)


def location_cache_key(latitude: float, longitude: float) -> str:
    """Round to ~1 km so nearby lookups share a key."""
    return f"{round(latitude, 2)},{round(longitude, 2)}"


def get_location_key_cache() -> TTLCache:
    """Get the location key cache for direct access."""
    return _location_key_cache


def clear_all_caches() -> None:
    """Clear all caches. Useful for testing."""
    _location_key_cache.clear()


# Cache-Control header values
CACHE_CONTROL_NO_STORE = "no-store"  # Live observations
CACHE_CONTROL_PUBLIC_SHORT = "public, max-age=60"  # Leaderboard
CACHE_CONTROL_PRIVATE = "private, no-cache"  # User-specific data

"""Unit conversions shared by the weather providers."""

MS_TO_MPH = 2.237
KMH_PER_MPH = 1.609344
PA_PER_INHG = 3386.39
HPA_TO_INHG = 0.02953

COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]


def celsius_to_fahrenheit(celsius: float) -> int:
    return round(celsius * 9 / 5 + 32)


def fahrenheit_to_celsius(fahrenheit: float) -> int:
    return round((fahrenheit - 32) * 5 / 9)


def ms_to_mph(meters_per_second: float) -> int:
    return round(meters_per_second * MS_TO_MPH)


def kmh_to_mph(kilometers_per_hour: float) -> int:
    return round(kilometers_per_hour / KMH_PER_MPH)


def pa_to_inhg(pascals: float) -> float:
    return round(pascals / PA_PER_INHG, 2)


def hpa_to_inhg(hectopascals: float) -> float:
    return round(hectopascals * HPA_TO_INHG, 2)


def degrees_to_compass(degrees: float) -> str:
    """Map a bearing in degrees onto the 8-point compass."""
    index = round(degrees / 45) % 8
    return COMPASS_POINTS[int(index)]
